"""
Configuration file paths and constants for the Nostr publisher.
"""

from dataclasses import dataclass


@dataclass
class ConfigPaths:
    """Configuration file paths and constants."""

    DEFAULT_CONFIG_FILE: str = "nostrpublisher.config.json"
    ENV_FILE: str = ".env"
    ENV_PREFIX: str = "NOSTR_PUBLISHER_"
