"""Configuration management package.

Usage:
    from nostr_publisher.utils.config import ConfigManager

    config = ConfigManager()
    relays = config.get("relays.default", [])
"""

from .manager import ConfigManager, DEFAULT_CONFIG, merge_configs
from .paths import ConfigPaths
from .file_operations import FileOperations
from .schema_validation import SchemaValidator, SETTINGS_SCHEMA
from .environment import EnvironmentHandler

__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG",
    "merge_configs",
    "ConfigPaths",
    "FileOperations",
    "SchemaValidator",
    "SETTINGS_SCHEMA",
    "EnvironmentHandler",
]
