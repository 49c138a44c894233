"""
Main configuration manager for the Nostr publisher.

Settings come from built-in defaults, an optional ``nostrpublisher.config.json``
in the project root, and ``NOSTR_PUBLISHER_*`` environment variables (a
``.env`` file is loaded first when present), in increasing priority.
"""

import os
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ...exceptions.config_exceptions import ConfigurationFileNotFoundError
from .environment import EnvironmentHandler
from .file_operations import FileOperations
from .paths import ConfigPaths
from .schema_validation import SchemaValidator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "version": "0.1.0",
    "publisher": {
        "client_tag": "nostr-publisher",
        "pubkey": None,
        "static_d_tag": False,
        "auto_update": True,
        "publication_type": "documentation",
    },
    "relays": {
        "default": [],
        "categories": {},
    },
    "logging": {
        "level": "INFO",
        "format": "standard",
        "file": None,
    },
}


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = deepcopy(value)
    return result


class ConfigManager:
    """
    Configuration manager for the Nostr publisher.

    Args:
        config_file: Settings file; a missing default file is not an error,
            a missing explicit file is
        project_root: Directory relative paths resolve against (default: cwd)
        load_env: Whether to load the .env file
        environ: Environment mapping to read overrides from (default: os.environ)
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        project_root: Optional[Union[str, Path]] = None,
        load_env: bool = True,
        environ: Optional[Mapping[str, str]] = None
    ) -> None:
        self.project_root = Path(project_root or os.getcwd()).resolve()
        self.paths = ConfigPaths()
        self.explicit_file = config_file is not None
        self.config_file = config_file or self.paths.DEFAULT_CONFIG_FILE
        self.environ = environ

        self._config: Dict[str, Any] = {}
        self._loaded = False

        self.file_ops = FileOperations(self.project_root, self.paths.ENV_FILE)
        self.schema_validator = SchemaValidator()
        self.env_handler = EnvironmentHandler()

        if load_env:
            self.file_ops.load_environment_variables()

    @property
    def config(self) -> Dict[str, Any]:
        """Current configuration, loaded on first access."""
        if not self._loaded:
            self.load_config()
        return deepcopy(self._config)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load_config(self, force_reload: bool = False) -> Dict[str, Any]:
        """
        Load configuration from all sources.

        Returns:
            Loaded configuration dictionary

        Raises:
            ConfigurationFileNotFoundError: If an explicit settings file is missing
            ConfigurationError: If the settings file cannot be parsed
            ConfigurationValidationError: If the merged settings fail the schema
        """
        if self._loaded and not force_reload:
            return deepcopy(self._config)

        file_config: Dict[str, Any] = {}
        try:
            file_config = self.file_ops.load_json_file(self.config_file)
        except ConfigurationFileNotFoundError:
            if self.explicit_file:
                raise
            logger.debug(f"No {self.config_file} found, using built-in defaults")

        merged = merge_configs(DEFAULT_CONFIG, file_config)
        merged = self.env_handler.apply_environment_overrides(merged, self.environ)
        self.schema_validator.validate_config(merged, str(self.config_file))

        self._config = merged
        self._loaded = True
        return deepcopy(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value using dot notation.

        Example:
            >>> ConfigManager().get("publisher.client_tag")
            'nostr-publisher'
        """
        config = self.config
        try:
            for part in key.split("."):
                config = config[part]
            return config
        except (KeyError, TypeError):
            return default

    def reset(self) -> None:
        """Forget the loaded configuration; the next access reloads it."""
        self._config = {}
        self._loaded = False

    def publisher_settings(self) -> Dict[str, Any]:
        """Settings in the shape ``DirectDocumentPublisher`` expects."""
        config = self.config
        publisher = config["publisher"]
        relays = config["relays"]
        return {
            "client_tag": publisher["client_tag"],
            "pubkey": publisher.get("pubkey"),
            "static_d_tag": publisher["static_d_tag"],
            "auto_update": publisher["auto_update"],
            "publication_type": publisher["publication_type"],
            "default_relays": list(relays["default"]),
            "relay_categories": {name: list(urls) for name, urls in relays["categories"].items()},
        }
