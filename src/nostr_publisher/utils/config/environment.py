"""
Environment variable overrides for configuration management.

Every override uses the ``NOSTR_PUBLISHER_`` prefix; values are converted
to the type of the setting they replace.
"""

import json
import logging
import os
from copy import deepcopy
from typing import Any, Dict, Mapping, Optional, Tuple

from ...exceptions.config_exceptions import EnvironmentVariableError
from .paths import ConfigPaths

logger = logging.getLogger(__name__)


class EnvironmentHandler:
    """Applies environment variable overrides to a settings dictionary."""

    def get_env_mapping(self) -> Dict[str, Tuple[str, str]]:
        """
        Map environment variable names to (config key, target type).

        Returns:
            Dictionary of variable name to dot-path key and type name
        """
        prefix = ConfigPaths.ENV_PREFIX
        return {
            f"{prefix}PUBKEY": ("publisher.pubkey", "string"),
            f"{prefix}CLIENT_TAG": ("publisher.client_tag", "string"),
            f"{prefix}STATIC_D_TAG": ("publisher.static_d_tag", "boolean"),
            f"{prefix}AUTO_UPDATE": ("publisher.auto_update", "boolean"),
            f"{prefix}PUBLICATION_TYPE": ("publisher.publication_type", "string"),
            f"{prefix}RELAYS": ("relays.default", "list"),
            f"{prefix}RELAY_CATEGORIES": ("relays.categories", "json"),
            f"{prefix}LOG_LEVEL": ("logging.level", "string"),
            f"{prefix}LOG_FORMAT": ("logging.format", "string"),
            f"{prefix}LOG_FILE": ("logging.file", "string"),
        }

    def convert_env_value(self, value: str, target_type: str = "string", variable_name: Optional[str] = None) -> Any:
        """
        Convert an environment variable string to a Python value.

        Args:
            value: Raw variable value
            target_type: 'string', 'boolean', 'integer', 'list' or 'json'
            variable_name: Variable name reported in errors

        Returns:
            Converted value, None for an empty string

        Raises:
            EnvironmentVariableError: If conversion fails
        """
        if not value:
            return None

        try:
            if target_type == "boolean":
                lowered = value.strip().lower()
                if lowered in ("true", "1", "yes", "on"):
                    return True
                if lowered in ("false", "0", "no", "off"):
                    return False
                raise ValueError("expected true/false")
            elif target_type == "integer":
                return int(value)
            elif target_type == "list":
                return [item.strip() for item in value.replace(" ", ",").split(",") if item.strip()]
            elif target_type == "json":
                return json.loads(value)
            return value
        except (ValueError, json.JSONDecodeError) as e:
            raise EnvironmentVariableError(
                f"Failed to convert environment variable value '{value}' to {target_type}: {e}",
                variable_name,
            ) from e

    def apply_environment_overrides(
        self,
        config: Dict[str, Any],
        environ: Optional[Mapping[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Return a copy of ``config`` with environment overrides applied.

        Unconvertible values are logged and skipped.
        """
        environ = os.environ if environ is None else environ
        result = deepcopy(config)

        for env_var, (config_key, target_type) in self.get_env_mapping().items():
            raw_value = environ.get(env_var)
            if raw_value is None:
                continue
            try:
                value = self.convert_env_value(raw_value, target_type, env_var)
            except EnvironmentVariableError as e:
                logger.warning(f"Ignoring environment variable {env_var}: {e.args[0]}")
                continue
            if value is None:
                continue
            self._set_nested_value(result, config_key, value)
            logger.debug(f"Applied environment override: {env_var} -> {config_key}")

        return result

    def _set_nested_value(self, config: Dict[str, Any], key_path: str, value: Any) -> None:
        keys = key_path.split(".")
        current = config
        for key in keys[:-1]:
            current = current.setdefault(key, {})
        current[keys[-1]] = value
