"""
Schema validation for the publisher settings file.
"""

import logging
from typing import Any, Dict, Optional

import jsonschema

from ...exceptions.config_exceptions import ConfigurationValidationError

logger = logging.getLogger(__name__)

_RELAY_LIST = {"type": "array", "items": {"type": "string", "minLength": 1}}

SETTINGS_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "version": {"type": "string"},
        "publisher": {
            "type": "object",
            "properties": {
                "client_tag": {"type": "string", "minLength": 1},
                "pubkey": {"type": ["string", "null"]},
                "static_d_tag": {"type": "boolean"},
                "auto_update": {"type": "boolean"},
                "publication_type": {
                    "type": "string",
                    "enum": ["book", "illustrated", "magazine", "documentation", "academic", "blog", "tutorial"],
                },
            },
            "additionalProperties": False,
        },
        "relays": {
            "type": "object",
            "properties": {
                "default": _RELAY_LIST,
                "categories": {"type": "object", "additionalProperties": _RELAY_LIST},
            },
            "additionalProperties": False,
        },
        "logging": {
            "type": "object",
            "properties": {
                "level": {"type": "string", "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]},
                "format": {"type": "string", "enum": ["standard", "json", "detailed"]},
                "file": {"type": ["string", "null"]},
            },
            "additionalProperties": False,
        },
    },
}


class SchemaValidator:
    """Validates settings dictionaries against ``SETTINGS_SCHEMA``."""

    def __init__(self, schema: Optional[Dict[str, Any]] = None) -> None:
        self.schema = schema or SETTINGS_SCHEMA

    def validate_config(self, config: Dict[str, Any], config_file: str = "unknown") -> bool:
        """
        Validate settings, reporting every schema violation at once.

        Returns:
            True if validation passes

        Raises:
            ConfigurationValidationError: If validation fails
        """
        validator = jsonschema.Draft7Validator(self.schema)
        errors = sorted(validator.iter_errors(config), key=lambda error: list(error.absolute_path))
        if not errors:
            return True

        validation_errors = []
        invalid_fields = []
        for error in errors:
            field_path = ".".join(str(part) for part in error.absolute_path)
            validation_errors.append(f"{field_path}: {error.message}" if field_path else error.message)
            if field_path:
                invalid_fields.append(field_path)

        logger.error(f"Configuration validation failed with {len(errors)} error(s)")
        raise ConfigurationValidationError(
            f"Configuration validation failed: {errors[0].message}",
            config_file,
            validation_errors,
            invalid_fields,
        )
