"""
Exceptions package for the Nostr publisher.

This package contains custom exception classes for document compilation
and configuration error scenarios.
"""

from .config_exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
    EnvironmentVariableError,
)

from .compiler_exceptions import (
    DocumentCompilerError,
    StructuralError,
    ConfigConstraintError,
    ValidationError,
    DuplicateIdentifierError,
    FrontmatterParseError,
    UnknownEventKindError,
)

__all__ = [
    # Configuration exceptions
    "ConfigurationError",
    "ConfigurationFileNotFoundError",
    "ConfigurationValidationError",
    "EnvironmentVariableError",
    # Compiler exceptions
    "DocumentCompilerError",
    "StructuralError",
    "ConfigConstraintError",
    "ValidationError",
    "DuplicateIdentifierError",
    "FrontmatterParseError",
    "UnknownEventKindError",
]
