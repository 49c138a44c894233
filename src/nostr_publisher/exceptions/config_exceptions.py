"""
Settings errors for the Nostr publisher.

Raised while loading ``nostrpublisher.config.json`` and ``NOSTR_PUBLISHER_*``
overrides. Each error carries hints that the CLI prints below the message.
"""

from typing import List, Optional


def _numbered(heading: str, items: List[str]) -> str:
    lines = [f"\n\n{heading}:"]
    lines.extend(f"  {position}. {item}" for position, item in enumerate(items, 1))
    return "\n".join(lines)


class ConfigurationError(Exception):
    """
    Base class for settings problems.

    Args:
        message: What went wrong
        config_file: Settings file involved, if any
        suggestions: Hints shown to the user
    """

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.config_file = config_file
        self.suggestions = list(suggestions or [])

    def details(self) -> str:
        """Extra lines appended after the message; subclasses add their own."""
        return ""

    def __str__(self) -> str:
        text = self.message
        if self.config_file:
            text += f"\nSettings file: {self.config_file}"
        text += self.details()
        if self.suggestions:
            text += _numbered("Suggestions", self.suggestions)
        return text


class ConfigurationFileNotFoundError(ConfigurationError):
    """A settings file passed with --config-path does not exist."""

    def __init__(self, message: str, config_file: Optional[str] = None) -> None:
        super().__init__(message, config_file, [
            "Check the path given to --config-path",
            "Omit --config-path to use nostrpublisher.config.json or the built-in defaults",
        ])


class ConfigurationValidationError(ConfigurationError):
    """The merged settings do not match the settings schema."""

    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        validation_errors: Optional[List[str]] = None,
        invalid_fields: Optional[List[str]] = None
    ) -> None:
        self.validation_errors = list(validation_errors or [])
        self.invalid_fields = list(invalid_fields or [])

        suggestions = ["Allowed keys are 'publisher', 'relays', 'logging' and 'version'"]
        if self.invalid_fields:
            suggestions.append(f"Check: {', '.join(sorted(set(self.invalid_fields)))}")
        super().__init__(message, config_file, suggestions)

    def details(self) -> str:
        if not self.validation_errors:
            return ""
        return _numbered("Schema errors", self.validation_errors)


class EnvironmentVariableError(ConfigurationError):
    """A ``NOSTR_PUBLISHER_*`` variable holds a value of the wrong type."""

    def __init__(self, message: str, variable_name: Optional[str] = None) -> None:
        suggestions = []
        if variable_name:
            suggestions.append(f"Correct or unset {variable_name} (environment or .env file)")
        super().__init__(message, None, suggestions)
        self.variable_name = variable_name
