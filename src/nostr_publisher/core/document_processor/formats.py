"""
Source format detection.

Documents are published from AsciiDoc or Markdown sources. The format
decides how headers, attributes and defaults are interpreted.
"""

from enum import Enum
from pathlib import Path
from typing import Union

from ...exceptions.compiler_exceptions import ConfigConstraintError


class DocumentFormat(Enum):
    """Supported source formats."""
    ASCIIDOC = "asciidoc"
    MARKDOWN = "markdown"

    def __str__(self) -> str:
        return self.value

    @property
    def header_marker(self) -> str:
        """Character repeated to mark a header of a given depth."""
        return "=" if self is DocumentFormat.ASCIIDOC else "#"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "DocumentFormat":
        """Detect the format from a file extension.

        Raises:
            ConfigConstraintError: If the extension is not supported
        """
        extension = Path(path).suffix.lower()
        if extension in _EXTENSIONS:
            return _EXTENSIONS[extension]

        supported = ", ".join(_EXTENSIONS)
        raise ConfigConstraintError(
            f"Unsupported file format: {extension or '(none)'}. Supported: {supported}",
            document_path=str(path),
            parameter="format",
        )


_EXTENSIONS = {
    ".adoc": DocumentFormat.ASCIIDOC,
    ".asciidoc": DocumentFormat.ASCIIDOC,
    ".md": DocumentFormat.MARKDOWN,
    ".markdown": DocumentFormat.MARKDOWN,
}
