"""
Document compilation errors.

Structural, constraint and duplicate-identifier errors stop a run before
anything is published. Validation errors are collected across all units so
the caller sees every problem at once. ``message`` always holds the bare
text reported in publication reports; ``str()`` adds the document path and
hints for terminal output.
"""

from typing import List, Optional


def _numbered(heading: str, items: List[str]) -> str:
    lines = [f"\n\n{heading}:"]
    lines.extend(f"  {position}. {item}" for position, item in enumerate(items, 1))
    return "\n".join(lines)


class DocumentCompilerError(Exception):
    """
    Base class for errors raised while compiling a document.

    Args:
        message: Reportable error text
        document_path: Source document, if known
        suggestions: Hints shown to the user
    """

    def __init__(
        self,
        message: str,
        document_path: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.document_path = document_path
        self.suggestions = list(suggestions or [])

    def details(self) -> str:
        return ""

    def __str__(self) -> str:
        text = self.message
        if self.document_path:
            text += f"\nDocument: {self.document_path}"
        text += self.details()
        if self.suggestions:
            text += _numbered("Suggestions", self.suggestions)
        return text


class StructuralError(DocumentCompilerError):
    """
    The document does not have exactly one ``= Title`` header at the top.

    ``line_numbers`` lists the offending lines: every level-1 header when
    there are several, or the first content line above a missing title.
    """

    def __init__(
        self,
        message: str,
        document_path: Optional[str] = None,
        header_count: Optional[int] = None,
        line_numbers: Optional[List[int]] = None
    ) -> None:
        self.header_count = header_count
        self.line_numbers = list(line_numbers or [])

        suggestions = ["Open the document with one '= Title' line and use '==' and deeper for sections"]
        if self.line_numbers:
            suggestions.append(f"See line(s) {', '.join(map(str, self.line_numbers))}")
        super().__init__(message, document_path, suggestions)


class ConfigConstraintError(DocumentCompilerError):
    """
    Format, content kind and content level do not combine.

    The message is reported verbatim, so no hints are attached.
    """

    def __init__(
        self,
        message: str,
        document_path: Optional[str] = None,
        parameter: Optional[str] = None
    ) -> None:
        super().__init__(message, document_path)
        self.parameter = parameter


class ValidationError(DocumentCompilerError):
    """One or more units failed their kind's field checks."""

    def __init__(
        self,
        message: str,
        document_path: Optional[str] = None,
        validation_errors: Optional[List[str]] = None
    ) -> None:
        super().__init__(message, document_path)
        self.validation_errors = list(validation_errors or [])

    def details(self) -> str:
        if not self.validation_errors:
            return ""
        return _numbered("Unit errors", self.validation_errors)


class DuplicateIdentifierError(DocumentCompilerError):
    """Two units compiled in one run would share a d-tag."""

    def __init__(
        self,
        message: str,
        duplicates: Optional[List[str]] = None,
        document_path: Optional[str] = None
    ) -> None:
        self.duplicates = list(duplicates or [])
        super().__init__(message, document_path, [
            "Rename one of the sibling sections",
            "Drop a d-tag attribute that collides with a generated identifier",
        ])


class FrontmatterParseError(DocumentCompilerError):
    """
    A Markdown frontmatter block could not be read.

    Attributes:
        line_number: Source line of the problem, when the parser reports one
        frontmatter_type: 'yaml' or 'toml'
        content_preview: Start of the offending block
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        frontmatter_type: Optional[str] = None,
        content_preview: Optional[str] = None
    ) -> None:
        self.line_number = line_number
        self.frontmatter_type = frontmatter_type
        self.content_preview = content_preview

        if line_number:
            message = f"{message} (line {line_number})"
        super().__init__(message)

    def details(self) -> str:
        if not self.content_preview:
            return ""
        return f"\n\n{self.frontmatter_type or 'frontmatter'} block starts with:\n{self.content_preview[:100]}"


class UnknownEventKindError(DocumentCompilerError, KeyError):
    """No handler is registered for an event kind."""

    def __init__(self, kind: int, registered: Optional[List[int]] = None) -> None:
        self.kind = kind
        suggestions = []
        if registered:
            suggestions.append(f"Registered kinds: {', '.join(map(str, registered))}")
        super().__init__(f"Event kind {kind} is not registered", suggestions=suggestions)

    def __str__(self) -> str:
        return DocumentCompilerError.__str__(self)
