"""
Document metadata extraction.

Separates the document title and leading header attributes from the body
text. AsciiDoc headers carry ``:key: value`` entries plus the positional
author and revision lines; Markdown sources may start with a YAML or TOML
frontmatter block. Both may use plain ``key: value`` lines for known
attributes directly below the title.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..formats import DocumentFormat
from .attributes import (
    AttributeDictionary,
    is_known_attribute,
    looks_like_author_line,
    parse_author_line,
    parse_revision_line,
)
from .frontmatter import FrontmatterParser
from ....exceptions.compiler_exceptions import StructuralError

logger = logging.getLogger(__name__)

_ASCIIDOC_ATTRIBUTE = re.compile(
    r'^:(?P<unset>!)?(?P<key>[A-Za-z0-9_][\w\-]*)(?P<unset_suffix>!)?:(?:[ \t]+(?P<value>.*))?$'
)
_PLAIN_ATTRIBUTE = re.compile(r'^(?P<key>[A-Za-z][\w\-]*):[ \t]+(?P<value>.+)$')
_ASCIIDOC_TITLE = re.compile(r'^=[ \t]+(?P<title>\S.*?)[ \t]*$')
_MARKDOWN_TITLE = re.compile(r'^#[ \t]+(?P<title>\S.*?)(?:[ \t]+#+)?[ \t]*$')


@dataclass
class MetadataExtractionResult:
    """Output of a metadata extraction run.

    Attributes:
        title: Document title taken from the level-1 header
        attributes: Normalized attribute dictionary
        body: Document text after the header block, title excluded
        document_format: Source format the document was read as
        title_line: 1-based line number of the title header, if any
        body_line: 1-based line number where the body starts, if known
        frontmatter_type: 'yaml' or 'toml' when frontmatter was present
    """
    title: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    body: str = ""
    document_format: DocumentFormat = DocumentFormat.ASCIIDOC
    title_line: Optional[int] = None
    body_line: Optional[int] = None
    frontmatter_type: Optional[str] = None


class MetadataExtractor:
    """Extracts title, header attributes and body text from a document."""

    def __init__(self, frontmatter_parser: Optional[FrontmatterParser] = None) -> None:
        self.frontmatter_parser = frontmatter_parser or FrontmatterParser()

    def extract(
        self,
        text: str,
        document_format: DocumentFormat,
        document_path: Optional[str] = None
    ) -> MetadataExtractionResult:
        """Split a document into title, attributes and body.

        Args:
            text: Full document text
            document_format: Format used to recognize headers and attributes
            document_path: Path reported in errors

        Returns:
            MetadataExtractionResult with normalized attributes

        Raises:
            FrontmatterParseError: If a Markdown frontmatter block is malformed
            StructuralError: If the document title is missing or preceded by content
        """
        attributes = AttributeDictionary()
        frontmatter_type = None
        line_offset = 0

        if document_format is DocumentFormat.MARKDOWN:
            frontmatter = self.frontmatter_parser.parse(text)
            if frontmatter.has_frontmatter:
                for key, value in frontmatter.metadata.items():
                    self._set_attribute(attributes, str(key), value)
                frontmatter_type = frontmatter.frontmatter_type
                line_offset = frontmatter.line_count
                text = frontmatter.content_without_frontmatter

        lines = text.splitlines()

        if document_format is DocumentFormat.ASCIIDOC:
            title_index = self._find_asciidoc_title(lines, document_path)
            # Attribute entries above the title still belong to the header.
            for line in lines[:title_index]:
                self._consume_attribute_line(line, attributes, document_format)
            title = _ASCIIDOC_TITLE.match(lines[title_index]).group("title")
            body_start = self._scan_attributes(lines, title_index + 1, attributes, document_format, True)
            body_lines = lines[body_start:]
            leading_blank = 0
            while leading_blank < len(body_lines) and not body_lines[leading_blank]:
                leading_blank += 1
            body_line = body_start + leading_blank + 1 + line_offset
        else:
            body_line = None
            title_index = self._find_markdown_title(lines)
            if title_index is None:
                title = attributes.values.get("title")
                if not title:
                    raise StructuralError(
                        "Markdown document has no title. Add a '# Title' line before the body "
                        "or a title field to the frontmatter.",
                        document_path=document_path,
                        header_count=0,
                    )
                logger.debug("Markdown document has no H1 header, using frontmatter title")
                body_start = self._scan_attributes(lines, 0, attributes, document_format, False)
                body_lines = lines[body_start:]
            else:
                title = _MARKDOWN_TITLE.match(lines[title_index]).group("title")
                body_start = self._scan_attributes(lines, title_index + 1, attributes, document_format, False)
                body_lines = lines[:title_index] + lines[body_start:]

        title_line = title_index + 1 + line_offset if title_index is not None else None
        logger.debug(f"Extracted title '{title}' with {len(attributes.values)} attributes (line {title_line})")

        return MetadataExtractionResult(
            title=str(title),
            attributes=attributes.to_dict(),
            body="\n".join(body_lines).strip("\n"),
            document_format=document_format,
            title_line=title_line,
            body_line=body_line,
            frontmatter_type=frontmatter_type,
        )

    def _find_asciidoc_title(self, lines: List[str], document_path: Optional[str]) -> int:
        for index, line in enumerate(lines):
            if _ASCIIDOC_TITLE.match(line):
                return index
            stripped = line.strip()
            if not stripped or stripped.startswith("//") or _ASCIIDOC_ATTRIBUTE.match(stripped):
                continue
            raise StructuralError(
                f"Found content before the H1 header (line {index + 1}). "
                "The document must begin with a single '= Title' line.",
                document_path=document_path,
                header_count=0,
                line_numbers=[index + 1],
            )

        raise StructuralError(
            "Document has no H1 header. Add a '= Title' line at the top of the file.",
            document_path=document_path,
            header_count=0,
        )

    def _find_markdown_title(self, lines: List[str]) -> Optional[int]:
        in_fence = False
        for index, line in enumerate(lines):
            if line.strip().startswith("```"):
                in_fence = not in_fence
                continue
            if not in_fence and _MARKDOWN_TITLE.match(line):
                return index
        return None

    def _scan_attributes(
        self,
        lines: List[str],
        start: int,
        attributes: AttributeDictionary,
        document_format: DocumentFormat,
        allow_positional: bool
    ) -> int:
        """Consume contiguous attribute lines from ``start``; return the body start index."""
        index = start
        # 0: author line may follow, 1: revision line may follow, 2: neither
        positional = 0 if allow_positional else 2

        while index < len(lines):
            stripped = lines[index].strip()

            if not stripped:
                positional = 2
            elif self._consume_attribute_line(stripped, attributes, document_format):
                positional = 2
            elif positional == 0 and looks_like_author_line(stripped):
                attributes.add_authors(parse_author_line(stripped))
                positional = 1
            elif positional == 1 and parse_revision_line(stripped):
                attributes.add_revision(parse_revision_line(stripped))
                positional = 2
            else:
                break
            index += 1

        return index

    def _consume_attribute_line(
        self,
        line: str,
        attributes: AttributeDictionary,
        document_format: DocumentFormat
    ) -> bool:
        stripped = line.strip()

        if document_format is DocumentFormat.ASCIIDOC:
            match = _ASCIIDOC_ATTRIBUTE.match(stripped)
            if match:
                value = match.group("value")
                if match.group("unset") or match.group("unset_suffix"):
                    value = False
                elif value is None or not value.strip():
                    value = True
                self._set_attribute(attributes, match.group("key"), value)
                return True

        match = _PLAIN_ATTRIBUTE.match(stripped)
        if match and is_known_attribute(match.group("key")):
            self._set_attribute(attributes, match.group("key"), match.group("value"))
            return True

        return False

    def _set_attribute(self, attributes: AttributeDictionary, raw_key: str, value: Any) -> None:
        key = attributes.set(raw_key, value)
        if key == "author" and isinstance(value, str):
            attributes.add_authors(parse_author_line(value))
