"""
Section Tree Parser Module - AsciiDoc Header Scanning

This module provides the SectionTreeParser class, which scans the body of an
AsciiDoc document for ``=``-marker headers and builds the section tree used
by the graph compiler.

Usage:
    >>> parser = SectionTreeParser()
    >>> tree = parser.parse("Preamble\\n\\n== Chapter\\n\\nText", title="Guide")
    >>> [child.title for child in tree.root.children]
    ['Chapter']
"""

import re
from typing import Any, Dict, List, Optional
import logging

from .section import DocumentSection
from .tree import DocumentTree
from ....exceptions.compiler_exceptions import StructuralError

logger = logging.getLogger(__name__)

MAX_SECTION_LEVEL = 6


class SectionTreeParser:
    """
    Single-pass parser that turns AsciiDoc headers into a section tree.

    A header at level d closes every open section at level >= d and opens a
    child under the nearest open section with a lower level. Skipped levels
    are kept at their literal level. Markers deeper than six are body text.
    Lines inside delimited blocks (listing, literal, passthrough, quote,
    example, comment and fenced code) are never headers.

    Attributes:
        _header_pattern: Compiled regex for ``=`` marker headers
        _delimiter_pattern: Compiled regex for block delimiter lines
    """

    def __init__(self) -> None:
        self._header_pattern = re.compile(r'^(=+)[ \t]+(\S.*?)[ \t]*$')
        self._delimiter_pattern = re.compile(r'^(-{4,}|\.{4,}|\+{4,}|_{4,}|\*{4,}|={4,}|/{4,}|```.*)[ \t]*$')

    def parse(
        self,
        body: str,
        title: str,
        title_line: int = 1,
        first_body_line: Optional[int] = None,
        document_path: Optional[str] = None
    ) -> DocumentTree:
        """
        Build the section tree for a document body.

        Args:
            body: Document text after the title and header attributes
            title: Document title, used for the root section
            title_line: Line number of the title header
            first_body_line: Line number of the first body line (defaults to title_line + 1)
            document_path: Path reported in errors

        Returns:
            DocumentTree rooted at the document title

        Raises:
            StructuralError: If the body contains another level-1 header
        """
        first_body_line = first_body_line or title_line + 1
        root = DocumentSection(level=1, title=title, content="", line_number=max(title_line, 1))

        stack: List[DocumentSection] = [root]
        buffers: Dict[int, List[str]] = {id(root): []}
        extra_titles: List[int] = []
        open_delimiter: Optional[str] = None

        for offset, line in enumerate(body.splitlines()):
            line_number = first_body_line + offset
            current = stack[-1]

            delimiter = self._delimiter_pattern.match(line.rstrip())
            if delimiter:
                marker = delimiter.group(1)
                if open_delimiter is None:
                    open_delimiter = "```" if marker.startswith("```") else marker
                elif marker == open_delimiter or (open_delimiter == "```" and marker == "```"):
                    open_delimiter = None
                buffers[id(current)].append(line)
                continue

            header = None if open_delimiter else self._header_pattern.match(line)
            if header is None:
                buffers[id(current)].append(line)
                continue

            level = len(header.group(1))
            if level == 1:
                extra_titles.append(line_number)
                continue
            if level > MAX_SECTION_LEVEL:
                logger.debug(f"Line {line_number}: marker depth {level} kept as body text")
                buffers[id(current)].append(line)
                continue

            while stack[-1].level >= level:
                stack.pop()
            parent = stack[-1]

            section = DocumentSection(
                level=level,
                title=header.group(2),
                content="",
                line_number=line_number,
                header_line=line.rstrip(),
            )
            parent.add_child(section)
            if level > parent.level + 1:
                logger.debug(
                    f"Section '{section.title}' (level {level}) placed directly under "
                    f"'{parent.title}' (level {parent.level})"
                )
            stack.append(section)
            buffers[id(section)] = []

        if open_delimiter:
            logger.warning(f"Unterminated delimited block '{open_delimiter}' in document body")

        if extra_titles:
            line_numbers = [title_line] + extra_titles
            raise StructuralError(
                f"Document has {len(line_numbers)} H1 headers; exactly one level-1 '= Title' header is allowed.",
                document_path=document_path,
                header_count=len(line_numbers),
                line_numbers=line_numbers,
            )

        for section in root.walk():
            section.content = "\n".join(buffers[id(section)]).strip("\n")

        tree = DocumentTree(root)
        logger.debug(
            f"Parsed section tree for '{title}': {tree.get_section_count()} sections, "
            f"max depth {tree.get_max_depth()}"
        )
        return tree

    def analyze_structure(self, tree: DocumentTree) -> Dict[str, Any]:
        """
        Summarize a parsed tree for previews.

        Returns:
            Dictionary with section counts per depth and the table of contents
        """
        sections_per_depth: Dict[int, int] = {}
        for section in tree.get_all_sections():
            depth = section.get_depth()
            sections_per_depth[depth] = sections_per_depth.get(depth, 0) + 1

        return {
            "title": tree.root.title,
            "total_sections": tree.get_section_count(),
            "max_depth": tree.get_max_depth(),
            "levels_used": tree.get_levels_used(),
            "sections_per_depth": sections_per_depth,
            "table_of_contents": tree.get_table_of_contents(),
        }
