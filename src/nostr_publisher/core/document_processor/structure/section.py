"""
One header of an AsciiDoc document and the text up to the next header.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)


@dataclass(eq=False, repr=False)
class DocumentSection:
    """
    A section node of the document tree.

    Children are kept in document order; the tree is read-only once the
    parser hands it out.

    Attributes:
        level: Header marker depth (1 for the document title, 2-6 below it)
        title: Header text
        content: Own text (header line and child sections excluded)
        line_number: 1-based line of the header in the source file
        parent: Enclosing section, None for the document root
        header_line: Header exactly as written, used when merging subtree text
        source_order: Pre-order position, assigned by DocumentTree
        children: Sub-sections in document order

    Example:
        >>> root = DocumentSection(1, "Guide", "Preamble.", 1)
        >>> child = DocumentSection(2, "Setup", "Install it.", 5)
        >>> root.add_child(child)
        >>> child.get_depth()
        2
    """
    level: int
    title: str
    content: str
    line_number: int
    parent: Optional["DocumentSection"] = None
    header_line: Optional[str] = None
    source_order: int = 0
    children: List["DocumentSection"] = field(default_factory=list)

    def __post_init__(self):
        if not isinstance(self.level, int) or not 1 <= self.level <= 6:
            raise ValueError(f"Section level must be between 1 and 6, got {self.level!r}")
        if not isinstance(self.line_number, int) or self.line_number < 1:
            raise ValueError(f"Section line number must be 1 or greater, got {self.line_number!r}")
        if not isinstance(self.title, str) or not isinstance(self.content, str):
            raise TypeError("Section title and content must be strings")
        if self.header_line is None:
            self.header_line = f"{'=' * self.level} {self.title}"

    def add_child(self, child: "DocumentSection") -> None:
        """
        Append a sub-section.

        Raises:
            TypeError: If ``child`` is not a DocumentSection
            ValueError: If ``child`` is not nested deeper than this section
        """
        if not isinstance(child, DocumentSection):
            raise TypeError(f"Expected a DocumentSection, got {type(child).__name__}")
        if child.level <= self.level:
            raise ValueError(f"'{child.title}' (level {child.level}) cannot nest under level {self.level}")

        child.parent = self
        self.children.append(child)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def get_depth(self) -> int:
        """
        Nesting depth, counting the document root as 1.

        Depth follows parent links rather than the marker level, so a
        level-4 header placed directly under the title has depth 2.
        """
        return len(self.get_ancestors()) + 1

    def get_ancestors(self) -> List["DocumentSection"]:
        """Ancestors from the root down to the direct parent."""
        chain = []
        node = self.parent
        while node is not None:
            chain.insert(0, node)
            node = node.parent
        return chain

    def get_all_content(self, include_headers: bool = True) -> str:
        """
        Own text followed by every descendant's header and text.

        Descendant headers are kept as written so the merged text reads like
        the source subtree. Parts are joined with blank lines.
        """
        parts = [self.content.strip("\n")] if self.content.strip() else []
        for child in self.children:
            if include_headers:
                parts.append(child.header_line)
            merged = child.get_all_content(include_headers)
            if merged:
                parts.append(merged)
        return "\n\n".join(parts)

    def walk(self) -> Iterator["DocumentSection"]:
        """This section, then all descendants in pre-order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level,
            "title": self.title,
            "line_number": self.line_number,
            "source_order": self.source_order,
            "content_length": len(self.content),
            "children": [child.to_dict() for child in self.children],
        }

    def __repr__(self) -> str:
        return f"<DocumentSection {'=' * self.level} {self.title!r} @{self.line_number} ({len(self.children)} children)>"
