"""
Document Tree Module - Hierarchical Section Management

This module provides the DocumentTree class, the read-only section tree
handed from the parser to the graph compiler.

Usage:
    >>> tree = DocumentTree(root_section)
    >>> toc = tree.get_table_of_contents()
"""

from typing import Any, Dict, List, Optional
import logging

from .section import DocumentSection

logger = logging.getLogger(__name__)


class DocumentTree:
    """
    Section tree rooted at the document title.

    The tree is built once by the SectionTreeParser. Sections are numbered
    in pre-order so consumers can rely on ``source_order`` matching the
    order of headers in the source text.

    Attributes:
        root: Section for the level-1 document title
        _sections: Flat pre-order list of all sections
        _title_index: Lower-cased title lookup for search operations
    """

    def __init__(self, root: DocumentSection) -> None:
        self.root = root
        self._sections: List[DocumentSection] = []
        self._title_index: Dict[str, List[DocumentSection]] = {}
        self.reindex()

    def reindex(self) -> None:
        """Rebuild the flat section list and assign source order."""
        self._sections = list(self.root.walk())
        self._title_index = {}
        for order, section in enumerate(self._sections):
            section.source_order = order
            self._title_index.setdefault(section.title.lower(), []).append(section)

    def get_all_sections(self) -> List[DocumentSection]:
        """Get all sections in pre-order."""
        return list(self._sections)

    def find_section_by_title(self, title: str, case_sensitive: bool = True) -> Optional[DocumentSection]:
        """Find the first section with a matching title."""
        for section in self._title_index.get(title.lower(), []):
            if not case_sensitive or section.title == title:
                return section
        return None

    def get_sections_at_depth(self, depth: int) -> List[DocumentSection]:
        """Get all sections at a nesting depth (root = 1)."""
        return [section for section in self._sections if section.get_depth() == depth]

    def get_section_count(self) -> int:
        return len(self._sections)

    def get_max_depth(self) -> int:
        """Deepest nesting depth present in the tree."""
        return max(section.get_depth() for section in self._sections)

    def get_levels_used(self) -> List[int]:
        """Sorted marker levels present in the tree."""
        return sorted({section.level for section in self._sections})

    def get_table_of_contents(self, max_depth: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Generate a flat table of contents.

        Args:
            max_depth: Deepest nesting depth to include (None for all)

        Returns:
            List of entries with title, level, depth and line number
        """
        toc = []
        for section in self._sections:
            depth = section.get_depth()
            if max_depth is not None and depth > max_depth:
                continue
            toc.append({
                "title": section.title,
                "level": section.level,
                "depth": depth,
                "line_number": section.line_number,
            })
        return toc

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.root.title,
            "section_count": self.get_section_count(),
            "max_depth": self.get_max_depth(),
            "root": self.root.to_dict(),
        }

    def __repr__(self) -> str:
        return f"DocumentTree(title='{self.root.title}', sections={len(self._sections)})"
