"""
Document structure package.

Section model, section tree and the AsciiDoc header parser.
"""

from .section import DocumentSection
from .tree import DocumentTree
from .parser import SectionTreeParser, MAX_SECTION_LEVEL

__all__ = [
    "DocumentSection",
    "DocumentTree",
    "SectionTreeParser",
    "MAX_SECTION_LEVEL",
]
