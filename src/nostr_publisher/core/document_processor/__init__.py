"""
Document processing: format detection, metadata extraction and section trees.
"""

from .formats import DocumentFormat
from .metadata import MetadataExtractor, MetadataExtractionResult, FrontmatterParser
from .structure import DocumentSection, DocumentTree, SectionTreeParser

__all__ = [
    "DocumentFormat",
    "MetadataExtractor",
    "MetadataExtractionResult",
    "FrontmatterParser",
    "DocumentSection",
    "DocumentTree",
    "SectionTreeParser",
]
