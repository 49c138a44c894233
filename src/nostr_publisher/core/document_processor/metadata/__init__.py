"""
Metadata extraction for source documents.

Provides the header attribute extractor, frontmatter parsing and the alias
table that normalizes attribute names.
"""

from .attributes import (
    ATTRIBUTE_ALIASES,
    AttributeDictionary,
    AuthorInfo,
    canonical_key,
    parse_author_line,
    parse_boolean,
    parse_revision_line,
)
from .extractor import MetadataExtractor, MetadataExtractionResult
from .frontmatter import FrontmatterParser, FrontmatterResult

__all__ = [
    "ATTRIBUTE_ALIASES",
    "AttributeDictionary",
    "AuthorInfo",
    "canonical_key",
    "parse_author_line",
    "parse_boolean",
    "parse_revision_line",
    "MetadataExtractor",
    "MetadataExtractionResult",
    "FrontmatterParser",
    "FrontmatterResult",
]
