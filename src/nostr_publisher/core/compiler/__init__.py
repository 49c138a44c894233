"""
Graph compiler: turns section trees into index and content units.
"""

from .configuration import ContentConfiguration, MIN_CONTENT_LEVEL, MAX_CONTENT_LEVEL
from .units import (
    INDEX_KIND,
    CompilationResult,
    CompiledUnit,
    ContentReference,
    ContentUnit,
    IndexUnit,
    SectionType,
)
from .graph_compiler import GraphCompiler

__all__ = [
    "ContentConfiguration",
    "MIN_CONTENT_LEVEL",
    "MAX_CONTENT_LEVEL",
    "INDEX_KIND",
    "CompilationResult",
    "CompiledUnit",
    "ContentReference",
    "ContentUnit",
    "IndexUnit",
    "SectionType",
    "GraphCompiler",
]
