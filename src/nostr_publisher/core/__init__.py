"""
Core modules for the Nostr publisher.

This package contains the document compiler pipeline: metadata extraction,
section tree parsing, graph compilation, event kind handlers and the
publishing orchestrator.
"""

from .identifiers import IdentifierClock, FixedClock, slugify, normalize_wiki_identifier

from .document_processor import (
    DocumentFormat,
    MetadataExtractor,
    MetadataExtractionResult,
    DocumentSection,
    DocumentTree,
    SectionTreeParser,
)

from .event_kinds import (
    Event,
    EventKind,
    EventKindHandler,
    EventKindRegistry,
)

from .compiler import (
    CompilationResult,
    ContentConfiguration,
    ContentUnit,
    GraphCompiler,
    IndexUnit,
)

from .publishing import (
    CompiledDocument,
    DirectDocumentPublisher,
    PublicationReport,
    resolve_configuration,
)

__all__ = [
    "IdentifierClock",
    "FixedClock",
    "slugify",
    "normalize_wiki_identifier",
    "DocumentFormat",
    "MetadataExtractor",
    "MetadataExtractionResult",
    "DocumentSection",
    "DocumentTree",
    "SectionTreeParser",
    "Event",
    "EventKind",
    "EventKindHandler",
    "EventKindRegistry",
    "CompilationResult",
    "ContentConfiguration",
    "ContentUnit",
    "GraphCompiler",
    "IndexUnit",
    "CompiledDocument",
    "DirectDocumentPublisher",
    "PublicationReport",
    "resolve_configuration",
]
