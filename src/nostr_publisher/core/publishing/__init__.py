"""
Publishing: configuration resolution, collaborators and the orchestrator.
"""

from .collaborators import (
    JsonLinesPublisher,
    KeyProvider,
    PublishResult,
    Publisher,
    RelayConfigResolver,
    StaticKeyProvider,
    StaticRelayResolver,
    compute_event_id,
)
from .configuration import (
    LONG_FORM_LEVEL_MESSAGE,
    MARKDOWN_KIND_MESSAGE,
    MARKDOWN_LEVEL_MESSAGE,
    resolve_configuration,
)
from .report import PublicationReport
from .publisher import CompiledDocument, DirectDocumentPublisher, RenderedUnit, DEFAULT_SETTINGS

__all__ = [
    "JsonLinesPublisher",
    "KeyProvider",
    "PublishResult",
    "Publisher",
    "RelayConfigResolver",
    "StaticKeyProvider",
    "StaticRelayResolver",
    "compute_event_id",
    "LONG_FORM_LEVEL_MESSAGE",
    "MARKDOWN_KIND_MESSAGE",
    "MARKDOWN_LEVEL_MESSAGE",
    "resolve_configuration",
    "PublicationReport",
    "CompiledDocument",
    "DirectDocumentPublisher",
    "RenderedUnit",
    "DEFAULT_SETTINGS",
]
