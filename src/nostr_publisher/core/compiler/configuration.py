"""
Resolved compile configuration.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from ..document_processor.formats import DocumentFormat
from ..event_kinds.types import EventKind

MIN_CONTENT_LEVEL = 0
MAX_CONTENT_LEVEL = 6


@dataclass(frozen=True)
class ContentConfiguration:
    """
    Settings one document is compiled with.

    Attributes:
        content_level: Depth at which sections stop getting their own index (0-6)
        content_kind: Kind used for content units
        document_format: Source format of the document
        static_d_tag: Skip the timestamp suffix on generated identifiers
        sources: Where each setting came from ('argument', 'document' or 'default')
    """
    content_level: int
    content_kind: EventKind
    document_format: DocumentFormat
    static_d_tag: bool = False
    sources: Dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def is_hierarchical(self) -> bool:
        return self.content_level > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content_level": self.content_level,
            "content_kind": self.content_kind.value,
            "content_kind_name": self.content_kind.display_name,
            "document_format": str(self.document_format),
            "static_d_tag": self.static_d_tag,
            "sources": dict(self.sources),
        }
