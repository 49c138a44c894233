"""
Publication report.

The structured summary returned for every publish call, successful or not.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class PublicationReport:
    """
    Result of publishing (or previewing) one document.

    ``total_events`` counts compiled units only; companion events such as
    article notifications are listed in ``events`` but not counted.

    Attributes:
        success: True when the document compiled, validated and published cleanly
        dry_run: True when no events were handed to a publisher
        errors: Every error message collected during the run
        document_title: Title of the document
        content_sections: Number of content units
        index_sections: Number of index units
        total_events: content_sections + index_sections
        structure: Unit listings, main index and metadata
        metadata: Normalized document attributes
        configuration: Resolved compile configuration
        events: Rendered events in publish order
        published_events: Summary of each event accepted by the publisher
        publish_order: Identifiers in the order events are published
    """
    success: bool
    dry_run: bool = False
    errors: List[str] = field(default_factory=list)
    document_title: str = ""
    content_sections: int = 0
    index_sections: int = 0
    total_events: int = 0
    structure: Dict[str, Any] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)
    configuration: Optional[Dict[str, Any]] = None
    events: List[Dict[str, Any]] = field(default_factory=list)
    published_events: List[Dict[str, Any]] = field(default_factory=list)
    publish_order: List[str] = field(default_factory=list)

    @classmethod
    def failure(
        cls,
        errors: List[str],
        dry_run: bool = False,
        document_title: str = ""
    ) -> "PublicationReport":
        return cls(success=False, dry_run=dry_run, errors=list(errors), document_title=document_title)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "dry_run": self.dry_run,
            "errors": list(self.errors),
            "document_title": self.document_title,
            "content_sections": self.content_sections,
            "index_sections": self.index_sections,
            "total_events": self.total_events,
            "structure": self.structure,
            "metadata": self.metadata,
            "configuration": self.configuration,
            "events": self.events,
            "published_events": self.published_events,
            "publish_order": self.publish_order,
        }
