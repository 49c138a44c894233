"""
Publication Index (kind 30040)

Table-of-contents events for curated publications. Content is always
empty; the ordered ``a`` tags point at the sections of the publication.
"""

from typing import Any, Dict, List

from .base import EventKindHandler
from .types import EventKind
from ..document_processor.metadata.attributes import parse_boolean

PUBLICATION_TYPES = ["book", "illustrated", "magazine", "documentation", "academic", "blog", "tutorial"]

# Stands in for the author key until the publisher signs the events.
PUBKEY_PLACEHOLDER = "<pubkey>"


class PublicationIndexHandler(EventKindHandler):
    """Handler for publication indexes."""

    kind = EventKind.PUBLICATION_INDEX.value
    name = "Publication Index"
    description = "Curated publication index serving as table of contents for organized content collections"

    def required_fields(self) -> List[str]:
        return ["title", "auto_update"]

    def optional_fields(self) -> Dict[str, str]:
        fields = super().optional_fields()
        fields.update({
            "author": "Author name(s) for display",
            "type": f"Publication type ({', '.join(PUBLICATION_TYPES)})",
            "version": "Edition or version information",
            "published_by": "Publisher information",
            "published_on": "Publication date (YYYY-MM-DD)",
            "source": "URL to original source",
            "isbn": "ISBN identifier (rendered as an i tag)",
            "content_references": "Ordered sections of the publication",
            "original_author": "Original author pubkey (for derivative works)",
            "original_event": "Original event id (for derivative works)",
        })
        return fields

    def validate_kind_fields(self, config: Dict[str, Any]) -> List[str]:
        errors = []

        if "auto_update" in config and parse_boolean(config["auto_update"]) is None:
            errors.append("auto_update must be true or false")

        publication_type = config.get("type")
        if publication_type is not None and publication_type not in PUBLICATION_TYPES:
            errors.append(f"type must be one of: {', '.join(PUBLICATION_TYPES)}")

        references = config.get("content_references")
        if references is not None:
            if not isinstance(references, list):
                errors.append("content_references must be a list")
            else:
                for index, reference in enumerate(references):
                    data = _reference_data(reference)
                    if not data.get("kind") or not data.get("d_tag"):
                        errors.append(f"content_references[{index}] must have kind and d_tag fields")

        if config.get("original_author") and not config.get("original_event"):
            errors.append("original_event is required when original_author is specified")
        if config.get("original_event") and not config.get("original_author"):
            errors.append("original_author is required when original_event is specified")

        return errors

    def event_content(self, config: Dict[str, Any], content: str) -> str:
        return ""

    def kind_tags(self, config: Dict[str, Any], content: str) -> List[List[str]]:
        tags = []

        authors = config.get("author")
        if isinstance(authors, str):
            authors = [authors]
        for author in authors or []:
            tags.append(["author", str(author)])

        auto_update = parse_boolean(config.get("auto_update"))
        tags.append(["auto-update", "false" if auto_update is False else "true"])

        for key in ("type", "version", "published_by", "published_on", "source"):
            if config.get(key):
                tags.append([key, str(config[key])])

        if config.get("isbn"):
            isbn = str(config["isbn"])
            tags.append(["i", isbn if isbn.startswith("isbn:") else f"isbn:{isbn}"])

        if config.get("original_author"):
            tags.append(["p", str(config["original_author"])])
        if config.get("original_event"):
            tags.append(["E", str(config["original_event"]), "", ""])

        default_pubkey = config.get("pubkey") or PUBKEY_PLACEHOLDER
        for reference in config.get("content_references") or []:
            data = _reference_data(reference)
            if not data.get("kind") or not data.get("d_tag"):
                continue
            pubkey = data.get("pubkey") or default_pubkey
            tags.append([
                "a",
                f"{data['kind']}:{pubkey}:{data['d_tag']}",
                str(data.get("relay") or ""),
                str(data.get("event_id") or ""),
            ])

        return tags


def _reference_data(reference: Any) -> Dict[str, Any]:
    if isinstance(reference, dict):
        return reference
    if hasattr(reference, "to_dict"):
        return reference.to_dict()
    return {}
