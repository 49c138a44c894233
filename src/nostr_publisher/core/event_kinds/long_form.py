"""
Long-form Content (kind 30023)

Articles and blog posts in Markdown (NIP-23). Supports NIP-27 style
reference tags and an optional kind 1111 notification addressing the
article.
"""

from typing import Any, Dict, List

from .base import EventKindHandler
from .types import Event, EventKind

NOTIFICATION_KIND = 1111

_REFERENCE_TAGS = {
    "event": "e",
    "address": "a",
    "profile": "p",
}


class LongFormContentHandler(EventKindHandler):
    """Handler for long-form articles."""

    kind = EventKind.LONG_FORM.value
    name = "Long-form Content"
    description = "Long-form text content like articles or blog posts in Markdown format (NIP-23)"

    def required_fields(self) -> List[str]:
        return ["title"]

    def optional_fields(self) -> Dict[str, str]:
        fields = super().optional_fields()
        fields.update({
            "references": "List of NIP-27 references ({type: event|address|profile, id, relay})",
            "create_notification": "Also emit a kind 1111 notification for the article",
            "notification_text": "Text of the notification event",
        })
        return fields

    def validate_kind_fields(self, config: Dict[str, Any]) -> List[str]:
        errors = []
        references = config.get("references")
        if references is None:
            return errors

        if not isinstance(references, list):
            return ["references must be a list"]

        for index, reference in enumerate(references):
            if not isinstance(reference, dict) or not reference.get("id"):
                errors.append(f"references[{index}] must have an id field")
            elif reference.get("type") not in _REFERENCE_TAGS:
                errors.append(
                    f"references[{index}] type must be one of: {', '.join(_REFERENCE_TAGS)}"
                )
        return errors

    def kind_tags(self, config: Dict[str, Any], content: str) -> List[List[str]]:
        tags = []
        for reference in config.get("references") or []:
            if not isinstance(reference, dict):
                continue
            tag_name = _REFERENCE_TAGS.get(reference.get("type"))
            if tag_name and reference.get("id"):
                tags.append([tag_name, str(reference["id"]), str(reference.get("relay") or "")])
        return tags

    def post_process(self, event: Event, config: Dict[str, Any]) -> List[Event]:
        if not config.get("create_notification"):
            return []
        return [self._notification_event(event, config)]

    def _notification_event(self, article: Event, config: Dict[str, Any]) -> Event:
        """Kind 1111 notification pointing at the article address."""
        address = article.address(config.get("pubkey"))
        title = config.get("title") or "New Article"
        text = config.get("notification_text") or f"A new article has been posted: {title}"

        return Event(
            kind=NOTIFICATION_KIND,
            content=f"{text}\nnostr:{address}",
            tags=[
                ["A", address, ""],
                ["K", str(NOTIFICATION_KIND)],
                ["a", address, ""],
                ["k", str(NOTIFICATION_KIND)],
            ],
            created_at=article.created_at,
            pubkey=article.pubkey,
        )
