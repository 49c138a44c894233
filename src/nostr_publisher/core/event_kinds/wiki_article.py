"""
Wiki Article (kind 30818)

NIP-54 wiki articles. Identifiers follow the NIP-54 normalization and are
not timestamp-suffixed, so every revision of an article replaces the last.
"""

from typing import Any, Dict, List, Optional

from .base import EventKindHandler
from .types import EventKind
from ..identifiers import normalize_wiki_identifier

_REFERENCE_MARKERS = {
    "fork_from": "fork",
    "defer_to": "defer",
}


class WikiArticleHandler(EventKindHandler):
    """Handler for wiki articles."""

    kind = EventKind.WIKI_ARTICLE.value
    name = "Wiki Article"
    description = "Collaborative wiki articles with AsciiDoc content and wikilinks (NIP-54)"
    suffix_identifiers = False

    def required_fields(self) -> List[str]:
        return ["title"]

    def optional_fields(self) -> Dict[str, str]:
        fields = super().optional_fields()
        fields.update({
            "fork_from": "Article this one was forked from ({address, event_id})",
            "defer_to": "Better version of this article ({address, event_id})",
        })
        return fields

    def make_identifier(self, text: str, include_timestamp: bool = False, stamp: Optional[int] = None) -> str:
        """NIP-54 identifier; never timestamp-suffixed since digits are not allowed."""
        return normalize_wiki_identifier(text)

    def validate_kind_fields(self, config: Dict[str, Any]) -> List[str]:
        errors = []

        explicit = config.get("d-tag")
        if explicit:
            normalized = normalize_wiki_identifier(str(explicit))
            if explicit != normalized:
                errors.append(
                    f"d-tag '{explicit}' should be normalized to '{normalized}' according to NIP-54 rules"
                )

        for key in _REFERENCE_MARKERS:
            if key not in config:
                continue
            reference = config[key]
            if not isinstance(reference, dict) or not reference.get("address") or not reference.get("event_id"):
                errors.append(f"{key} must have address and event_id fields")

        return errors

    def kind_tags(self, config: Dict[str, Any], content: str) -> List[List[str]]:
        tags = []
        for key, marker in _REFERENCE_MARKERS.items():
            reference = config.get(key)
            if not isinstance(reference, dict):
                continue
            if reference.get("address"):
                tags.append(["a", str(reference["address"]), "", marker])
            if reference.get("event_id"):
                tags.append(["e", str(reference["event_id"]), "", marker])
        return tags

