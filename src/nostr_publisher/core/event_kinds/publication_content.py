"""
Publication Content (kind 30041)

Sections, chapters or zettels that make up a publication. Glossary terms
written as ``[[term]]`` or ``[[term|definition]]`` become wikilink tags.
"""

import re
from typing import Any, Dict, List

from .base import EventKindHandler
from .types import EventKind

_WIKILINK_PATTERN = re.compile(r'\[\[([^\[\]|]+?)(?:\|([^\[\]]*?))?\]\]')


def find_wikilinks(content: str) -> List[Dict[str, str]]:
    """
    Wikilinks referenced in text, first occurrence of each term only.

    Example:
        >>> find_wikilinks("See [[relay|A server]] and [[relay]].")
        [{'term': 'relay', 'definition': 'A server'}]
    """
    links = []
    seen = set()
    for match in _WIKILINK_PATTERN.finditer(content or ""):
        term = match.group(1).strip()
        if not term or term in seen:
            continue
        seen.add(term)
        links.append({"term": term, "definition": (match.group(2) or "").strip()})
    return links


class PublicationContentHandler(EventKindHandler):
    """Handler for publication content sections."""

    kind = EventKind.PUBLICATION_CONTENT.value
    name = "Publication Content"
    description = "Publication content sections (chapters, episodes, zettels) that make up a curated publication"

    def required_fields(self) -> List[str]:
        return ["title"]

    def optional_fields(self) -> Dict[str, str]:
        fields = super().optional_fields()
        fields["wikilinks"] = "List of wikilink definitions ({term, definition, relay, reference})"
        return fields

    def validate_kind_fields(self, config: Dict[str, Any]) -> List[str]:
        wikilinks = config.get("wikilinks")
        if wikilinks is None:
            return []
        if not isinstance(wikilinks, list):
            return ["wikilinks must be a list"]
        return [
            f"wikilinks[{index}] must have at least a 'term' field"
            for index, link in enumerate(wikilinks)
            if not isinstance(link, dict) or not link.get("term")
        ]

    def kind_tags(self, config: Dict[str, Any], content: str) -> List[List[str]]:
        links = [link for link in config.get("wikilinks") or [] if isinstance(link, dict) and link.get("term")]
        known = {link["term"] for link in links}
        links.extend(link for link in find_wikilinks(content) if link["term"] not in known)

        return [
            [
                "wikilink",
                str(link["term"]),
                str(link.get("definition") or ""),
                str(link.get("relay") or ""),
                str(link.get("reference") or ""),
            ]
            for link in links
        ]
