"""
Event Kind Types

Core type definitions for rendered Nostr events and the closed set of
event kinds the compiler produces.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class EventKind(Enum):
    """Event kinds produced by the document compiler."""
    LONG_FORM = 30023
    PUBLICATION_INDEX = 30040
    PUBLICATION_CONTENT = 30041
    WIKI_ARTICLE = 30818

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @property
    def is_content_kind(self) -> bool:
        """True for kinds that can carry document text."""
        return self is not EventKind.PUBLICATION_INDEX

    @classmethod
    def content_kinds(cls) -> List["EventKind"]:
        return [kind for kind in cls if kind.is_content_kind]

    @classmethod
    def parse(cls, value: Union[str, int, "EventKind"]) -> Optional["EventKind"]:
        """
        Resolve a kind number or alias to a content kind.

        Accepts numbers (``30023``), numeric strings and the aliases
        ``longform``/``long-form``, ``publication``/``publication-content``
        and ``wiki``. Returns None when the value names no content kind.
        """
        if isinstance(value, EventKind):
            return value if value.is_content_kind else None

        text = str(value).strip().lower()
        if text in _KIND_ALIASES:
            return _KIND_ALIASES[text]
        return None

    def __str__(self) -> str:
        return f"{self.value} ({self.display_name})"


_DISPLAY_NAMES = {
    EventKind.LONG_FORM: "Long-form Content",
    EventKind.PUBLICATION_INDEX: "Publication Index",
    EventKind.PUBLICATION_CONTENT: "Publication Content",
    EventKind.WIKI_ARTICLE: "Wiki Article",
}

_KIND_ALIASES = {
    "30023": EventKind.LONG_FORM,
    "longform": EventKind.LONG_FORM,
    "long-form": EventKind.LONG_FORM,
    "30041": EventKind.PUBLICATION_CONTENT,
    "publication": EventKind.PUBLICATION_CONTENT,
    "publication-content": EventKind.PUBLICATION_CONTENT,
    "30818": EventKind.WIKI_ARTICLE,
    "wiki": EventKind.WIKI_ARTICLE,
}

SUPPORTED_KIND_NAMES = "30023 (longform), 30041 (publication), 30818 (wiki)"


@dataclass
class Event:
    """
    Unsigned Nostr event produced by a kind handler.

    Signing and the event id are the publisher's job; ``pubkey`` stays None
    until a key provider fills it in.

    Attributes:
        kind: Event kind number
        content: Event content
        tags: Tag arrays, each starting with the tag name
        created_at: Unix timestamp of creation
        pubkey: Hex public key of the author, if known
    """
    kind: int
    content: str = ""
    tags: List[List[str]] = field(default_factory=list)
    created_at: int = field(default_factory=lambda: int(time.time()))
    pubkey: Optional[str] = None

    def __post_init__(self):
        """Validate event data after creation."""
        if not isinstance(self.kind, int) or self.kind < 0:
            raise ValueError(f"kind must be a non-negative integer, got {self.kind!r}")
        if not isinstance(self.content, str):
            raise ValueError(f"content must be a string, got {type(self.content)}")

    def get_tag(self, name: str) -> Optional[List[str]]:
        """First tag with the given name, or None."""
        for tag in self.tags:
            if tag and tag[0] == name:
                return tag
        return None

    def get_tags(self, name: str) -> List[List[str]]:
        return [tag for tag in self.tags if tag and tag[0] == name]

    @property
    def d_tag(self) -> Optional[str]:
        tag = self.get_tag("d")
        return tag[1] if tag and len(tag) > 1 else None

    def address(self, pubkey: Optional[str] = None) -> str:
        """Addressable coordinate ``kind:pubkey:d``."""
        return f"{self.kind}:{pubkey or self.pubkey or ''}:{self.d_tag or ''}"

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "kind": self.kind,
            "created_at": self.created_at,
            "tags": [list(tag) for tag in self.tags],
            "content": self.content,
        }
        if self.pubkey:
            data["pubkey"] = self.pubkey
        return data
