"""
Event kinds.

Handlers that render compiled units into tagged Nostr events, and the
registry that maps kind numbers to handlers.
"""

from .types import Event, EventKind, SUPPORTED_KIND_NAMES
from .base import EventKindHandler
from .long_form import LongFormContentHandler
from .publication_index import PublicationIndexHandler, PUBLICATION_TYPES, PUBKEY_PLACEHOLDER
from .publication_content import PublicationContentHandler, find_wikilinks
from .wiki_article import WikiArticleHandler
from .registry import EventKindRegistry

__all__ = [
    "Event",
    "EventKind",
    "SUPPORTED_KIND_NAMES",
    "EventKindHandler",
    "LongFormContentHandler",
    "PublicationIndexHandler",
    "PUBLICATION_TYPES",
    "PUBKEY_PLACEHOLDER",
    "PublicationContentHandler",
    "find_wikilinks",
    "WikiArticleHandler",
    "EventKindRegistry",
]
