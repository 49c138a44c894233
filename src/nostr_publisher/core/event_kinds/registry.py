"""
Event Kind Registry

Registry of event kind handlers. Built once, injected into the compiler and
the publisher, and treated as read-only while documents compile.
"""

import logging
from typing import Any, Dict, List, Union

from .base import EventKindHandler
from .types import EventKind
from .long_form import LongFormContentHandler
from .publication_index import PublicationIndexHandler
from .publication_content import PublicationContentHandler
from .wiki_article import WikiArticleHandler
from ...exceptions.compiler_exceptions import UnknownEventKindError

logger = logging.getLogger(__name__)


class EventKindRegistry:
    """Registry for event kind handlers."""

    def __init__(self):
        """Initialize an empty registry; see ``with_defaults``."""
        self._handlers: Dict[int, EventKindHandler] = {}

    @classmethod
    def with_defaults(cls) -> "EventKindRegistry":
        """Registry with handlers for every built-in kind."""
        registry = cls()
        registry.register(LongFormContentHandler())
        registry.register(PublicationIndexHandler())
        registry.register(PublicationContentHandler())
        registry.register(WikiArticleHandler())
        return registry

    def register(self, handler: EventKindHandler) -> None:
        """Register a handler, replacing any handler for the same kind."""
        if not isinstance(handler, EventKindHandler):
            raise TypeError(f"handler must be an EventKindHandler, got {type(handler)}")
        if handler.kind in self._handlers:
            logger.debug(f"Replacing handler for kind {handler.kind}")
        self._handlers[handler.kind] = handler

    def get(self, kind: Union[int, EventKind]) -> EventKindHandler:
        """
        Handler for a kind.

        Raises:
            UnknownEventKindError: If no handler is registered for the kind
        """
        number = kind.value if isinstance(kind, EventKind) else int(kind)
        try:
            return self._handlers[number]
        except KeyError:
            raise UnknownEventKindError(number, self.get_supported_kinds()) from None

    def has(self, kind: Union[int, EventKind]) -> bool:
        """Check if a handler exists for a kind."""
        number = kind.value if isinstance(kind, EventKind) else int(kind)
        return number in self._handlers

    def unregister(self, kind: Union[int, EventKind]) -> None:
        """Remove the handler for a kind."""
        number = kind.value if isinstance(kind, EventKind) else int(kind)
        self._handlers.pop(number, None)

    def get_supported_kinds(self) -> List[int]:
        """Registered kind numbers in ascending order."""
        return sorted(self._handlers)

    def describe(self) -> List[Dict[str, Any]]:
        """Name, description and fields of every registered kind."""
        return [self._handlers[kind].describe() for kind in self.get_supported_kinds()]

    def __contains__(self, kind: Union[int, EventKind]) -> bool:
        return self.has(kind)

    def __len__(self) -> int:
        return len(self._handlers)
