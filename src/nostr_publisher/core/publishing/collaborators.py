"""
Publishing collaborators.

Contracts for the services the publisher hands work to (transport, relay
lookup and signing identity) plus simple implementations for offline use.
Network transport and signing live outside this package; the bundled
JsonLinesPublisher writes unsigned events for an external signer.
"""

import json
import hashlib
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, IO, List, Optional, Protocol, Sequence, Union, runtime_checkable

from ..event_kinds.types import Event

logger = logging.getLogger(__name__)


@dataclass
class PublishResult:
    """Outcome of handing one event to a publisher."""
    success: bool
    event_id: Optional[str] = None
    relays: List[str] = field(default_factory=list)
    error: Optional[str] = None


@runtime_checkable
class Publisher(Protocol):
    """Signs and transmits events."""

    def publish(self, event: Event) -> PublishResult:
        ...


@runtime_checkable
class RelayConfigResolver(Protocol):
    """Turns a relay category name or URL list into relay URLs."""

    def resolve(self, category_or_urls: Union[str, Sequence[str], None]) -> List[str]:
        ...


@runtime_checkable
class KeyProvider(Protocol):
    """Supplies the public key events are published under."""

    def public_key(self) -> str:
        ...


def compute_event_id(event: Event, pubkey: Optional[str] = None) -> str:
    """
    NIP-01 event id: sha256 of the serialized ``[0, pubkey, created_at, kind, tags, content]``.
    """
    serialized = json.dumps(
        [0, pubkey or event.pubkey or "", event.created_at, event.kind, event.tags, event.content],
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


class JsonLinesPublisher:
    """
    Publisher that appends events as JSON lines for an external signer.

    Each line holds the unsigned event plus its NIP-01 id, which is also
    returned so index events can carry event-id hints.

    Args:
        target: File path or open text stream
        relays: Relay URLs recorded with every event
    """

    def __init__(self, target: Union[str, Path, IO[str]], relays: Optional[List[str]] = None) -> None:
        self.target = target
        self.relays = list(relays or [])
        self.published: List[Dict] = []

    def publish(self, event: Event) -> PublishResult:
        event_id = compute_event_id(event)
        record = dict(event.to_dict(), id=event_id)
        if self.relays:
            record["relays"] = self.relays

        line = json.dumps(record, ensure_ascii=False)
        try:
            if isinstance(self.target, (str, Path)):
                with open(self.target, "a", encoding="utf-8") as handle:
                    handle.write(line + "\n")
            else:
                self.target.write(line + "\n")
        except OSError as e:
            logger.error(f"Failed to write event {event_id}: {e}")
            return PublishResult(success=False, error=str(e))

        self.published.append(record)
        logger.debug(f"Wrote kind {event.kind} event {event_id}")
        return PublishResult(success=True, event_id=event_id, relays=self.relays)


class StaticRelayResolver:
    """
    Relay resolver backed by a fixed category table.

    URL lists and comma or space separated URL strings pass through; names
    are looked up in ``categories``; anything else yields ``default``.
    """

    def __init__(
        self,
        categories: Optional[Dict[str, List[str]]] = None,
        default: Optional[List[str]] = None
    ) -> None:
        self.categories = {name: list(urls) for name, urls in (categories or {}).items()}
        self.default = list(default or [])

    def resolve(self, category_or_urls: Union[str, Sequence[str], None]) -> List[str]:
        if category_or_urls is None or category_or_urls == "":
            return list(self.default)

        if not isinstance(category_or_urls, str):
            return [str(url) for url in category_or_urls if url]

        if "://" in category_or_urls:
            return [url for url in re.split(r'[\s,]+', category_or_urls) if url]

        if category_or_urls in self.categories:
            return list(self.categories[category_or_urls])

        logger.warning(f"Unknown relay category '{category_or_urls}', using default relays")
        return list(self.default)


class StaticKeyProvider:
    """Key provider returning a fixed public key."""

    def __init__(self, public_key: str) -> None:
        self._public_key = public_key

    def public_key(self) -> str:
        return self._public_key
