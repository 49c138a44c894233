"""
Identifier generation for compiled units.

Slugs are derived from section titles. Kind handlers decide the final
``d`` tag form; this module supplies the shared slug rules and the clock
that provides the run-wide timestamp suffix.
"""

import re
import time
import threading
from typing import Callable, Iterable, Optional

_SLUG_INVALID = re.compile(r'[^A-Za-z0-9-]+')
_WIKI_INVALID = re.compile(r'[^a-zA-Z]+')
_DASH_RUNS = re.compile(r'-{2,}')


def slugify(text: str) -> str:
    """
    Lowercase, dash-separated slug of a title.

    Every run of characters outside ``[A-Za-z0-9-]`` becomes one dash;
    leading and trailing dashes are trimmed and repeated dashes collapse.

    Example:
        >>> slugify("Chapter 1: Getting Started")
        'chapter-1-getting-started'
    """
    slug = _SLUG_INVALID.sub("-", text).strip("-").lower()
    return _DASH_RUNS.sub("-", slug)


def normalize_wiki_identifier(text: str) -> str:
    """
    NIP-54 identifier normalization used by wiki articles.

    Every character that is not an ASCII letter becomes a dash, including
    digits and accented letters; the result is lowercased with dash runs
    collapsed and trimmed.

    Example:
        >>> normalize_wiki_identifier("Café Guide!")
        'caf-guide'
    """
    normalized = _WIKI_INVALID.sub("-", text).lower()
    return _DASH_RUNS.sub("-", normalized).strip("-")


def join_slugs(parts: Iterable[str]) -> str:
    """Join slug parts with dashes, skipping empty parts."""
    return "-".join(part for part in parts if part)


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class IdentifierClock:
    """
    Strictly increasing source of identifier timestamps.

    Stamps are milliseconds since the epoch by default. Two calls never
    return the same value, even when the wall clock has not advanced, so
    back-to-back runs never reuse a suffix.

    Args:
        time_source: Callable returning the current stamp value
    """

    def __init__(self, time_source: Optional[Callable[[], float]] = None) -> None:
        self._time_source = time_source or _epoch_millis
        self._last = 0
        self._lock = threading.Lock()

    def next_stamp(self) -> int:
        with self._lock:
            stamp = max(int(self._time_source()), self._last + 1)
            self._last = stamp
            return stamp


_shared_clock = IdentifierClock()


def default_clock() -> IdentifierClock:
    """Process-wide clock shared by every compiler that is not given its own."""
    return _shared_clock


class FixedClock(IdentifierClock):
    """Clock that starts at a fixed value; useful for reproducible output."""

    def __init__(self, start: int) -> None:
        super().__init__(time_source=lambda: start)
