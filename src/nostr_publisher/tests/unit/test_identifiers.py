"""Tests for slug rules and the identifier clock."""

import threading
import time

import pytest

from nostr_publisher.core.identifiers import (
    FixedClock,
    IdentifierClock,
    default_clock,
    join_slugs,
    normalize_wiki_identifier,
    slugify,
)


class TestSlugify:

    @pytest.mark.parametrize("text,expected", [
        ("Chapter 1: Getting Started", "chapter-1-getting-started"),
        ("  Leading and trailing  ", "leading-and-trailing"),
        ("Already-slugged--text", "already-slugged-text"),
        ("Ünïcode Títle", "n-code-t-tle"),
        ("!!!", ""),
    ])
    def test_slugify(self, text, expected):
        assert slugify(text) == expected

    @pytest.mark.parametrize("text,expected", [
        ("Café Guide!", "caf-guide"),
        ("Chapter 1 Intro", "chapter-intro"),
        ("NIP-54 Wiki", "nip-wiki"),
    ])
    def test_wiki_normalization_drops_non_letters(self, text, expected):
        assert normalize_wiki_identifier(text) == expected

    def test_join_slugs_skips_empty_parts(self):
        assert join_slugs(["guide", "", "chapter"]) == "guide-chapter"


class TestIdentifierClock:

    def test_stamps_strictly_increase_when_time_stands_still(self):
        clock = IdentifierClock(time_source=lambda: 1000.0)

        assert [clock.next_stamp() for _ in range(3)] == [1000, 1001, 1002]

    def test_follows_wall_clock_when_it_advances(self):
        times = iter([100.0, 500.0])
        clock = IdentifierClock(time_source=lambda: next(times))

        assert clock.next_stamp() == 100
        assert clock.next_stamp() == 500

    def test_fixed_clock(self):
        clock = FixedClock(1700000000)

        assert clock.next_stamp() == 1700000000
        assert clock.next_stamp() == 1700000001

    def test_concurrent_callers_never_share_a_stamp(self):
        clock = IdentifierClock(time_source=lambda: 42.0)
        stamps = []
        lock = threading.Lock()

        def worker():
            for _ in range(50):
                stamp = clock.next_stamp()
                with lock:
                    stamps.append(stamp)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(set(stamps)) == 200

    def test_default_stamps_have_millisecond_resolution(self):
        before = time.time_ns() // 1_000_000
        stamp = IdentifierClock().next_stamp()
        after = time.time_ns() // 1_000_000

        assert before <= stamp <= after

    def test_default_clock_is_shared(self):
        clock = default_clock()

        assert default_clock() is clock
        first = clock.next_stamp()
        assert default_clock().next_stamp() > first
