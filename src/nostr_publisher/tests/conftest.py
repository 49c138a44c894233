"""Shared test fixtures and configuration for Nostr publisher tests."""

import pytest
from pathlib import Path
from unittest.mock import Mock

from nostr_publisher.core.document_processor import DocumentFormat, MetadataExtractor, SectionTreeParser
from nostr_publisher.core.event_kinds import EventKindRegistry
from nostr_publisher.core.identifiers import FixedClock
from nostr_publisher.core.publishing import DirectDocumentPublisher, PublishResult

FIXTURES_DIR = Path(__file__).parent / "fixtures"
STAMP = 1700000000


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the sample documents."""
    return FIXTURES_DIR


@pytest.fixture
def fixture_path():
    """Resolve a sample document by file name."""
    def _resolve(name: str) -> Path:
        path = FIXTURES_DIR / name
        assert path.exists(), f"missing fixture {name}"
        return path
    return _resolve


@pytest.fixture
def registry() -> EventKindRegistry:
    return EventKindRegistry.with_defaults()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(STAMP)


@pytest.fixture
def document_publisher(registry, clock) -> DirectDocumentPublisher:
    """Publisher without a transport; every run is a dry run."""
    return DirectDocumentPublisher(registry=registry, clock=clock)


@pytest.fixture
def mock_transport():
    """Publisher double accepting every event with a predictable id."""
    transport = Mock()
    counter = {"value": 0}

    def _publish(event):
        counter["value"] += 1
        return PublishResult(success=True, event_id=f"{counter['value']:064x}", relays=["wss://relay.example.com"])

    transport.publish.side_effect = _publish
    return transport


@pytest.fixture
def parse_asciidoc():
    """Extract and parse AsciiDoc text into (extraction, tree)."""
    def _parse(text: str):
        extraction = MetadataExtractor().extract(text, DocumentFormat.ASCIIDOC)
        tree = SectionTreeParser().parse(
            extraction.body,
            extraction.title,
            title_line=extraction.title_line or 1,
            first_body_line=extraction.body_line,
        )
        return extraction, tree
    return _parse
