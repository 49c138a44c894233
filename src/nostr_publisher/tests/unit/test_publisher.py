"""
Tests for the direct document publisher.

Covers dry runs, live runs through a transport double, failure reports and
the offline collaborators shipped with the publishing package.
"""

import io
import json
from unittest.mock import Mock

import pytest

from nostr_publisher.core.document_processor import DocumentFormat
from nostr_publisher.core.event_kinds import Event
from nostr_publisher.core.publishing import (
    MARKDOWN_LEVEL_MESSAGE,
    DirectDocumentPublisher,
    JsonLinesPublisher,
    PublishResult,
    StaticKeyProvider,
    StaticRelayResolver,
    compute_event_id,
)
from nostr_publisher.exceptions import ValidationError

PUBKEY = "b" * 64


def event_by_d_tag(report, d_tag):
    for event in report.events:
        for tag in event["tags"]:
            if tag[0] == "d" and tag[1] == d_tag:
                return event
    raise AssertionError(f"no event with d tag {d_tag}")


def tag_values(event, name):
    return [tag for tag in event["tags"] if tag[0] == name]


class TestDryRun:
    """Compiling without handing events to a transport."""

    def test_counts_and_structure(self, document_publisher, fixture_path):
        report = document_publisher.publish_document(
            fixture_path("simple-guide.adoc"), dry_run=True, static_d_tag=True
        )

        assert report.success
        assert report.dry_run
        assert report.errors == []
        assert report.document_title == "Simple Nostr Guide"
        assert (report.content_sections, report.index_sections, report.total_events) == (3, 3, 6)
        assert report.structure["main_index"]["d_tag"] == "simple-nostr-guide"
        assert len(report.structure["content_sections"]) == 3
        assert report.configuration["content_level"] == 2
        assert report.configuration["sources"]["content_level"] == "document"
        assert report.publish_order[-1] == "simple-nostr-guide"
        assert len(report.events) == 6
        assert report.published_events == []

    def test_missing_transport_means_dry_run(self, document_publisher, fixture_path):
        report = document_publisher.publish_document(fixture_path("default-test.adoc"))

        assert report.success
        assert report.dry_run
        assert report.total_events == 1

    def test_main_index_metadata(self, document_publisher, fixture_path):
        report = document_publisher.publish_document(
            fixture_path("simple-guide.adoc"), dry_run=True, static_d_tag=True
        )
        main = event_by_d_tag(report, "simple-nostr-guide")

        assert main["kind"] == 30040
        assert main["content"] == ""
        assert tag_values(main, "author") == [["author", "John Doe"]]
        assert tag_values(main, "summary") == [["summary", "A short guide to publishing on Nostr"]]
        assert tag_values(main, "client") == [["client", "nostr-publisher"]]
        assert tag_values(main, "l") == [["l", "en"]]
        assert tag_values(main, "content_level") == [["content_level", "2"]]
        assert [tag[1] for tag in tag_values(main, "t")] == ["nostr", "publishing", "guide"]

    def test_section_summaries(self, document_publisher, fixture_path):
        report = document_publisher.publish_document(
            fixture_path("simple-guide.adoc"), dry_run=True, static_d_tag=True
        )

        preamble = event_by_d_tag(report, "simple-nostr-guide-preamble")
        assert tag_values(preamble, "summary") == [["summary", "Preamble section for Simple Nostr Guide"]]
        assert tag_values(preamble, "section_type") == [["section_type", "preamble"]]

        chapter = event_by_d_tag(report, "getting-started")
        assert tag_values(chapter, "summary") == [["summary", "Index section: Getting Started"]]
        assert tag_values(chapter, "section_level") == [["section_level", "2"]]

        content = event_by_d_tag(report, "getting-started-content")
        assert tag_values(content, "summary") == [["summary", "Content section: Getting Started"]]
        assert content["content"].startswith("Before publishing")

    def test_timestamped_identifiers(self, document_publisher, fixture_path):
        report = document_publisher.publish_document(fixture_path("simple-guide.adoc"), dry_run=True)

        assert report.configuration["static_d_tag"] is False
        assert all(d_tag.endswith("-1700000000") for d_tag in report.publish_order)

    def test_settings_supply_static_identifiers(self, registry, clock, fixture_path):
        publisher = DirectDocumentPublisher(registry=registry, clock=clock, settings={"static_d_tag": True})
        report = publisher.publish_document(fixture_path("simple-guide.adoc"), dry_run=True)

        assert report.configuration["static_d_tag"] is True
        assert "simple-nostr-guide" in report.publish_order

    def test_markdown_article(self, document_publisher, fixture_path):
        report = document_publisher.publish_document(
            fixture_path("markdown-longform.md"), dry_run=True, static_d_tag=True
        )

        assert report.success
        assert (report.content_sections, report.index_sections) == (1, 0)
        article = report.events[0]
        assert article["kind"] == 30023
        assert tag_values(article, "d") == [["d", "markdown-longform-article"]]
        assert tag_values(article, "published_at") == [["published_at", "1700000000"]]
        assert tag_values(article, "summary") == [["summary", "An article written in Markdown"]]
        assert "# Markdown Longform Article" not in article["content"]
        assert "## A Heading" in article["content"]

    def test_relay_hint_from_document(self, registry, clock, fixture_path):
        resolver = StaticRelayResolver(categories={"docs": ["wss://docs.example.com", "wss://backup.example.com"]})
        publisher = DirectDocumentPublisher(registry=registry, clock=clock, relay_resolver=resolver)
        compiled = publisher.compile_text(
            "= Relay Doc\n:relays: docs\n:content-level: 1\n\nIntro text.\n",
            DocumentFormat.ASCIIDOC,
            static_d_tag=True,
        )

        main = compiled.compilation.main_index
        assert [reference.relay_hint for reference in main.references] == ["wss://docs.example.com"]

    def test_key_provider_sets_reference_pubkey(self, registry, clock):
        publisher = DirectDocumentPublisher(
            registry=registry, clock=clock, key_provider=StaticKeyProvider(PUBKEY)
        )
        compiled = publisher.compile_text(
            "= Keyed\n:content-level: 1\n\nIntro.\n", DocumentFormat.ASCIIDOC, static_d_tag=True
        )

        main_event = compiled.rendered[-1].event
        assert main_event.get_tag("a")[1] == f"30041:{PUBKEY}:keyed-content"


class TestIdentifierModes:
    """Identifiers across separate publisher instances."""

    def test_timestamped_runs_never_repeat(self, registry):
        text = "= Guide\n\nIntro.\n\n== Chapter\n\nText.\n"
        first = DirectDocumentPublisher(registry=registry).compile_text(text, DocumentFormat.ASCIIDOC)
        second = DirectDocumentPublisher(registry=registry).compile_text(text, DocumentFormat.ASCIIDOC)

        first_tags = [unit.d_tag for unit in first.compilation.units]
        second_tags = [unit.d_tag for unit in second.compilation.units]
        assert first_tags != second_tags
        assert not set(first_tags) & set(second_tags)

    def test_static_runs_are_identical(self, registry, fixture_path):
        first = DirectDocumentPublisher(registry=registry).publish_document(
            fixture_path("complex-hierarchical-guide.adoc"), content_level=4, dry_run=True, static_d_tag=True
        )
        second = DirectDocumentPublisher(registry=registry).publish_document(
            fixture_path("complex-hierarchical-guide.adoc"), content_level=4, dry_run=True, static_d_tag=True
        )

        assert first.success and second.success
        assert first.publish_order == second.publish_order
        assert [tag_values(event, "d") for event in first.events] == [tag_values(event, "d") for event in second.events]
        assert all(not d_tag[-1].isdigit() for d_tag in first.publish_order)


class TestDocumentKindFields:
    """Kind-specific document attributes routed to the unit that renders them."""

    def test_derivative_work_tags_on_main_index(self, document_publisher):
        text = (
            "= Retold Tales\n:content-level: 1\n"
            f":original-author: {PUBKEY}\n:original_event: abc123\n\nIntro.\n"
        )
        compiled = document_publisher.compile_text(text, DocumentFormat.ASCIIDOC, static_d_tag=True)
        main = compiled.rendered[-1].event

        assert compiled.validation_errors == []
        assert main.get_tags("p") == [["p", PUBKEY]]
        assert main.get_tags("E") == [["E", "abc123", "", ""]]
        assert main.get_tags("original_author") == []
        assert main.get_tags("original_event") == []

    def test_derivative_work_needs_both_fields(self, document_publisher):
        text = f"= Retold Tales\n:content-level: 1\n:original-author: {PUBKEY}\n\nIntro.\n"
        compiled = document_publisher.compile_text(text, DocumentFormat.ASCIIDOC, static_d_tag=True)

        assert any("original_event is required" in error for error in compiled.validation_errors)

    def test_wiki_fork_marker_from_header(self, document_publisher):
        text = (
            "= Relay Basics\n:content-level: 0\n:content-kind: wiki\n"
            ":fork-from: 30818:abc:relay-basics, eventid123\n\nRelays store events.\n"
        )
        compiled = document_publisher.compile_text(text, DocumentFormat.ASCIIDOC)
        article = compiled.rendered[0].event

        assert compiled.validation_errors == []
        assert article.kind == 30818
        assert ["a", "30818:abc:relay-basics", "", "fork"] in article.tags
        assert ["e", "eventid123", "", "fork"] in article.tags

    def test_long_form_references_from_frontmatter(self, document_publisher):
        text = (
            "---\ntitle: Cited\nreferences:\n"
            "  - type: event\n    id: abc123\n    relay: wss://relay.example.com\n"
            f"  - profile:{PUBKEY}\n---\n\nBody.\n"
        )
        compiled = document_publisher.compile_text(text, DocumentFormat.MARKDOWN, static_d_tag=True)
        article = compiled.rendered[0].event

        assert compiled.validation_errors == []
        assert article.get_tags("e") == [["e", "abc123", "wss://relay.example.com"]]
        assert article.get_tags("p") == [["p", PUBKEY, ""]]

    def test_wikilink_definitions_follow_term_usage(self, document_publisher):
        text = (
            "= Glossary Guide\n:content-level: 2\n"
            ":wikilinks: relay|A server that stores events, npub|Public key\n\n"
            "Intro.\n\n== Relays\n\nEach [[relay]] keeps events.\n\n== Keys\n\nNo terms here.\n"
        )
        compiled = document_publisher.compile_text(text, DocumentFormat.ASCIIDOC, static_d_tag=True)
        events = {rendered.unit.d_tag: rendered.event for rendered in compiled.rendered}

        assert compiled.validation_errors == []
        assert events["relays-content"].get_tags("wikilink") == [
            ["wikilink", "relay", "A server that stores events", "", ""]
        ]
        assert events["keys-content"].get_tags("wikilink") == []
        assert events["glossary-guide"].get_tags("wikilinks") == []


class TestNotifications:

    def test_notification_companion_for_markdown_article(self, registry, clock):
        publisher = DirectDocumentPublisher(registry=registry, clock=clock, key_provider=StaticKeyProvider(PUBKEY))
        text = "---\ntitle: Announced\ncreate_notification: true\n---\n\nArticle body.\n"
        compiled = publisher.compile_text(text, DocumentFormat.MARKDOWN, static_d_tag=True)

        events = compiled.events
        assert [event.kind for event in events] == [30023, 1111]
        assert events[1].content == f"A new article has been posted: Announced\nnostr:30023:{PUBKEY}:announced"

    def test_no_notification_unless_requested(self, document_publisher):
        compiled = document_publisher.compile_text("# Quiet\n\nBody.\n", DocumentFormat.MARKDOWN, static_d_tag=True)

        assert [event.kind for event in compiled.events] == [30023]


class TestFailureReports:

    def test_markdown_level_rejected(self, document_publisher, fixture_path):
        report = document_publisher.publish_document(fixture_path("markdown-longform.md"), content_level=2)

        assert not report.success
        assert report.errors == [MARKDOWN_LEVEL_MESSAGE]
        assert report.total_events == 0

    def test_missing_file(self, document_publisher, tmp_path):
        report = document_publisher.publish_document(tmp_path / "missing.adoc")

        assert not report.success
        assert len(report.errors) == 1
        assert report.errors[0].startswith("Cannot read document")

    def test_unsupported_extension(self, document_publisher, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("= Notes\n")

        report = document_publisher.publish_document(path)
        assert not report.success
        assert len(report.errors) == 1

    def test_structural_error(self, document_publisher, tmp_path):
        path = tmp_path / "broken.adoc"
        path.write_text("Some text first.\n\n= Late Title\n")

        report = document_publisher.publish_document(path, dry_run=True)
        assert not report.success
        assert "H1 header" in report.errors[0]

    def test_validation_errors_block_publishing(self, registry, clock, mock_transport, tmp_path):
        path = tmp_path / "novel.adoc"
        path.write_text("= A Story\n:doctype: novel\n:content-level: 1\n\nOnce upon a time.\n")
        publisher = DirectDocumentPublisher(registry=registry, clock=clock, publisher=mock_transport)

        report = publisher.publish_document(path, static_d_tag=True)

        assert not report.success
        assert any("type must be one of" in error for error in report.errors)
        assert report.errors[0].startswith("A Story (a-story):")
        mock_transport.publish.assert_not_called()

    def test_raise_for_errors(self, document_publisher):
        compiled = document_publisher.compile_text(
            "= A Story\n:doctype: novel\n:content-level: 1\n\nText.\n", DocumentFormat.ASCIIDOC
        )

        with pytest.raises(ValidationError) as exc_info:
            compiled.raise_for_errors("story.adoc")
        assert exc_info.value.validation_errors == compiled.validation_errors


class TestLivePublishing:
    """Publishing through a transport double."""

    @pytest.fixture
    def live_publisher(self, registry, clock, mock_transport):
        return DirectDocumentPublisher(registry=registry, clock=clock, publisher=mock_transport)

    def test_publishes_every_unit_in_order(self, live_publisher, mock_transport, fixture_path):
        report = live_publisher.publish_document(fixture_path("simple-guide.adoc"), static_d_tag=True)

        assert report.success
        assert not report.dry_run
        assert mock_transport.publish.call_count == 6
        assert [entry["d_tag"] for entry in report.published_events] == report.publish_order
        assert report.published_events[-1]["kind"] == 30040

    def test_indexes_carry_event_ids_of_published_units(self, live_publisher, fixture_path):
        report = live_publisher.publish_document(fixture_path("simple-guide.adoc"), static_d_tag=True)
        ids = {entry["d_tag"]: entry["event_id"] for entry in report.published_events}

        main = event_by_d_tag(report, "simple-nostr-guide")
        for tag in tag_values(main, "a"):
            referenced = tag[1].split(":", 2)[2]
            assert tag[3] == ids[referenced]

    def test_transport_failure_is_reported(self, registry, clock, fixture_path):
        transport = Mock()

        def _publish(event):
            if event.d_tag == "getting-started-content":
                raise ConnectionError("relay closed")
            return PublishResult(success=True, event_id="e" * 64)

        transport.publish.side_effect = _publish
        publisher = DirectDocumentPublisher(registry=registry, clock=clock, publisher=transport)

        report = publisher.publish_document(fixture_path("simple-guide.adoc"), static_d_tag=True)

        assert not report.success
        assert report.errors == ["Failed to publish Getting Started: relay closed"]
        assert len(report.published_events) == 5

    def test_rejected_event(self, registry, clock, fixture_path):
        transport = Mock()
        transport.publish.return_value = PublishResult(success=False, error="blocked")
        publisher = DirectDocumentPublisher(registry=registry, clock=clock, publisher=transport)

        report = publisher.publish_document(fixture_path("default-test.adoc"))

        assert not report.success
        assert report.errors == ["Failed to publish Default Behavior Test: blocked"]


class TestCollaborators:

    def test_compute_event_id_is_stable(self):
        event = Event(kind=1, content="hello", tags=[["t", "x"]], created_at=1700000000)

        first = compute_event_id(event, PUBKEY)
        assert first == compute_event_id(event, PUBKEY)
        assert len(first) == 64
        assert first != compute_event_id(event, "c" * 64)

    def test_json_lines_publisher_stream(self):
        stream = io.StringIO()
        publisher = JsonLinesPublisher(stream, relays=["wss://relay.example.com"])
        event = Event(kind=30041, content="text", tags=[["d", "x"]], created_at=1700000000)

        result = publisher.publish(event)

        assert result.success
        record = json.loads(stream.getvalue().splitlines()[0])
        assert record["id"] == result.event_id == compute_event_id(event)
        assert record["relays"] == ["wss://relay.example.com"]

    def test_json_lines_publisher_file(self, tmp_path, fixture_path, registry, clock):
        output = tmp_path / "events.jsonl"
        publisher = DirectDocumentPublisher(
            registry=registry, clock=clock, publisher=JsonLinesPublisher(output)
        )

        report = publisher.publish_document(fixture_path("header-priority-test.adoc"), static_d_tag=True)

        assert report.success
        lines = output.read_text().splitlines()
        assert len(lines) == report.total_events == 2
        assert json.loads(lines[-1])["kind"] == 30040

    @pytest.mark.parametrize("value,expected", [
        (None, ["wss://default"]),
        ("docs", ["wss://a", "wss://b"]),
        ("wss://x, wss://y", ["wss://x", "wss://y"]),
        (["wss://z"], ["wss://z"]),
        ("unknown", ["wss://default"]),
    ])
    def test_static_relay_resolver(self, value, expected):
        resolver = StaticRelayResolver(categories={"docs": ["wss://a", "wss://b"]}, default=["wss://default"])
        assert resolver.resolve(value) == expected
