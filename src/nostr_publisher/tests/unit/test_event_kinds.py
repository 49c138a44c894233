"""
Tests for event kind handlers.

Each handler is exercised through validate() and render() with plain
configuration dictionaries, the way the publisher drives them.
"""

import pytest

from nostr_publisher.core.event_kinds import (
    Event,
    EventKind,
    LongFormContentHandler,
    PublicationContentHandler,
    PublicationIndexHandler,
    WikiArticleHandler,
    find_wikilinks,
)
from nostr_publisher.core.event_kinds.publication_index import PUBKEY_PLACEHOLDER

CREATED_AT = 1700000000


class TestEventKind:

    @pytest.mark.parametrize("value,expected", [
        (30023, EventKind.LONG_FORM),
        ("longform", EventKind.LONG_FORM),
        ("30041", EventKind.PUBLICATION_CONTENT),
        ("Publication", EventKind.PUBLICATION_CONTENT),
        ("wiki", EventKind.WIKI_ARTICLE),
        (EventKind.WIKI_ARTICLE, EventKind.WIKI_ARTICLE),
    ])
    def test_parse(self, value, expected):
        assert EventKind.parse(value) is expected

    @pytest.mark.parametrize("value", [30040, "index", "1", EventKind.PUBLICATION_INDEX])
    def test_parse_rejects_non_content_kinds(self, value):
        assert EventKind.parse(value) is None

    def test_event_validation(self):
        with pytest.raises(ValueError):
            Event(kind=-1)
        with pytest.raises(ValueError):
            Event(kind=1, content=None)

    def test_event_address(self):
        event = Event(kind=30023, tags=[["d", "my-article"]], pubkey="abc")

        assert event.d_tag == "my-article"
        assert event.address() == "30023:abc:my-article"


class TestCommonValidation:
    """Rules shared by every handler."""

    @pytest.fixture
    def handler(self):
        return PublicationContentHandler()

    def test_valid_configuration(self, handler):
        assert handler.validate({"title": "Section", "topics": ["a"], "image": "https://example.com/x.png"}) == []

    def test_missing_title(self, handler):
        assert handler.validate({}) == ["Required field 'title' is missing or empty"]

    def test_length_limits(self, handler):
        errors = handler.validate({"title": "x" * 201, "summary": "y" * 501})

        assert "Title must be 200 characters or less" in errors
        assert "Summary must be 500 characters or less" in errors

    @pytest.mark.parametrize("image,valid", [
        ("https://example.com/cover.png", True),
        ("images/cover.png", True),
        ("ftp://example.com/cover.png", False),
        ("https://", False),
    ])
    def test_image_rules(self, handler, image, valid):
        errors = handler.validate({"title": "T", "image": image})
        assert (errors == []) is valid

    def test_topics_must_be_list_of_strings(self, handler):
        assert handler.validate({"title": "T", "topics": "a,b"}) == ["Topics must be a list"]
        assert handler.validate({"title": "T", "topics": ["a", ""]}) == ["Each topic must be a non-empty string"]

    def test_standard_and_custom_tags(self, handler):
        event = handler.render({
            "title": "Section",
            "d-tag": "section-1",
            "summary": "About it",
            "topics": ["nostr"],
            "published_at": 1690000000,
            "created_at": CREATED_AT,
            "custom_tags": [["client", "nostr-publisher"], ["ignored"]],
        }, "Body")

        assert event.tags == [
            ["d", "section-1"],
            ["title", "Section"],
            ["summary", "About it"],
            ["t", "nostr"],
            ["published_at", "1690000000"],
            ["client", "nostr-publisher"],
        ]
        assert event.content == "Body"
        assert event.created_at == CREATED_AT

    def test_identifier_resolution(self, handler):
        assert handler.resolve_identifier({"d-tag": "explicit", "reuse-d-tag": "reused"}) == "explicit"
        assert handler.resolve_identifier({"reuse-d-tag": "reused", "title": "T"}) == "reused"
        assert handler.resolve_identifier({"title": "My Title", "static_d_tag": True}) == "my-title"
        assert handler.resolve_identifier(
            {"title": "My Title", "identifier_stamp": 1234}
        ) == "my-title-1234"


class TestLongFormContent:

    @pytest.fixture
    def handler(self):
        return LongFormContentHandler()

    def test_reference_tags(self, handler):
        config = {
            "title": "Article",
            "d-tag": "article",
            "references": [
                {"type": "event", "id": "e1", "relay": "wss://r"},
                {"type": "profile", "id": "p1"},
            ],
        }

        assert handler.validate(config) == []
        event = handler.render(config, "Text")
        assert event.get_tags("e") == [["e", "e1", "wss://r"]]
        assert event.get_tags("p") == [["p", "p1", ""]]

    def test_invalid_references(self, handler):
        errors = handler.validate({"title": "A", "references": [{"type": "bogus", "id": "x"}, {}]})

        assert len(errors) == 2

    def test_notification_companion(self, handler):
        config = {
            "title": "Article",
            "d-tag": "article",
            "pubkey": "f" * 64,
            "created_at": CREATED_AT,
            "create_notification": True,
        }
        event = handler.render(config, "Text")
        companions = handler.post_process(event, config)

        assert len(companions) == 1
        notification = companions[0]
        address = f"30023:{'f' * 64}:article"
        assert notification.kind == 1111
        assert notification.tags == [["A", address, ""], ["K", "1111"], ["a", address, ""], ["k", "1111"]]
        assert notification.content == f"A new article has been posted: Article\nnostr:{address}"

    def test_no_notification_by_default(self, handler):
        config = {"title": "Article"}
        assert handler.post_process(handler.render(config, ""), config) == []


class TestPublicationIndex:

    @pytest.fixture
    def handler(self):
        return PublicationIndexHandler()

    def test_required_fields(self, handler):
        errors = handler.validate({"title": "Index"})
        assert errors == ["Required field 'auto_update' is missing or empty"]

    def test_content_is_always_empty(self, handler):
        event = handler.render({"title": "Index", "auto_update": True}, "ignored")
        assert event.content == ""

    def test_index_tags(self, handler):
        config = {
            "title": "Guide",
            "d-tag": "guide",
            "auto_update": True,
            "author": ["Ann", "Bob"],
            "type": "book",
            "version": "2",
            "published_on": "2024-01-15",
            "isbn": "978-3-16-148410-0",
            "content_references": [
                {"kind": 30041, "d_tag": "guide-preamble", "relay": "wss://r", "order": 0},
                {"kind": 30040, "d_tag": "chapter", "relay": "", "order": 1, "event_id": "abc"},
            ],
        }

        assert handler.validate(config) == []
        event = handler.render(config)
        assert event.get_tags("author") == [["author", "Ann"], ["author", "Bob"]]
        assert event.get_tag("auto-update") == ["auto-update", "true"]
        assert event.get_tag("type") == ["type", "book"]
        assert event.get_tag("i") == ["i", "isbn:978-3-16-148410-0"]
        assert event.get_tags("a") == [
            ["a", f"30041:{PUBKEY_PLACEHOLDER}:guide-preamble", "wss://r", ""],
            ["a", f"30040:{PUBKEY_PLACEHOLDER}:chapter", "", "abc"],
        ]

    def test_references_use_event_pubkey(self, handler):
        config = {
            "title": "Guide",
            "auto_update": "false",
            "pubkey": "a" * 64,
            "content_references": [{"kind": 30041, "d_tag": "part"}],
        }
        event = handler.render(config)

        assert event.get_tag("auto-update") == ["auto-update", "false"]
        assert event.get_tag("a")[1] == f"30041:{'a' * 64}:part"

    @pytest.mark.parametrize("config,message", [
        ({"title": "G", "auto_update": "sometimes"}, "auto_update must be true or false"),
        ({"title": "G", "auto_update": True, "type": "novel"}, "type must be one of"),
        ({"title": "G", "auto_update": True, "content_references": [{"kind": 30041}]}, "content_references[0]"),
        ({"title": "G", "auto_update": True, "original_author": "pk"}, "original_event is required"),
    ])
    def test_validation_errors(self, handler, config, message):
        errors = handler.validate(config)
        assert any(message in error for error in errors)


class TestPublicationContent:

    def test_find_wikilinks(self):
        assert find_wikilinks("See [[relay|A server]] and [[relay]] and [[event]].") == [
            {"term": "relay", "definition": "A server"},
            {"term": "event", "definition": ""},
        ]

    def test_wikilink_tags_merge_configured_and_found(self):
        handler = PublicationContentHandler()
        config = {"title": "S", "wikilinks": [{"term": "relay", "definition": "Configured", "relay": "wss://r"}]}
        event = handler.render(config, "Uses [[relay|Inline]] and [[key]].")

        assert event.get_tags("wikilink") == [
            ["wikilink", "relay", "Configured", "wss://r", ""],
            ["wikilink", "key", "", "", ""],
        ]

    def test_invalid_wikilinks(self):
        handler = PublicationContentHandler()
        assert handler.validate({"title": "S", "wikilinks": [{"definition": "x"}]}) == [
            "wikilinks[0] must have at least a 'term' field"
        ]


class TestWikiArticle:

    @pytest.fixture
    def handler(self):
        return WikiArticleHandler()

    def test_identifiers_are_never_suffixed(self, handler):
        assert handler.make_identifier("Nostr Wiki 2", True, 1700000000) == "nostr-wiki"
        assert handler.resolve_identifier({"title": "Café Guide"}) == "caf-guide"

    def test_explicit_identifier_must_be_normalized(self, handler):
        errors = handler.validate({"title": "T", "d-tag": "Not Normal"})
        assert errors == ["d-tag 'Not Normal' should be normalized to 'not-normal' according to NIP-54 rules"]

    def test_fork_and_defer_tags(self, handler):
        config = {
            "title": "T",
            "fork_from": {"address": "30818:pk:t", "event_id": "e1"},
            "defer_to": {"address": "30818:pk2:t", "event_id": "e2"},
        }

        assert handler.validate(config) == []
        event = handler.render(config)
        assert event.get_tags("a") == [["a", "30818:pk:t", "", "fork"], ["a", "30818:pk2:t", "", "defer"]]
        assert event.get_tags("e") == [["e", "e1", "", "fork"], ["e", "e2", "", "defer"]]

    def test_incomplete_fork_reference(self, handler):
        assert handler.validate({"title": "T", "fork_from": {"address": "x"}}) == [
            "fork_from must have address and event_id fields"
        ]
