"""
Direct Document Publisher

Drives the full pipeline for one document: format detection, metadata
extraction, configuration resolution, section parsing, graph compilation,
per-unit validation and rendering, and finally the hand-off to a Publisher.

Usage:
    >>> publisher = DirectDocumentPublisher(EventKindRegistry.with_defaults())
    >>> report = publisher.publish_document("guide.adoc", content_level=2, dry_run=True)
    >>> report.total_events
    6
"""

import time
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .collaborators import KeyProvider, PublishResult, Publisher, RelayConfigResolver, StaticRelayResolver
from .configuration import resolve_configuration
from .report import PublicationReport
from ..compiler import (
    CompilationResult,
    CompiledUnit,
    ContentConfiguration,
    GraphCompiler,
    IndexUnit,
    SectionType,
)
from ..document_processor import (
    DocumentFormat,
    DocumentTree,
    MetadataExtractionResult,
    MetadataExtractor,
    SectionTreeParser,
)
from ..document_processor.metadata.attributes import ATTRIBUTE_ALIASES, parse_boolean, split_list
from ..event_kinds import Event, EventKind, EventKindRegistry, find_wikilinks
from ..identifiers import IdentifierClock, default_clock
from ...exceptions.compiler_exceptions import DocumentCompilerError, ValidationError

logger = logging.getLogger(__name__)

# Attributes with a dedicated place in the event; everything else becomes a custom tag.
_KNOWN_ATTRIBUTES = frozenset(ATTRIBUTE_ALIASES.values()) | {"publication_date"}

DEFAULT_SETTINGS: Dict[str, Any] = {
    "client_tag": "nostr-publisher",
    "default_relays": [],
    "relay_categories": {},
    "pubkey": None,
    "auto_update": True,
    "publication_type": "documentation",
    "static_d_tag": False,
}


@dataclass
class RenderedUnit:
    """A compiled unit with the configuration and event rendered for it."""
    unit: CompiledUnit
    config: Dict[str, Any]
    event: Event
    companions: List[Event] = field(default_factory=list)


@dataclass
class CompiledDocument:
    """
    Everything produced by compiling one document, before publishing.

    Attributes:
        title: Document title
        extraction: Metadata extraction output
        configuration: Resolved compile configuration
        tree: Section tree (None for flat articles)
        compilation: Compiled units
        rendered: Rendered units in publish order
        validation_errors: Every validation error found across units
    """
    title: str
    extraction: MetadataExtractionResult
    configuration: ContentConfiguration
    tree: Optional[DocumentTree]
    compilation: CompilationResult
    rendered: List[RenderedUnit] = field(default_factory=list)
    validation_errors: List[str] = field(default_factory=list)

    @property
    def attributes(self) -> Dict[str, Any]:
        return self.extraction.attributes

    @property
    def events(self) -> List[Event]:
        """Rendered events in publish order, companion events after their unit."""
        events = []
        for rendered in self.rendered:
            events.append(rendered.event)
            events.extend(rendered.companions)
        return events

    def raise_for_errors(self, document_path: Optional[str] = None) -> None:
        """
        Raises:
            ValidationError: If any unit failed validation
        """
        if self.validation_errors:
            raise ValidationError(
                f"{len(self.validation_errors)} validation error(s) in '{self.title}'",
                document_path=document_path,
                validation_errors=self.validation_errors,
            )


class DirectDocumentPublisher:
    """
    Orchestrates compiling and publishing a document.

    All collaborators are injected; the registry is shared read-only, and
    every call builds its own configuration and unit lists.

    Args:
        registry: Event kind handlers
        publisher: Transport used in live mode
        relay_resolver: Resolves the relay hint written into references
        key_provider: Supplies the public key for addresses and events
        clock: Identifier timestamp source
        settings: Publisher settings (see ``DEFAULT_SETTINGS``)
    """

    def __init__(
        self,
        registry: Optional[EventKindRegistry] = None,
        publisher: Optional[Publisher] = None,
        relay_resolver: Optional[RelayConfigResolver] = None,
        key_provider: Optional[KeyProvider] = None,
        clock: Optional[IdentifierClock] = None,
        settings: Optional[Dict[str, Any]] = None
    ) -> None:
        self.registry = registry or EventKindRegistry.with_defaults()
        self.publisher = publisher
        self.settings = dict(DEFAULT_SETTINGS, **(settings or {}))
        self.relay_resolver = relay_resolver or StaticRelayResolver(
            categories=self.settings["relay_categories"],
            default=self.settings["default_relays"],
        )
        self.key_provider = key_provider
        self.clock = clock or default_clock()
        self.extractor = MetadataExtractor()
        self.parser = SectionTreeParser()

    def publish_document(
        self,
        path: Union[str, Path],
        content_level: Optional[Union[int, str]] = None,
        content_kind: Optional[Union[int, str, EventKind]] = None,
        dry_run: bool = False,
        static_d_tag: Optional[bool] = None
    ) -> PublicationReport:
        """
        Compile a document file and publish it (or preview it in dry-run mode).

        Structural, constraint and duplicate-identifier problems produce a
        failed report with exactly one error. Validation problems produce a
        failed report listing every error. Nothing is published unless the
        whole document compiles and validates.

        Args:
            path: Document file (.adoc, .asciidoc, .md, .markdown)
            content_level: Content level override (0-6)
            content_kind: Content kind override (number or alias)
            dry_run: Skip the hand-off to the publisher
            static_d_tag: Generate identifiers without timestamp suffix

        Returns:
            PublicationReport describing the run
        """
        document_path = str(path)
        logger.info(f"Publishing document: {Path(document_path).name}")

        try:
            document_format = DocumentFormat.from_path(document_path)
            text = Path(document_path).read_text(encoding="utf-8")
            compiled = self.compile_text(
                text,
                document_format,
                content_level=content_level,
                content_kind=content_kind,
                static_d_tag=static_d_tag,
                document_path=document_path,
            )
        except DocumentCompilerError as e:
            logger.error(f"Failed to compile {document_path}: {e.message}")
            return PublicationReport.failure([e.message], dry_run=dry_run)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {document_path}: {e}")
            return PublicationReport.failure([f"Cannot read document {document_path}: {e}"], dry_run=dry_run)

        if compiled.validation_errors:
            logger.error(f"{len(compiled.validation_errors)} validation error(s) in {document_path}")
            report = self._build_report(compiled, dry_run)
            report.success = False
            report.errors = list(compiled.validation_errors)
            return report

        if dry_run or self.publisher is None:
            if not dry_run:
                logger.warning("No publisher configured; treating run as dry run")
            logger.info(f"Dry run: {len(compiled.compilation.units)} events compiled, none published")
            return self._build_report(compiled, dry_run=True)

        return self._publish(compiled)

    def compile_text(
        self,
        text: str,
        document_format: DocumentFormat,
        content_level: Optional[Union[int, str]] = None,
        content_kind: Optional[Union[int, str, EventKind]] = None,
        static_d_tag: Optional[bool] = None,
        document_path: Optional[str] = None
    ) -> CompiledDocument:
        """
        Compile document text into rendered units without publishing.

        Validation errors are collected on the result rather than raised;
        use ``CompiledDocument.raise_for_errors`` to turn them into an exception.

        Raises:
            StructuralError: If the document title structure is invalid
            ConfigConstraintError: If format, kind and level do not combine
            DuplicateIdentifierError: If two units share an identifier
            FrontmatterParseError: If Markdown frontmatter is malformed
        """
        extraction = self.extractor.extract(text, document_format, document_path)
        configuration = resolve_configuration(
            document_format,
            extraction.attributes,
            content_level=content_level,
            content_kind=content_kind,
            static_d_tag=static_d_tag,
            default_static_d_tag=bool(self.settings["static_d_tag"]),
            document_path=document_path,
        )

        tree = None
        if document_format is DocumentFormat.ASCIIDOC:
            tree = self.parser.parse(
                extraction.body,
                extraction.title,
                title_line=extraction.title_line or 1,
                first_body_line=extraction.body_line,
                document_path=document_path,
            )

        relay_hint = self._relay_hint(extraction.attributes)
        compiler = GraphCompiler(self.registry, clock=self.clock, relay_hint=relay_hint)
        attributes = extraction.attributes
        main_identifier = attributes.get("d-tag") or attributes.get("reuse-d-tag")
        compilation = compiler.compile(
            tree,
            configuration,
            extraction.title,
            body=extraction.body,
            main_identifier=str(main_identifier) if main_identifier else None,
            document_path=document_path,
        )

        compiled = CompiledDocument(
            title=extraction.title,
            extraction=extraction,
            configuration=configuration,
            tree=tree,
            compilation=compilation,
        )

        created_at = int(time.time())
        for unit in compilation.publish_order():
            config = self.build_unit_config(unit, compiled, created_at)
            handler = self.registry.get(unit.kind)
            for error in handler.validate(config):
                compiled.validation_errors.append(f"{unit.title} ({unit.d_tag}): {error}")
            event = handler.render(config, unit.content)
            compiled.rendered.append(
                RenderedUnit(unit=unit, config=config, event=event, companions=handler.post_process(event, config))
            )

        logger.info(
            f"Compiled '{compiled.title}': {len(compilation.content_units)} content, "
            f"{len(compilation.index_units)} index units"
        )
        return compiled

    def build_unit_config(
        self,
        unit: CompiledUnit,
        compiled: CompiledDocument,
        created_at: int,
        event_ids: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Handler configuration for one unit.

        The main unit (main index, or the article of a flat document) carries
        the document metadata; other units get section-level summaries.
        """
        attributes = compiled.attributes
        document_title = compiled.title
        is_main = unit.is_index and unit.is_main or unit.section_type is SectionType.ARTICLE
        content_level = compiled.configuration.content_level

        config: Dict[str, Any] = {
            "title": unit.title,
            "d-tag": unit.d_tag,
            "static_d_tag": True,
            "created_at": created_at,
            "topics": list(attributes.get("t") or []),
            "pubkey": self._public_key(),
        }

        custom_tags = [["client", str(self.settings["client_tag"])]]
        if attributes.get("l"):
            custom_tags.append(["l", str(attributes["l"])])

        if is_main:
            config["summary"] = attributes.get("summary") or (
                f"Main index for {document_title}" if unit.is_index else None
            )
            for key in ("image", "published_at"):
                if attributes.get(key) is not None:
                    config[key] = attributes[key]
            custom_tags.extend(self._passthrough_tags(attributes))
            if unit.is_index:
                custom_tags.append(["content_level", str(content_level)])
        elif unit.section_type is SectionType.PREAMBLE and unit.level == 1:
            config["summary"] = f"Preamble section for {document_title}"
            custom_tags.append(["section_type", "preamble"])
        elif unit.is_index:
            config["summary"] = f"Index section: {unit.title}"
            custom_tags.append(["section_type", "index"])
            custom_tags.append(["section_level", str(unit.level)])
        else:
            config["summary"] = f"Content section: {unit.title}"
            custom_tags.append(["section_type", str(unit.section_type)])
            custom_tags.append(["section_level", str(unit.level)])

        if unit.is_index:
            self._add_index_fields(config, unit, attributes, is_main, event_ids or {})
        else:
            config.update(self._content_kind_fields(unit, attributes, is_main))
            if unit.kind == EventKind.LONG_FORM.value and is_main:
                if parse_boolean(attributes.get("create_notification")):
                    config["create_notification"] = True
                    if attributes.get("notification_text"):
                        config["notification_text"] = attributes["notification_text"]

        config["custom_tags"] = custom_tags
        return {key: value for key, value in config.items() if value is not None}

    def _add_index_fields(
        self,
        config: Dict[str, Any],
        unit: IndexUnit,
        attributes: Dict[str, Any],
        is_main: bool,
        event_ids: Dict[str, str]
    ) -> None:
        auto_update = attributes.get("auto_update")
        config["auto_update"] = self.settings["auto_update"] if auto_update is None else auto_update
        config["type"] = attributes.get("type") or self.settings["publication_type"]
        config["content_references"] = [
            dict(reference.to_dict(), event_id=event_ids.get(reference.d_tag) or reference.event_id)
            for reference in unit.references
        ]
        if is_main:
            if attributes.get("author"):
                config["author"] = attributes["author"]
            if attributes.get("version"):
                config["version"] = attributes["version"]
            published_on = attributes.get("published_on") or attributes.get("revdate")
            if published_on:
                config["published_on"] = published_on
            for key in ("published_by", "source", "isbn", "original_author", "original_event"):
                if attributes.get(key):
                    config[key] = attributes[key]

    def _content_kind_fields(
        self,
        unit: CompiledUnit,
        attributes: Dict[str, Any],
        is_main: bool
    ) -> Dict[str, Any]:
        """
        Kind-specific document attributes for a content unit.

        Wikilink definitions reach every publication content unit, limited
        to the terms a section actually uses unless the unit is the whole
        article. References and wiki fork/defer markers describe the whole
        document, so only the main article carries them.
        """
        fields: Dict[str, Any] = {}
        if unit.kind == EventKind.PUBLICATION_CONTENT.value and attributes.get("wikilinks") is not None:
            fields["wikilinks"] = _wikilink_definitions(
                attributes["wikilinks"], None if is_main else unit.content
            )
        if not is_main:
            return fields

        if unit.kind == EventKind.LONG_FORM.value and attributes.get("references") is not None:
            fields["references"] = _nostr_references(attributes["references"])
        if unit.kind == EventKind.WIKI_ARTICLE.value:
            for key in ("fork_from", "defer_to"):
                if attributes.get(key) is not None:
                    fields[key] = _address_pair(attributes[key])
        return fields

    def _publish(self, compiled: CompiledDocument) -> PublicationReport:
        """Publish units in dependency order, filling in event-id hints."""
        event_ids: Dict[str, str] = {}
        published: List[Dict[str, Any]] = []
        errors: List[str] = []
        rendered_units: List[RenderedUnit] = []
        created_at = int(time.time())

        for unit in compiled.compilation.publish_order():
            handler = self.registry.get(unit.kind)
            config = self.build_unit_config(unit, compiled, created_at, event_ids)
            event = handler.render(config, unit.content)
            companions = handler.post_process(event, config)
            rendered_units.append(RenderedUnit(unit=unit, config=config, event=event, companions=companions))

            logger.info(f"Publishing: {unit.title} ({unit.d_tag})")
            for item, result in self._send([event] + companions):
                if result.success:
                    if item is event and result.event_id:
                        event_ids[unit.d_tag] = result.event_id
                    published.append({
                        "title": unit.title,
                        "event_id": result.event_id,
                        "kind": item.kind,
                        "d_tag": item.d_tag or "",
                    })
                else:
                    message = f"Failed to publish {unit.title}: {result.error or 'publisher rejected event'}"
                    logger.error(message)
                    errors.append(message)

        compiled.rendered = rendered_units
        report = self._build_report(compiled, dry_run=False)
        report.published_events = published
        report.errors = errors
        report.success = not errors
        logger.info(f"Published {len(published)} events with {len(errors)} error(s)")
        return report

    def _send(self, events: List[Event]) -> List[Tuple[Event, PublishResult]]:
        results = []
        for event in events:
            try:
                result = self.publisher.publish(event)
            except Exception as e:
                # Transport failures are reported per event; retries belong to the publisher.
                logger.error(f"Publisher raised for kind {event.kind} event: {e}")
                result = PublishResult(success=False, error=str(e))
            results.append((event, result))
        return results

    def _build_report(self, compiled: CompiledDocument, dry_run: bool) -> PublicationReport:
        compilation = compiled.compilation
        content_units = compilation.content_units
        index_units = compilation.index_units

        return PublicationReport(
            success=True,
            dry_run=dry_run,
            document_title=compiled.title,
            content_sections=len(content_units),
            index_sections=len(index_units),
            total_events=len(content_units) + len(index_units),
            structure={
                "content_sections": [unit.to_dict() for unit in content_units],
                "index_sections": [unit.to_dict() for unit in index_units],
                "main_index": compilation.main_index.to_dict() if compilation.main_index else None,
                "metadata": dict(compiled.attributes),
            },
            metadata=dict(compiled.attributes),
            configuration=compiled.configuration.to_dict(),
            events=[event.to_dict() for event in compiled.events],
            publish_order=[rendered.unit.d_tag for rendered in compiled.rendered],
        )

    def _relay_hint(self, attributes: Dict[str, Any]) -> str:
        relays = self.relay_resolver.resolve(attributes.get("relays"))
        return relays[0] if relays else ""

    def _public_key(self) -> Optional[str]:
        if self.key_provider is not None:
            return self.key_provider.public_key()
        return self.settings.get("pubkey") or None

    def _passthrough_tags(self, attributes: Dict[str, Any]) -> List[List[str]]:
        """Unknown document attributes rendered as custom tags."""
        tags = []
        for key, value in attributes.items():
            if key in _KNOWN_ATTRIBUTES or value is None:
                continue
            if isinstance(value, bool):
                tags.append([key, "true" if value else "false"])
            elif isinstance(value, list):
                if value:
                    tags.append([key] + [str(item) for item in value])
            elif isinstance(value, dict):
                continue
            else:
                tags.append([key, str(value)])
        return tags


def _address_pair(value: Any) -> Any:
    """``{address, event_id}`` from a mapping or an ``address, event_id`` header value."""
    if isinstance(value, str):
        address, _, event_id = value.partition(",")
        return {"address": address.strip(), "event_id": event_id.strip()}
    return value


def _nostr_references(value: Any) -> Any:
    """
    NIP-27 references from a list of mappings or ``type:id`` entries.

    Example:
        >>> _nostr_references("event:abc, profile:def")
        [{'type': 'event', 'id': 'abc'}, {'type': 'profile', 'id': 'def'}]
    """
    if isinstance(value, str):
        value = split_list(value)
    if not isinstance(value, list):
        return value

    references = []
    for entry in value:
        if isinstance(entry, str):
            kind, _, identifier = entry.partition(":")
            entry = {"type": kind.strip(), "id": identifier.strip()}
        references.append(entry)
    return references


def _wikilink_definitions(value: Any, content: Optional[str] = None) -> Any:
    """
    Wikilink definitions as a list, filtered to the terms used in ``content`` when given.

    Accepts a list of mappings, a ``{term: definition}`` mapping, or a header
    value of comma-separated ``term|definition`` entries.
    """
    if isinstance(value, str):
        entries = [entry.partition("|") for entry in split_list(value)]
        value = [{"term": term.strip(), "definition": definition.strip()} for term, _, definition in entries]
    elif isinstance(value, dict):
        value = [{"term": term, "definition": definition} for term, definition in value.items()]
    if not isinstance(value, list) or content is None:
        return value

    used = {link["term"] for link in find_wikilinks(content)}
    return [link for link in value if not isinstance(link, dict) or link.get("term") in used]
