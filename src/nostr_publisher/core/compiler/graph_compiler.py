"""
Graph Compiler

Flattens a section tree into index units and content units for a chosen
content level. Sections at or above the content level get an index that
lists their own text first and then each child; the section at the content
level (or a leaf above it) absorbs its whole subtree into one content unit.

Usage:
    >>> compiler = GraphCompiler(EventKindRegistry.with_defaults())
    >>> result = compiler.compile(tree, configuration, "Simple Nostr Guide")
    >>> len(result.index_units), len(result.content_units)
    (3, 3)
"""

import logging
from collections import Counter
from typing import List, Optional

from .configuration import ContentConfiguration
from .units import (
    INDEX_KIND,
    CompilationResult,
    CompiledUnit,
    ContentReference,
    ContentUnit,
    IndexUnit,
    SectionType,
)
from ..document_processor.structure import DocumentSection, DocumentTree
from ..event_kinds.registry import EventKindRegistry
from ..identifiers import IdentifierClock, default_clock, join_slugs, slugify
from ...exceptions.compiler_exceptions import DuplicateIdentifierError, StructuralError

logger = logging.getLogger(__name__)


class GraphCompiler:
    """
    Compiles a document into an ordered list of units.

    The compiler never mutates the section tree; each call returns freshly
    built units owned by the caller.

    Attributes:
        registry: Handlers that own the identifier rule for each kind
        clock: Source of the run-wide identifier timestamp
        relay_hint: Relay URL written into every content reference
    """

    def __init__(
        self,
        registry: EventKindRegistry,
        clock: Optional[IdentifierClock] = None,
        relay_hint: str = ""
    ) -> None:
        self.registry = registry
        self.clock = clock or default_clock()
        self.relay_hint = relay_hint

    def compile(
        self,
        tree: Optional[DocumentTree],
        configuration: ContentConfiguration,
        document_title: str,
        body: str = "",
        main_identifier: Optional[str] = None,
        document_path: Optional[str] = None
    ) -> CompilationResult:
        """
        Compile a document.

        Args:
            tree: Section tree; may be None for flat articles
            configuration: Resolved content level, kind and identifier mode
            document_title: Title of the document
            body: Full body text, used for flat (level 0) articles
            main_identifier: Explicit identifier for the main unit
            document_path: Path reported in errors

        Returns:
            CompilationResult with units in document order

        Raises:
            StructuralError: If a hierarchical compile has no section tree
            DuplicateIdentifierError: If two units end up with the same identifier
        """
        stamp = None if configuration.static_d_tag else self.clock.next_stamp()
        kind = configuration.content_kind.value

        if configuration.content_level == 0:
            article = ContentUnit(
                kind=kind,
                d_tag=main_identifier or self._identifier(kind, slugify(document_title), stamp),
                title=document_title,
                content=body.strip("\n"),
                level=0,
                section_type=SectionType.ARTICLE,
            )
            result = CompilationResult(units=[article], main_index=None, content_level=0)
        else:
            if tree is None:
                raise StructuralError(
                    "Hierarchical publishing needs a section tree; only AsciiDoc documents provide one.",
                    document_path=document_path,
                )
            units: List[CompiledUnit] = []
            main_index = self._compile_section(
                tree.root, configuration, stamp, None, units, main_identifier
            )
            result = CompilationResult(units=units, main_index=main_index, content_level=configuration.content_level)

        self._check_duplicates(result, document_path)

        logger.debug(
            f"Compiled '{document_title}' at level {configuration.content_level}: "
            f"{len(result.content_units)} content units, {len(result.index_units)} index units"
        )
        return result

    def _compile_section(
        self,
        section: DocumentSection,
        configuration: ContentConfiguration,
        stamp: Optional[int],
        parent_d_tag: Optional[str],
        units: List[CompiledUnit],
        main_identifier: Optional[str] = None
    ) -> IndexUnit:
        """
        Compile one section at or above the content level; return its index.

        Levels are the literal ``=`` marker depths, so a ``===`` header placed
        directly under the title sits at level 3 whatever its tree position.
        Children deeper than the content level are merged into this section's
        own content unit.
        """
        level = section.level
        content_level = configuration.content_level
        kind = configuration.content_kind.value
        base = self._section_slug(section)
        is_root = section.parent is None
        compiled_children = [child for child in section.children if child.level <= content_level]

        index = IndexUnit(
            d_tag=(main_identifier if is_root and main_identifier else self._identifier(INDEX_KIND, base, stamp)),
            title=section.title,
            level=level,
            source_order=section.source_order,
            parent_d_tag=parent_d_tag,
            is_main=is_root,
        )
        units.append(index)

        if level >= content_level or not compiled_children:
            content = ContentUnit(
                kind=kind,
                d_tag=self._identifier(kind, join_slugs([base, "content"]), stamp),
                title=section.title,
                content=section.get_all_content(include_headers=True),
                level=level,
                section_type=SectionType.CONTENT,
                source_order=section.source_order,
                parent_d_tag=index.d_tag,
            )
            units.append(content)
            self._add_reference(index, content)
            return index

        intro_text = self._intro_text(section, content_level)
        if intro_text:
            suffix = "preamble" if is_root else "content"
            intro = ContentUnit(
                kind=kind,
                d_tag=self._identifier(kind, join_slugs([base, suffix]), stamp),
                title=f"{section.title} - Preamble" if is_root else section.title,
                content=intro_text,
                level=level,
                section_type=SectionType.PREAMBLE,
                source_order=section.source_order,
                parent_d_tag=index.d_tag,
            )
            units.append(intro)
            self._add_reference(index, intro)

        for child in compiled_children:
            child_index = self._compile_section(child, configuration, stamp, index.d_tag, units)
            self._add_reference(index, child_index)

        return index

    def _intro_text(self, section: DocumentSection, content_level: int) -> str:
        """Own text of a section plus the full text of children below the content level."""
        parts = [section.content.strip("\n")] if section.content.strip() else []
        for child in section.children:
            if child.level > content_level:
                parts.append(child.header_line)
                merged = child.get_all_content(include_headers=True)
                if merged:
                    parts.append(merged)
        return "\n\n".join(parts)

    def _add_reference(self, index: IndexUnit, unit: CompiledUnit) -> None:
        index.references.append(ContentReference(
            kind=unit.kind,
            d_tag=unit.d_tag,
            relay_hint=self.relay_hint,
            order=len(index.references),
        ))

    def _section_slug(self, section: DocumentSection) -> str:
        """Slug of the section prefixed by its ancestors, document root excluded."""
        if section.parent is None:
            return slugify(section.title)
        ancestors = section.get_ancestors()[1:]
        return join_slugs([slugify(ancestor.title) for ancestor in ancestors] + [slugify(section.title)])

    def _identifier(self, kind: int, base: str, stamp: Optional[int]) -> str:
        handler = self.registry.get(kind)
        include_timestamp = stamp is not None and handler.suffix_identifiers
        return handler.make_identifier(base, include_timestamp, stamp)

    def _check_duplicates(self, result: CompilationResult, document_path: Optional[str]) -> None:
        counts = Counter(unit.d_tag for unit in result.units)
        duplicates = [d_tag for d_tag, count in counts.items() if count > 1]
        if duplicates:
            raise DuplicateIdentifierError(
                f"Duplicate identifiers in document: {', '.join(duplicates)}",
                duplicates=duplicates,
                document_path=document_path,
            )
