"""
Compiled unit types.

An index unit lists ordered references to other units and never carries
content. A content unit carries the text of one section, optionally merged
with its whole subtree.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

INDEX_KIND = 30040


class SectionType(Enum):
    """Role a compiled unit plays in the publication."""
    ARTICLE = "article"
    PREAMBLE = "preamble"
    CONTENT = "content"
    INDEX = "index"

    def __str__(self) -> str:
        return self.value


@dataclass
class ContentReference:
    """Ordered reference from an index unit to one of its children."""
    kind: int
    d_tag: str
    relay_hint: str = ""
    order: int = 0
    event_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "kind": self.kind,
            "d_tag": self.d_tag,
            "relay": self.relay_hint,
            "order": self.order,
        }
        if self.event_id:
            data["event_id"] = self.event_id
        return data


@dataclass
class ContentUnit:
    """
    Unit carrying section text.

    Attributes:
        kind: Event kind the unit renders to (30023, 30041 or 30818)
        d_tag: Identifier, unique within the run
        title: Title used for the event
        content: Section text, merged with descendants where applicable
        level: Nesting depth of the source section (root = 1, 0 for flat articles)
        section_type: Role of the unit
        source_order: Pre-order position of the source section
        parent_d_tag: Identifier of the index that references the unit
    """
    kind: int
    d_tag: str
    title: str
    content: str
    level: int = 0
    section_type: SectionType = SectionType.CONTENT
    source_order: int = 0
    parent_d_tag: Optional[str] = None

    @property
    def is_index(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "d_tag": self.d_tag,
            "title": self.title,
            "level": self.level,
            "section_type": str(self.section_type),
            "content_length": len(self.content),
            "parent": self.parent_d_tag,
        }


@dataclass
class IndexUnit:
    """
    Unit listing references to other units in document order.

    Content is always empty; ``references`` carry kind and identifier of
    each referenced unit.
    """
    d_tag: str
    title: str
    references: List[ContentReference] = field(default_factory=list)
    level: int = 1
    source_order: int = 0
    parent_d_tag: Optional[str] = None
    is_main: bool = False
    kind: int = INDEX_KIND
    section_type: SectionType = SectionType.INDEX

    @property
    def content(self) -> str:
        return ""

    @property
    def is_index(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "d_tag": self.d_tag,
            "title": self.title,
            "level": self.level,
            "section_type": str(self.section_type),
            "is_main": self.is_main,
            "parent": self.parent_d_tag,
            "references": [reference.to_dict() for reference in self.references],
        }


CompiledUnit = Union[ContentUnit, IndexUnit]


@dataclass
class CompilationResult:
    """
    Output of one compile call.

    Attributes:
        units: All units in document order (each index before its children)
        main_index: Top-level index unit, None for flat articles
        content_level: Level the document was compiled at
    """
    units: List[CompiledUnit] = field(default_factory=list)
    main_index: Optional[IndexUnit] = None
    content_level: int = 0

    @property
    def content_units(self) -> List[ContentUnit]:
        return [unit for unit in self.units if not unit.is_index]

    @property
    def index_units(self) -> List[IndexUnit]:
        return [unit for unit in self.units if unit.is_index]

    def publish_order(self) -> List[CompiledUnit]:
        """
        Units ordered so every unit comes after everything it references.

        Content units come first in document order, then index units from
        the deepest up, with the main index last.
        """
        indexes = sorted(
            self.index_units,
            key=lambda unit: (-unit.level, unit.source_order)
        )
        return self.content_units + indexes

    def find(self, d_tag: str) -> Optional[CompiledUnit]:
        for unit in self.units:
            if unit.d_tag == d_tag:
                return unit
        return None
