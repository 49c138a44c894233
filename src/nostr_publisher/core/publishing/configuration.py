"""
Content configuration resolution.

Settings are taken from the caller first, then from the document's own
attributes, then from the format default. Combinations that cannot be
published are rejected with fixed messages callers may match on.
"""

import logging
from typing import Any, Dict, Optional, Union

from ..compiler.configuration import ContentConfiguration, MIN_CONTENT_LEVEL, MAX_CONTENT_LEVEL
from ..document_processor.formats import DocumentFormat
from ..document_processor.metadata.attributes import parse_boolean
from ..event_kinds.types import EventKind, SUPPORTED_KIND_NAMES
from ...exceptions.compiler_exceptions import ConfigConstraintError

logger = logging.getLogger(__name__)

MARKDOWN_LEVEL_MESSAGE = (
    "Markdown files cannot have content-level parameters. "
    "They are always flat articles (content-level 0)."
)
MARKDOWN_KIND_MESSAGE = (
    "Markdown files cannot have content-kind parameters. "
    "They always use 30023 (Long-form Content)."
)
LONG_FORM_LEVEL_MESSAGE = (
    "30023 (Long-form Content) requires content-level > 0. "
    "Use --content-level 1 or higher for hierarchical publications."
)

FORMAT_DEFAULTS = {
    DocumentFormat.MARKDOWN: (0, EventKind.LONG_FORM),
    DocumentFormat.ASCIIDOC: (0, EventKind.PUBLICATION_CONTENT),
}


def resolve_configuration(
    document_format: DocumentFormat,
    attributes: Optional[Dict[str, Any]] = None,
    content_level: Optional[Union[int, str]] = None,
    content_kind: Optional[Union[int, str, EventKind]] = None,
    static_d_tag: Optional[bool] = None,
    default_static_d_tag: bool = False,
    document_path: Optional[str] = None
) -> ContentConfiguration:
    """
    Resolve the configuration a document is compiled with.

    Args:
        document_format: Source format of the document
        attributes: Normalized document attributes
        content_level: Level requested by the caller, None to defer
        content_kind: Kind requested by the caller, None to defer
        static_d_tag: Identifier mode requested by the caller, None to defer
        default_static_d_tag: Identifier mode when neither caller nor document set one
        document_path: Path reported in errors

    Returns:
        ContentConfiguration with the source of each setting recorded

    Raises:
        ConfigConstraintError: If the settings violate a format/kind/level constraint
    """
    attributes = attributes or {}
    default_level, default_kind = FORMAT_DEFAULTS[document_format]
    sources: Dict[str, str] = {}

    raw_level, sources["content_level"] = _pick(content_level, attributes.get("content_level"))
    raw_kind, sources["content_kind"] = _pick(content_kind, attributes.get("content_kind"))

    if document_format is DocumentFormat.MARKDOWN:
        if raw_level is not None and _parse_level(raw_level, document_path) != default_level:
            raise ConfigConstraintError(MARKDOWN_LEVEL_MESSAGE, document_path=document_path, parameter="content_level")
        if raw_kind is not None and EventKind.parse(raw_kind) is not default_kind:
            raise ConfigConstraintError(MARKDOWN_KIND_MESSAGE, document_path=document_path, parameter="content_kind")

    level = default_level if raw_level is None else _parse_level(raw_level, document_path)
    kind = default_kind if raw_kind is None else _parse_kind(raw_kind, document_path)

    if raw_level is None:
        sources["content_level"] = "default"
    if raw_kind is None:
        sources["content_kind"] = "default"

    if kind is EventKind.LONG_FORM and level == 0 and document_format is DocumentFormat.ASCIIDOC:
        raise ConfigConstraintError(LONG_FORM_LEVEL_MESSAGE, document_path=document_path, parameter="content_level")

    if static_d_tag is not None:
        static, sources["static_d_tag"] = bool(static_d_tag), "argument"
    elif parse_boolean(attributes.get("static_d_tag")) is not None:
        static, sources["static_d_tag"] = parse_boolean(attributes.get("static_d_tag")), "document"
    else:
        static, sources["static_d_tag"] = default_static_d_tag, "default"

    configuration = ContentConfiguration(
        content_level=level,
        content_kind=kind,
        document_format=document_format,
        static_d_tag=static,
        sources=sources,
    )
    logger.debug(f"Resolved configuration: {configuration.to_dict()}")
    return configuration


def _pick(argument: Any, attribute: Any):
    if argument is not None:
        return argument, "argument"
    if attribute is not None and attribute != "":
        return attribute, "document"
    return None, "default"


def _parse_level(value: Any, document_path: Optional[str]) -> int:
    try:
        level = int(str(value).strip())
    except ValueError:
        level = None

    if level is None or not MIN_CONTENT_LEVEL <= level <= MAX_CONTENT_LEVEL:
        raise ConfigConstraintError(
            f"Content level must be between {MIN_CONTENT_LEVEL} and {MAX_CONTENT_LEVEL}, got: {value}",
            document_path=document_path,
            parameter="content_level",
        )
    return level


def _parse_kind(value: Any, document_path: Optional[str]) -> EventKind:
    kind = EventKind.parse(value)
    if kind is None:
        raise ConfigConstraintError(
            f"Unsupported content kind: {value}. Supported: {SUPPORTED_KIND_NAMES}",
            document_path=document_path,
            parameter="content_kind",
        )
    return kind
