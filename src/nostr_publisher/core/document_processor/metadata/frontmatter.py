"""
Markdown frontmatter.

A Markdown source may open with a YAML block fenced by ``---`` or a TOML
block fenced by ``+++``. The block must be a mapping; its keys are fed
through the same alias table as AsciiDoc header attributes.
"""

import re
import logging
import tomllib
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

import yaml

from ....exceptions.compiler_exceptions import FrontmatterParseError

logger = logging.getLogger(__name__)


def _fence(marker: str) -> "re.Pattern[str]":
    token = re.escape(marker)
    return re.compile(rf'\A{token}[ \t]*\r?\n(.*?\r?\n)?{token}[ \t]*(?:\r?\n|\Z)', re.DOTALL)


def _load_yaml(block: str) -> Any:
    try:
        return yaml.safe_load(block)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        # +2: the opening fence plus the 0-based mark
        line_number = mark.line + 2 if mark is not None else None
        raise FrontmatterParseError(
            f"Invalid YAML frontmatter: {e}",
            line_number=line_number,
            frontmatter_type="yaml",
            content_preview=block[:200],
        ) from e


def _load_toml(block: str) -> Any:
    try:
        return tomllib.loads(block)
    except tomllib.TOMLDecodeError as e:
        raise FrontmatterParseError(
            f"Invalid TOML frontmatter: {e}",
            frontmatter_type="toml",
            content_preview=block[:200],
        ) from e


# Checked in order; the first fence that matches wins.
_FORMATS: Tuple[Tuple[str, "re.Pattern[str]", Callable[[str], Any]], ...] = (
    ("yaml", _fence("---"), _load_yaml),
    ("toml", _fence("+++"), _load_toml),
)


@dataclass
class FrontmatterResult:
    """Frontmatter split off the top of a Markdown source.

    Attributes:
        has_frontmatter: True when a fenced block was found
        metadata: Parsed block (empty when there is none)
        content_without_frontmatter: Source text after the closing fence
        frontmatter_type: 'yaml', 'toml' or None
        line_count: Lines taken up by the block, fences included
    """
    has_frontmatter: bool
    metadata: Dict[str, Any] = field(default_factory=dict)
    content_without_frontmatter: str = ""
    frontmatter_type: Optional[str] = None
    line_count: int = 0


class FrontmatterParser:
    """Splits YAML (``---``) or TOML (``+++``) frontmatter from Markdown text."""

    def parse(self, content: str) -> FrontmatterResult:
        """Parse the frontmatter block at the start of ``content``, if any.

        Args:
            content: Markdown source

        Returns:
            FrontmatterResult; ``has_frontmatter`` is False when no fence opens the text

        Raises:
            FrontmatterParseError: If the block is malformed or not a mapping
        """
        for frontmatter_type, pattern, load in _FORMATS:
            match = pattern.match(content)
            if not match:
                continue

            block = match.group(1) or ""
            metadata = load(block)
            if metadata is None:
                metadata = {}
            if not isinstance(metadata, dict):
                raise FrontmatterParseError(
                    "Frontmatter must be a mapping of keys to values",
                    frontmatter_type=frontmatter_type,
                    content_preview=str(metadata)[:200],
                )

            consumed = content[:match.end()]
            logger.debug(f"Parsed {frontmatter_type} frontmatter with {len(metadata)} keys")
            return FrontmatterResult(
                has_frontmatter=True,
                metadata=metadata,
                content_without_frontmatter=content[match.end():],
                frontmatter_type=frontmatter_type,
                line_count=consumed.count("\n"),
            )

        return FrontmatterResult(has_frontmatter=False, content_without_frontmatter=content)
