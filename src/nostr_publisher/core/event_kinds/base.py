"""
Event Kind Handler Base

Shared behaviour for all event kind handlers: field declarations, common
validation, the standard tag set and identifier generation.
"""

import time
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from .types import Event
from ..identifiers import default_clock, slugify

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
MAX_SUMMARY_LENGTH = 500


class EventKindHandler(ABC):
    """
    Abstract base class for event kind handlers.

    A handler turns a unit configuration dictionary plus content into an
    unsigned Event. Subclasses declare their kind, fields and any extra
    tags or validation rules.

    Attributes:
        kind: Event kind number
        name: Human readable name
        description: One-line description for listings
        suffix_identifiers: Whether generated identifiers get a timestamp suffix
    """

    kind: int = 0
    name: str = ""
    description: str = ""
    suffix_identifiers: bool = True

    @abstractmethod
    def required_fields(self) -> List[str]:
        """Configuration fields that must be present and non-empty."""

    def optional_fields(self) -> Dict[str, str]:
        """Optional configuration fields with descriptions."""
        return {
            "summary": "Brief description of the content",
            "image": "URL or local path of an image for the content",
            "topics": "List of topic tags (t tags)",
            "published_at": "Unix timestamp of first publication",
            "custom_tags": "List of additional tags, each with at least two entries",
            "d-tag": "Explicit identifier (generated from the title if not provided)",
            "reuse-d-tag": "Identifier of an existing event to replace",
        }

    def validate(self, config: Dict[str, Any]) -> List[str]:
        """
        Validate a unit configuration.

        Args:
            config: Unit configuration dictionary

        Returns:
            List of error messages, empty when the configuration is valid
        """
        errors = []

        for field_name in self.required_fields():
            value = config.get(field_name)
            if value is None or (isinstance(value, (str, list, dict)) and not value):
                errors.append(f"Required field '{field_name}' is missing or empty")

        title = config.get("title")
        if isinstance(title, str) and len(title) > MAX_TITLE_LENGTH:
            errors.append(f"Title must be {MAX_TITLE_LENGTH} characters or less")

        summary = config.get("summary")
        if isinstance(summary, str) and len(summary) > MAX_SUMMARY_LENGTH:
            errors.append(f"Summary must be {MAX_SUMMARY_LENGTH} characters or less")

        image = config.get("image")
        if image is not None and not self._is_valid_image(image):
            errors.append("Image must be an http(s) URL or a local file path")

        topics = config.get("topics")
        if topics is not None:
            if not isinstance(topics, list):
                errors.append("Topics must be a list")
            elif not all(isinstance(topic, str) and topic.strip() for topic in topics):
                errors.append("Each topic must be a non-empty string")

        errors.extend(self.validate_kind_fields(config))
        return errors

    def validate_kind_fields(self, config: Dict[str, Any]) -> List[str]:
        """Kind-specific validation hook; no extra rules by default."""
        return []

    def render(self, config: Dict[str, Any], content: str = "") -> Event:
        """
        Build the event for a unit.

        Args:
            config: Unit configuration dictionary
            content: Event content

        Returns:
            Unsigned Event with the standard and kind-specific tags
        """
        tags = self.standard_tags(config)
        tags.extend(self.kind_tags(config, content))
        tags.extend(self.custom_tags(config))

        event = Event(
            kind=self.kind,
            content=self.event_content(config, content),
            tags=tags,
            created_at=int(config.get("created_at") or time.time()),
            pubkey=config.get("pubkey"),
        )
        logger.debug(f"Rendered kind {self.kind} event '{event.d_tag}' with {len(tags)} tags")
        return event

    def event_content(self, config: Dict[str, Any], content: str) -> str:
        return content or ""

    def kind_tags(self, config: Dict[str, Any], content: str) -> List[List[str]]:
        """Kind-specific tags appended after the standard tags."""
        return []

    def post_process(self, event: Event, config: Dict[str, Any]) -> List[Event]:
        """Companion events to publish along with ``event``; none by default."""
        return []

    def resolve_identifier(self, config: Dict[str, Any]) -> Optional[str]:
        """
        Identifier for the ``d`` tag: explicit, then reused, then generated.
        """
        explicit = config.get("d-tag")
        if explicit:
            return str(explicit)

        reused = config.get("reuse-d-tag")
        if reused:
            return str(reused)

        title = config.get("title")
        if not title:
            return None

        include_timestamp = self.suffix_identifiers and not config.get("static_d_tag", False)
        return self.make_identifier(str(title), include_timestamp, config.get("identifier_stamp"))

    def make_identifier(self, text: str, include_timestamp: bool = True, stamp: Optional[int] = None) -> str:
        """
        Generic slug identifier, optionally suffixed with a timestamp.

        Example:
            >>> handler.make_identifier("Chapter One", True, 1700000000)
            'chapter-one-1700000000'
        """
        identifier = slugify(text)
        if include_timestamp:
            identifier = f"{identifier}-{stamp if stamp is not None else default_clock().next_stamp()}"
        return identifier

    def standard_tags(self, config: Dict[str, Any]) -> List[List[str]]:
        """``d``, ``title``, ``summary``, ``image``, ``t`` and ``published_at`` tags."""
        tags = []

        identifier = self.resolve_identifier(config)
        if identifier:
            tags.append(["d", identifier])

        if config.get("title"):
            tags.append(["title", str(config["title"])])

        if config.get("summary"):
            tags.append(["summary", str(config["summary"])])

        if config.get("image"):
            tags.append(["image", str(config["image"])])

        for topic in config.get("topics") or []:
            tags.append(["t", str(topic)])

        if config.get("published_at") is not None:
            tags.append(["published_at", str(config["published_at"])])

        return tags

    def custom_tags(self, config: Dict[str, Any]) -> List[List[str]]:
        """Custom tags with at least a name and one value."""
        tags = []
        for tag in config.get("custom_tags") or []:
            if isinstance(tag, (list, tuple)) and len(tag) >= 2:
                tags.append([str(item) for item in tag])
        return tags

    def describe(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "name": self.name,
            "description": self.description,
            "required_fields": self.required_fields(),
            "optional_fields": self.optional_fields(),
        }

    def _is_valid_image(self, image: Any) -> bool:
        if not isinstance(image, str) or not image.strip():
            return False

        parsed = urlparse(image)
        if parsed.scheme in ("http", "https"):
            return bool(parsed.netloc)
        # Windows drive letters parse as one-letter schemes.
        return parsed.scheme == "" or len(parsed.scheme) == 1

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind})"
