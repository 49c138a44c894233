"""
Attribute normalization for document headers.

Maps the many spellings authors use for the same header attribute onto one
canonical key, converts values into the shape event tags expect, and parses
the positional AsciiDoc author and revision lines.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Canonical key for every accepted spelling. Lookups happen after
# lower-casing, so only '_' and '-' variants need listing.
ATTRIBUTE_ALIASES: Dict[str, str] = {
    "description": "summary",
    "summary": "summary",
    "abstract": "summary",
    "keywords": "t",
    "tags": "t",
    "t": "t",
    "subject": "t",
    "author": "author",
    "authors": "author",
    "email": "email",
    "author_email": "email",
    "firstname": "firstname",
    "first_name": "firstname",
    "lastname": "lastname",
    "last_name": "lastname",
    "middlename": "middlename",
    "middle_name": "middlename",
    "authorinitials": "authorinitials",
    "author_initials": "authorinitials",
    "version": "version",
    "revnumber": "version",
    "revision": "version",
    "date": "revdate",
    "revdate": "revdate",
    "revision_date": "revdate",
    "revremark": "revremark",
    "relays": "relays",
    "relay": "relays",
    "auto_update": "auto_update",
    "autoupdate": "auto_update",
    "auto-update": "auto_update",
    "type": "type",
    "doctype": "type",
    "document_type": "type",
    "lang": "l",
    "language": "l",
    "toc": "toc",
    "table_of_contents": "toc",
    "toclevels": "toclevels",
    "toc_levels": "toclevels",
    "sectanchors": "sectanchors",
    "section_anchors": "sectanchors",
    "sectlinks": "sectlinks",
    "section_links": "sectlinks",
    "icons": "icons",
    "imagesdir": "imagesdir",
    "images_dir": "imagesdir",
    "source-highlighter": "source-highlighter",
    "source_highlighter": "source-highlighter",
    "experimental": "experimental",
    "compat-mode": "compat-mode",
    "compat_mode": "compat-mode",
    "content-level": "content_level",
    "content_level": "content_level",
    "content-kind": "content_kind",
    "content_kind": "content_kind",
    "static-d-tag": "static_d_tag",
    "static_d_tag": "static_d_tag",
    "d-tag": "d-tag",
    "d_tag": "d-tag",
    "reuse-d-tag": "reuse-d-tag",
    "reuse_d_tag": "reuse-d-tag",
    "title": "title",
    "image": "image",
    "published_by": "published_by",
    "published-by": "published_by",
    "published_on": "published_on",
    "published-on": "published_on",
    "published_at": "published_at",
    "published-at": "published_at",
    "source": "source",
    "isbn": "isbn",
    "create_notification": "create_notification",
    "create-notification": "create_notification",
    "notification_text": "notification_text",
    "notification-text": "notification_text",
    "original_author": "original_author",
    "original-author": "original_author",
    "original_event": "original_event",
    "original-event": "original_event",
    "fork_from": "fork_from",
    "fork-from": "fork_from",
    "defer_to": "defer_to",
    "defer-to": "defer_to",
    "references": "references",
    "wikilinks": "wikilinks",
}

LIST_KEYS = frozenset({"t", "author"})
BOOLEAN_KEYS = frozenset({"auto_update", "static_d_tag", "create_notification", "sectanchors", "sectlinks", "experimental"})

_TRUE_VALUES = frozenset({"true", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "no", "off"})

_AUTHOR_PATTERN = re.compile(r'^(?P<name>[^<>]+?)\s*(?:<(?P<email>[^<>\s]+@[^<>\s]+)>)?\s*$')
_REVISION_PATTERN = re.compile(
    r'^v?(?P<version>\d+(?:\.\d+)*)'
    r'(?:\s*,\s*(?P<date>[^,]+?))?'
    r'(?:\s*,\s*(?P<remark>.+?))?\s*$'
)
_REVISION_DATE_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}')
_NAME_WORD = re.compile(r"^[^\W\d_][\w.'-]*$")


def canonical_key(key: str) -> str:
    """Return the canonical attribute name for a raw header key.

    Unknown keys are returned lower-cased so they pass through as
    custom tags.
    """
    lowered = key.strip().lower()
    return ATTRIBUTE_ALIASES.get(lowered, ATTRIBUTE_ALIASES.get(lowered.replace("-", "_"), lowered))


def is_known_attribute(key: str) -> bool:
    lowered = key.strip().lower()
    return lowered in ATTRIBUTE_ALIASES or lowered.replace("-", "_") in ATTRIBUTE_ALIASES


def parse_boolean(value: Any) -> Optional[bool]:
    """Interpret a boolean-like value, returning None when it is not one."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    return None


def split_list(value: Any) -> List[str]:
    """Split a comma-separated value (or list) into stripped, non-empty items."""
    if isinstance(value, (list, tuple)):
        items = [str(item) for item in value]
    else:
        items = str(value).split(",")
    return [item.strip() for item in items if item and item.strip()]


def normalize_value(key: str, value: Any) -> Any:
    """Convert a raw attribute value to the shape stored under ``key``."""
    if key in LIST_KEYS:
        if key == "author" and isinstance(value, str):
            return [author.name for author in parse_author_line(value)]
        return split_list(value)

    if key == "version" and isinstance(value, (str, int, float)):
        text = str(value).strip()
        return text[1:] if text[:1] in ("v", "V") and text[1:2].isdigit() else text

    if value is True or value == "":
        return True

    parsed = parse_boolean(value)
    if parsed is not None and (key in BOOLEAN_KEYS or key not in ATTRIBUTE_ALIASES.values()):
        return parsed

    if isinstance(value, str):
        return value.strip()

    if isinstance(value, (bool, list, dict)):
        return value

    # Numbers and YAML/TOML dates become their plain text form.
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


@dataclass
class AuthorInfo:
    """One author parsed from an author line."""
    name: str
    email: Optional[str] = None
    firstname: Optional[str] = None
    middlename: Optional[str] = None
    lastname: Optional[str] = None

    def to_attributes(self) -> Dict[str, str]:
        attributes = {}
        for key in ("email", "firstname", "middlename", "lastname"):
            value = getattr(self, key)
            if value:
                attributes[key] = value
        return attributes


def parse_author_line(line: str) -> List[AuthorInfo]:
    """Parse an AsciiDoc author line into one or more authors.

    Authors are separated by ``;`` or ``,``. Each entry is ``Name`` or
    ``Name <email>``; the first word is the first name, the last word the
    last name, and anything in between the middle name.

    Example:
        >>> parse_author_line("Dr. John A. Doe <j.doe@example.com>")[0].middlename
        'John A.'
    """
    authors = []
    for entry in re.split(r'[;,]', line):
        entry = entry.strip()
        if not entry:
            continue
        match = _AUTHOR_PATTERN.match(entry)
        if not match:
            continue

        name = " ".join(match.group("name").split())
        words = name.split(" ")
        author = AuthorInfo(name=name, email=match.group("email"), firstname=words[0])
        if len(words) > 1:
            author.lastname = words[-1]
        if len(words) > 2:
            author.middlename = " ".join(words[1:-1])
        authors.append(author)

    return authors


def looks_like_author_line(line: str) -> bool:
    """Return True for lines shaped like author entries.

    Only consulted for the line directly below the document title, where
    AsciiDoc expects the author line.
    """
    line = line.strip()
    if not line or line[0] in ":=#[/*.-" or ": " in line:
        return False

    entries = [entry.strip() for entry in re.split(r'[;,]', line) if entry.strip()]
    if not entries:
        return False

    for entry in entries:
        match = _AUTHOR_PATTERN.match(entry)
        if not match:
            return False
        words = match.group("name").split()
        if len(words) > 5 or not all(_NAME_WORD.match(word) for word in words):
            return False
    return True


def parse_revision_line(line: str) -> Optional[Dict[str, str]]:
    """Parse a positional revision line ``vX.Y, date, remark``.

    Returns None when the line is not a revision line.

    Example:
        >>> parse_revision_line("v1.0, 2024-01-15, Initial version")
        {'version': '1.0', 'revdate': '2024-01-15', 'revremark': 'Initial version'}
    """
    match = _REVISION_PATTERN.match(line.strip())
    if not match:
        return None

    stripped = line.strip()
    date = match.group("date")
    # A bare number is only a revision when marked with 'v'; dates keep it
    # from being confused with a numbered paragraph.
    if not stripped.lower().startswith("v") and not (date and _REVISION_DATE_PATTERN.match(date)):
        return None

    revision = {"version": match.group("version")}
    if date:
        revision["revdate"] = date.strip()
    if match.group("remark"):
        revision["revremark"] = match.group("remark").strip()
    return revision


@dataclass
class AttributeDictionary:
    """Ordered, normalized document attributes.

    Built once per run while the header block is read and handed on as a
    plain dict afterwards.
    """
    values: Dict[str, Any] = field(default_factory=dict)

    def set(self, raw_key: str, value: Any) -> str:
        key = canonical_key(raw_key)
        self.values[key] = normalize_value(key, value)
        if key == "revdate":
            self.values.setdefault("publication_date", self.values[key])
        return key

    def set_default(self, key: str, value: Any) -> None:
        if value is not None and key not in self.values:
            self.values[key] = value

    def add_authors(self, authors: List[AuthorInfo]) -> None:
        if not authors:
            return
        self.values["author"] = [author.name for author in authors]
        for key, value in authors[0].to_attributes().items():
            self.values.setdefault(key, value)

    def add_revision(self, revision: Dict[str, str]) -> None:
        for key, value in revision.items():
            self.set(key, value)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.values)
