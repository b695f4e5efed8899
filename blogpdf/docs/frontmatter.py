"""Metadata section parsing for Zola-style posts.

A post opens with a ``+++`` line, holds ``key = value`` assignments, and
closes with a second ``+++`` line. Parsing is lenient: a missing or
unclosed section yields default metadata and the whole text as body.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from .model import Metadata, SourceDocument

DELIMITER = "+++"

_ASSIGN_RE = re.compile(r"^\s*([A-Za-z0-9_-]+)\s*=\s*(.*?)\s*$")
_TABLE_RE = re.compile(r"^\s*\[\[?[^\]]*\]\]?\s*$")

# key in the metadata section -> Metadata attribute
_FIELD_KEYS: Dict[str, str] = {
    "title": "title",
    "date": "date",
    "featured_image": "featured_image",
    "featured-image": "featured_image",
    "description": "description",
}

_DATE_FORMATS = [
    "%Y-%m-%d",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d",
    "%d.%m.%Y",
    "%b %d, %Y",
    "%B %d, %Y",
]

LONG_DATE_FORMAT = "%B %d, %Y"

REQUIRED_FIELDS = ("title", "date")


def split_frontmatter(text: str) -> Tuple[str, str, bool]:
    """Split a post into (metadata text, body, found).

    The first non-blank line must be the delimiter; the next delimiter line
    closes the section. Without a well-formed section the whole text is body.
    """
    lines = (text or "").replace("\r\n", "\n").split("\n")
    start = 0
    while start < len(lines) and not lines[start].strip():
        start += 1
    if start >= len(lines) or lines[start].strip() != DELIMITER:
        return "", text or "", False

    for end in range(start + 1, len(lines)):
        if lines[end].strip() == DELIMITER:
            meta = "\n".join(lines[start + 1:end])
            body = "\n".join(lines[end + 1:])
            return meta, body, True
    return "", text or "", False


def _unquote(raw: str) -> str:
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("\"", "'"):
        inner = value[1:-1]
        if value[0] == "\"":
            inner = inner.replace("\\\"", "\"").replace("\\\\", "\\")
        return inner
    # unquoted: drop a trailing comment
    if "#" in value:
        value = value.split("#", 1)[0].rstrip()
    return value


def _quoted_prefix(raw: str) -> str:
    """Keep only the quoted string when a comment follows it."""
    value = raw.strip()
    if value[:1] in ("\"", "'"):
        quote = value[0]
        i = 1
        while i < len(value):
            if value[i] == "\\" and quote == "\"":
                i += 2
                continue
            if value[i] == quote:
                return value[: i + 1]
            i += 1
    return value


def _collect_fields(meta_text: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for line in (meta_text or "").splitlines():
        if not line.strip() or line.lstrip().startswith("#") or _TABLE_RE.match(line):
            continue
        m = _ASSIGN_RE.match(line)
        if not m:
            continue
        attr = _FIELD_KEYS.get(m.group(1))
        if attr is None or attr in values:
            continue
        values[attr] = _unquote(_quoted_prefix(m.group(2)))
    return values


def parse_metadata(meta_text: str) -> Metadata:
    """Populate a Metadata struct from the section text in one pass.

    First match wins; unknown keys and table headers are ignored.
    """
    return _build_metadata(_collect_fields(meta_text))


def _build_metadata(values: Dict[str, str]) -> Metadata:
    meta = Metadata()
    if values.get("title"):
        meta.title = values["title"]
    if values.get("date"):
        meta.date = values["date"]
    if values.get("featured_image"):
        meta.featured_image = values["featured_image"]
    if values.get("description"):
        meta.description = values["description"]
    return meta


def _parse_date(raw: str) -> Optional[datetime]:
    value = raw.strip()
    if not value:
        return None
    iso = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(iso)
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def try_format_date(raw: str) -> Optional[str]:
    parsed = _parse_date(raw or "")
    if parsed is None:
        return None
    return parsed.strftime(LONG_DATE_FORMAT)


def format_date(raw: str) -> str:
    """Reformat a date to the long form, e.g. "January 15, 2024".

    Unparseable input is returned unchanged.
    """
    formatted = try_format_date(raw)
    if formatted is None:
        return raw or ""
    return formatted


def read_source(path: str) -> SourceDocument:
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    meta_text, body, found = split_frontmatter(text)
    values = _collect_fields(meta_text)
    missing: List[str] = [name for name in REQUIRED_FIELDS if not values.get(name)]
    return SourceDocument(
        path=path,
        metadata=_build_metadata(values),
        body=body,
        has_metadata=found,
        missing_fields=missing,
        meta_text=meta_text,
    )
