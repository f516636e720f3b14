#!/usr/bin/env python3
"""
Metadata resolution for Markdown chapters.

A chapter may open with a YAML header delimited by ``---`` lines:

    ---
    title: "Post A"
    date: "2025-01-01"
    author: "Jane"
    description: "Custom summary."
    ---
    # Post A
    ...

The header is split from the body, decoded, and normalized into a
``FrontMatter`` record. Every field has a fallback so resolution never fails:
a missing or broken header yields a synthetic record built from the file name
and modification time, and a bad date only replaces the date.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

import yaml

from config import get_logger
from models import FrontMatter
from utils import split_lines

# Module-specific logger
logger = get_logger("frontmatter")

HEADER_DELIMITER = "---"

# Keys accepted for the summary field, in priority order
SUMMARY_KEYS = ("description", "summary")


def split_front_matter(text: str) -> Tuple[Optional[str], str]:
    """Split a leading ``---`` delimited header block from the body.

    The header is recognised only when the very first line is the delimiter
    and a closing delimiter follows. Otherwise the whole text is body.

    Returns:
        (header_text or None, body) where the body always ends with a newline.
    """
    lines = split_lines(text)
    if lines and lines[0].startswith("\ufeff"):
        lines[0] = lines[0][1:]

    if not lines or lines[0].strip() != HEADER_DELIMITER:
        return None, "\n".join(lines) + "\n"

    for idx in range(1, len(lines)):
        if lines[idx].strip() == HEADER_DELIMITER:
            header = "\n".join(lines[1:idx])
            if header:
                header += "\n"
            body = "\n".join(lines[idx + 1:]) + "\n"
            return header, body

    # Unterminated header: treat the delimiter as ordinary content
    return None, "\n".join(lines) + "\n"


def _from_rfc3339(value: str) -> Optional[datetime]:
    candidate = value.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    # Require a time component; bare dates are handled by the next parser
    if "T" not in candidate and "t" not in candidate and " " not in candidate:
        return None
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed.astimezone(timezone.utc)


def _from_calendar_date(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m-%d")
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


DATE_PARSERS: Tuple[Callable[[str], Optional[datetime]], ...] = (
    _from_rfc3339,
    _from_calendar_date,
)


def parse_date(value: Any) -> Optional[datetime]:
    """Parse a header date value into an aware UTC datetime.

    Accepts an RFC 3339 timestamp with offset or a bare ``YYYY-MM-DD`` date
    (midnight UTC). YAML may already have decoded unquoted values into
    ``date``/``datetime`` objects; those follow the same rules (a datetime
    without an offset is rejected). Anything else returns None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return None
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if not isinstance(value, str):
        return None
    for parser in DATE_PARSERS:
        parsed = parser(value)
        if parsed is not None:
            return parsed
    return None


def _first_text(values: Iterable[Any]) -> Optional[str]:
    """Return the first value that is not None, as a string."""
    for value in values:
        if value is None or isinstance(value, (dict, list)):
            continue
        return str(value)
    return None


def synthetic_front_matter(stem: str, body: str, fallback_date: datetime) -> FrontMatter:
    """Record used when a document has no usable header.

    The whole body doubles as the summary so the document still previews.
    """
    return FrontMatter(title=stem, date=fallback_date, author=None, summary=body)


class HeaderLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as strings for parse_date."""


HeaderLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def decode_header(header: str) -> Optional[Dict[str, Any]]:
    """Decode a YAML header into a mapping, or None when it is not one."""
    try:
        data = yaml.load(header, Loader=HeaderLoader)
    except (yaml.YAMLError, ValueError) as e:
        logger.debug(f"Unparseable front matter: {e}")
        return None
    if not isinstance(data, dict):
        return None
    return data


def resolve_front_matter(header: Optional[str], body: str, stem: str, fallback_date: datetime) -> FrontMatter:
    """Resolve a document's metadata with the full fallback chain.

    Args:
        header: Raw header text from ``split_front_matter`` (None when absent)
        body: Document body
        stem: File name without extension, the default title
        fallback_date: File modification time in UTC

    Returns:
        A FrontMatter with a non-empty title and a date.
    """
    if header is None or not header.strip():
        return synthetic_front_matter(stem, body, fallback_date)

    data = decode_header(header)
    if data is None:
        return synthetic_front_matter(stem, body, fallback_date)

    title = (_first_text([data.get("title")]) or "").strip() or stem

    published = parse_date(data.get("date"))
    if published is None:
        if data.get("date") is not None:
            logger.debug(f"Unrecognised date {data.get('date')!r} for '{stem}', using file time")
        published = fallback_date

    return FrontMatter(
        title=title,
        date=published,
        author=_first_text([data.get("author")]),
        summary=_first_text(data.get(key) for key in SUMMARY_KEYS),
    )


def parse_document_text(text: str, stem: str, fallback_date: datetime) -> Tuple[FrontMatter, str]:
    """Split and resolve a whole file in one go.

    Returns:
        (front matter, body)
    """
    header, body = split_front_matter(text)
    return resolve_front_matter(header, body, stem, fallback_date), body
