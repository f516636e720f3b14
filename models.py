#!/usr/bin/env python3
"""
Data model for the feed builder.

Documents are built once per eligible Markdown file and never mutated; feed
entries, pages and channel metadata are derived per run and handed to the
format renderers, which read nothing else.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class FrontMatter:
    """Resolved metadata for a single document.

    ``title`` is never empty and ``date`` is always set (UTC) once resolution
    has run, either from the header or from the file modification time.
    """

    title: str
    date: datetime
    author: Optional[str] = None
    summary: Optional[str] = None


@dataclass(frozen=True)
class Document:
    """A chapter plus its parsed metadata.

    Attributes:
        path: Source-tree-relative path, slash separated (e.g. "guide/intro.md")
        body: Markdown body with the header block removed, newline terminated
        meta: Resolved metadata record
    """

    path: str
    body: str
    meta: FrontMatter


@dataclass(frozen=True)
class FeedEntry:
    """Format-neutral feed entry; the only input renderers read per document."""

    id: str
    link: str
    title: str
    preview: str
    published: datetime
    author: Optional[str] = None


@dataclass(frozen=True)
class Channel:
    """Run-level feed identity supplied by the host."""

    title: str
    site_url: str
    description: str

    @property
    def base_url(self) -> str:
        """Site URL without trailing slashes."""
        return self.site_url.strip().rstrip("/")

    @property
    def home_url(self) -> str:
        return f"{self.base_url}/"


@dataclass(frozen=True)
class Page(Generic[T]):
    """A contiguous slice of the sorted list.

    ``newer`` and ``older`` are the 1-based indices of the neighbouring pages,
    or None at either end.
    """

    index: int
    total: int
    items: List[T] = field(default_factory=list)

    @property
    def newer(self) -> Optional[int]:
        return self.index - 1 if self.index > 1 else None

    @property
    def older(self) -> Optional[int]:
        return self.index + 1 if self.index < self.total else None

    @property
    def paginated(self) -> bool:
        return self.total > 1


@dataclass(frozen=True)
class FeedOutput:
    """One serialized feed document ready to be written."""

    filename: str
    content: bytes
    format: str
    page: int
