#!/usr/bin/env python3
"""
Page planning for multi-page feeds.

Splits the newest-first list into contiguous pages and names the files each
page is published under. Page 1 holds the newest items and uses the plain
feed name (``rss.xml``); later pages append their number (``rss2.xml``).
"""

from typing import List, Optional, Sequence, TypeVar

from models import Page

T = TypeVar("T")


def plan_pages(items: Sequence[T], max_items: int = 0) -> List[Page[T]]:
    """Partition ``items`` into pages of at most ``max_items``.

    ``max_items`` of 0 (or anything at least the item count) yields a single
    page holding everything; an empty list still yields one empty page.
    """
    items = list(items)
    if max_items <= 0 or len(items) <= max_items:
        return [Page(index=1, total=1, items=items)]

    total = -(-len(items) // max_items)
    return [
        Page(index=number + 1, total=total, items=items[number * max_items:(number + 1) * max_items])
        for number in range(total)
    ]


def page_filename(base: str, extension: str, index: int) -> str:
    """File name of page ``index`` (1-based), e.g. ``rss.xml``, ``rss2.xml``."""
    suffix = "" if index <= 1 else str(index)
    return f"{base}{suffix}.{extension.lstrip('.')}"


def page_url(base_url: str, base: str, extension: str, index: Optional[int]) -> Optional[str]:
    """Public URL of page ``index`` below ``base_url``; None when there is no such page."""
    if index is None or index < 1:
        return None
    return f"{base_url.rstrip('/')}/{page_filename(base, extension, index)}"
