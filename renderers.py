#!/usr/bin/env python3
"""
Feed format renderers.

Each renderer turns one page of ``FeedEntry`` objects plus the channel
metadata into a complete serialized document:

- RSS 2.0 and Atom 1.0 through feedgen
- JSON Feed 1.1 through the json module

Renderers read only the shared entry model, so every format lists the same
entries in the same order with byte-identical preview markup.
"""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from feedgen.feed import FeedGenerator

from config import config, get_logger, APP_VERSION
from models import Channel, FeedEntry, Page
from pagination import page_filename, page_url

# Module-specific logger
logger = get_logger("renderers")

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"
CDATA_TERMINATOR = "]]>"


def page_updated(page: Page[FeedEntry]) -> datetime:
    """Newest publication date on the page, or the Unix epoch for an empty page."""
    if not page.items:
        return EPOCH
    return max(entry.published for entry in page.items)


def _new_generator(channel: Channel, self_url: str, updated: datetime) -> FeedGenerator:
    """FeedGenerator with the channel-level fields shared by RSS and Atom."""
    fg = FeedGenerator()
    fg.id(self_url)
    fg.title(channel.title)
    # feedgen takes the RSS <link> from the last link added
    fg.link(href=self_url, rel='self')
    fg.link(href=channel.home_url, rel='alternate')
    # RSS requires a non-empty channel description
    fg.description(channel.description or channel.title)
    fg.generator(config.FEED_GENERATOR, version=APP_VERSION)
    fg.updated(updated)
    return fg


def render_rss(page: Page[FeedEntry], channel: Channel) -> bytes:
    """Render one page as an RSS 2.0 document (feedgen)."""
    self_url = RSS.url(channel, page.index)
    fg = _new_generator(channel, self_url, page_updated(page))
    if any(entry.author for entry in page.items):
        fg.load_extension('dc')

    for entry in page.items:
        # feedgen prepends by default; keep page order
        fe = fg.add_entry(order='append')
        fe.title(entry.title)
        fe.link(href=entry.link)
        fe.guid(entry.id, permalink=True)
        if entry.preview:
            if CDATA_TERMINATOR in entry.preview:
                fe.description(entry.preview)
            else:
                fe.content(entry.preview, type='CDATA')
        fe.published(entry.published)
        if entry.author:
            fe.dc.dc_creator(entry.author)

    logger.debug(f"Rendered RSS page {page.index}/{page.total} with {len(page.items)} item(s)")
    return fg.rss_str(pretty=True)


def render_atom(page: Page[FeedEntry], channel: Channel) -> bytes:
    """Render one page as an Atom 1.0 document with self/next/prev links (feedgen)."""
    self_url = ATOM.url(channel, page.index)
    fg = _new_generator(channel, self_url, page_updated(page))
    next_url = ATOM.url(channel, page.older)
    prev_url = ATOM.url(channel, page.newer)
    if next_url:
        fg.link(href=next_url, rel='next')
    if prev_url:
        fg.link(href=prev_url, rel='prev')

    for entry in page.items:
        fe = fg.add_entry(order='append')
        fe.id(entry.id)
        fe.title(entry.title)
        fe.link(href=entry.link, rel='alternate')
        if entry.preview:
            fe.content(entry.preview, type='html')
        fe.published(entry.published)
        fe.updated(entry.published)
        if entry.author:
            fe.author(name=entry.author)

    logger.debug(f"Rendered Atom page {page.index}/{page.total} with {len(page.items)} item(s)")
    return fg.atom_str(pretty=True)


def _json_item(entry: FeedEntry) -> Dict[str, Any]:
    item: Dict[str, Any] = {
        "id": entry.id,
        "url": entry.link,
        "title": entry.title,
        "content_html": entry.preview,
        "date_published": entry.published.isoformat(),
    }
    if entry.author:
        item["author"] = {"name": entry.author}
    return item


def render_json(page: Page[FeedEntry], channel: Channel) -> bytes:
    """Render one page as a JSON Feed 1.1 document, linking the next (older) page."""
    feed: Dict[str, Any] = {
        "version": JSON_FEED_VERSION,
        "title": channel.title,
        "home_page_url": channel.home_url,
        "feed_url": JSON.url(channel, page.index),
        "description": channel.description,
    }
    next_url = JSON.url(channel, page.older)
    if next_url:
        feed["next_url"] = next_url
    feed["items"] = [_json_item(entry) for entry in page.items]
    return json.dumps(feed, indent=2, ensure_ascii=False).encode('utf-8')


@dataclass(frozen=True)
class FeedFormat:
    """A target format: its file naming and its renderer."""

    name: str
    base: str
    extension: str
    render: Callable[[Page[FeedEntry], Channel], bytes]

    def filename(self, index: int) -> str:
        return page_filename(self.base, self.extension, index)

    def url(self, channel: Channel, index: Optional[int]) -> Optional[str]:
        return page_url(channel.base_url, self.base, self.extension, index)


RSS = FeedFormat("rss", "rss", "xml", render_rss)
ATOM = FeedFormat("atom", "atom", "xml", render_atom)
JSON = FeedFormat("json", "feed", "json", render_json)


def enabled_formats(emit_atom: bool = False, emit_json: bool = False) -> List[FeedFormat]:
    """RSS always, then Atom and JSON when enabled."""
    formats = [RSS]
    if emit_atom:
        formats.append(ATOM)
    if emit_json:
        formats.append(JSON)
    return formats
