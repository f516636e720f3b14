#!/usr/bin/env python3
"""
Feed publisher for mdBook sources.

This module ties the pipeline together: it collects the chapters of a book,
turns each one into a format-neutral feed entry with a single shared preview,
splits the entries into pages, and renders every page in each enabled format
(RSS always, Atom and JSON Feed on request). Rendered documents can then be
written to disk atomically.
"""

from pathlib import Path
from typing import List, Optional, Union

from config import FeedOptions, get_logger
from collector import collect_documents
from models import Channel, Document, FeedEntry, FeedOutput
from pagination import plan_pages
from preview import build_preview
from renderers import enabled_formats
from telemetry import init_telemetry, get_tracer, trace_span
from utils import atomic_write, sanitize_xml_string

# Module-specific logger
logger = get_logger("publisher")
init_telemetry("mdbook-feeds-publisher")
_tracer = get_tracer("publisher")

MARKDOWN_SUFFIXES = (".md", ".markdown")
README_PAGE = "/README.html"
INDEX_PAGE = "/index.html"


def document_link(base_url: str, path: str) -> str:
    """Public URL of the rendered page for a source-relative Markdown path.

    ``guide/intro.md`` becomes ``{base}/guide/intro.html``; a README page maps
    to the directory's ``index.html`` the way mdBook renders it.
    """
    rel = path.replace("\\", "/").lstrip("/")
    for suffix in MARKDOWN_SUFFIXES:
        if rel.lower().endswith(suffix):
            rel = rel[:-len(suffix)] + ".html"
            break
    url = f"{base_url.strip().rstrip('/')}/{rel}"
    if url.endswith(README_PAGE):
        url = url[:-len(README_PAGE)] + INDEX_PAGE
    return url


def build_entry(document: Document, channel: Channel, options: FeedOptions) -> FeedEntry:
    """Turn one document into the entry every renderer reads."""
    meta = document.meta
    link = document_link(channel.base_url, document.path)
    preview = build_preview(
        document.body,
        meta.summary,
        min_body_chars=options.min_body_chars,
        full_preview=options.full_preview,
    )
    author = sanitize_xml_string(meta.author) if meta.author else None
    return FeedEntry(
        id=link,
        link=link,
        title=sanitize_xml_string(meta.title) or document.path,
        preview=sanitize_xml_string(preview),
        published=meta.date,
        author=author or None,
    )


class FeedPublisher:
    """Builds and writes the feeds of one book."""

    def __init__(self, options: FeedOptions):
        self.options = options
        self.channel = Channel(
            title=sanitize_xml_string(options.title),
            site_url=options.site_url,
            description=sanitize_xml_string(options.description),
        )

    @trace_span("build_entries", tracer_name="publisher")
    def build_entries(self, documents: List[Document]) -> List[FeedEntry]:
        """Entries in document order (newest first), one preview per document."""
        return [build_entry(document, self.channel, self.options) for document in documents]

    @trace_span("build_feeds", tracer_name="publisher")
    def build_feeds(self) -> List[FeedOutput]:
        """Render every page in every enabled format.

        Output order is all RSS pages, then Atom pages, then JSON pages.

        Raises:
            FeedBuildError: if the source tree cannot be read
        """
        documents = collect_documents(self.options.src_dir)
        entries = self.build_entries(documents)
        pages = plan_pages(entries, self.options.page_size)
        formats = enabled_formats(self.options.emit_atom, self.options.emit_json)
        logger.info(f"Building {len(formats)} format(s) x {len(pages)} page(s) for {len(entries)} entries")

        outputs: List[FeedOutput] = []
        for feed_format in formats:
            with _tracer.start_as_current_span("render_format") as span:
                span.set_attribute("feed.format", feed_format.name)
                span.set_attribute("feed.pages", len(pages))
                for page in pages:
                    outputs.append(FeedOutput(
                        filename=feed_format.filename(page.index),
                        content=feed_format.render(page, self.channel),
                        format=feed_format.name,
                        page=page.index,
                    ))
        return outputs

    @trace_span("write_outputs", tracer_name="publisher")
    def write_outputs(self, outputs: List[FeedOutput], output_dir: Optional[Union[str, Path]] = None) -> int:
        """Write outputs into ``output_dir`` (defaults to the source tree root).

        Returns:
            Total number of bytes written
        """
        target = Path(output_dir) if output_dir else Path(self.options.src_dir)
        total = 0
        for output in outputs:
            size = atomic_write(target / output.filename, output.content)
            logger.info(f"Wrote {output.filename} ({size} bytes)")
            total += size
        return total

    def publish(self, output_dir: Optional[Union[str, Path]] = None) -> List[FeedOutput]:
        """Build all feeds and write them out."""
        outputs = self.build_feeds()
        total = self.write_outputs(outputs, output_dir)
        logger.info(f"Published {len(outputs)} feed file(s), {total} bytes in total")
        return outputs


def build_feeds(options: FeedOptions) -> List[FeedOutput]:
    """Build every feed document for ``options`` without touching the filesystem output."""
    return FeedPublisher(options).build_feeds()
