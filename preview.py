#!/usr/bin/env python3
"""
Preview extraction for feed entries.

Turns a chapter's Markdown (or its authored summary) into a short HTML
preview:

1. Pick the source: the body when it is substantial or no summary exists,
   otherwise the summary.
2. Drop leading blank lines and heading-led blocks (title, TOC, admonition
   lines up to the first blank line).
3. Bound the Markdown to a fixed number of characters before rendering.
4. Render with python-Markdown.
5. Keep the first few top-level paragraphs, or the whole rendering when it
   has none, and cap the result in characters.

In full-preview mode the whole body is rendered and none of the above
applies. Extraction is total: any string input yields a (possibly empty)
string.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup
from markdown import markdown as md

from config import get_logger
from utils import char_prefix

# Module-specific logger
logger = get_logger("preview")

# Markdown characters considered before rendering
PREVIEW_MD_SLICE_CHARS = 4000
# Paragraphs kept from the rendered HTML
PREVIEW_MAX_PARAGRAPHS = 3
# Final cap on the preview, in characters
PREVIEW_MAX_CHARS = 800
# Default body length below which an authored summary wins
MIN_BODY_PREVIEW_CHARS = 80

MARKDOWN_EXTENSIONS = ['extra', 'admonition', 'sane_lists', 'smarty']

PARAGRAPH_CLOSE = "</p>"
_PARAGRAPH_OPEN = re.compile(r"<p(?=[\s>/])", re.IGNORECASE)


def markdown_to_html(text: str) -> str:
    """Convert Markdown to HTML using the python-Markdown library."""
    if not text or not text.strip():
        return ""
    return md(text, extensions=MARKDOWN_EXTENSIONS)


def _is_heading(line: str) -> bool:
    return line.lstrip().startswith("#")


def strip_leading_boilerplate(text: str) -> str:
    """Strip leading blank lines and heading-led blocks.

    A heading-led block runs from a heading line up to and including the
    first blank line after it. Blocks are dropped while the text opens with
    one, so the result starts at the first line that is neither blank nor a
    heading (or at a heading that no blank line follows). Applying the
    function twice gives the same result as applying it once.

    Unlike mdbook-rss-feed, which drops everything up to the blank line
    after the first heading found anywhere, text before the first heading
    is kept: dropping it would not be idempotent.
    """
    if not text:
        return ""
    lines = text.split("\n")
    count = len(lines)
    idx = 0
    while True:
        while idx < count and not lines[idx].strip():
            idx += 1
        if idx >= count or not _is_heading(lines[idx]):
            break
        end = idx + 1
        while end < count and lines[end].strip():
            end += 1
        if end >= count:
            # No blank line after the heading: nothing to skip
            break
        idx = end + 1
    return "\n".join(lines[idx:])


def select_preview_source(body: str, summary: Optional[str], min_body_chars: int = MIN_BODY_PREVIEW_CHARS) -> str:
    """Hybrid source selection between the body and the authored summary.

    The trimmed body wins when it has at least ``min_body_chars`` characters
    or when there is no summary; otherwise the summary is used.
    """
    trimmed = (body or "").strip()
    if len(trimmed) >= min_body_chars or summary is None:
        return trimmed
    return summary


def first_paragraphs(html: str, max_paragraphs: int = PREVIEW_MAX_PARAGRAPHS) -> str:
    """Concatenate the markup of the first top-level ``<p>`` elements.

    The exact source markup (tags included) is copied, not a re-serialisation.
    When the fragment has no top-level paragraph the original HTML is
    returned unchanged.
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, 'html.parser')
    line_starts: List[int] = [0] + [m.end() for m in re.finditer("\n", html)]

    parts: List[str] = []
    for tag in soup.find_all('p', recursive=False):
        if len(parts) >= max_paragraphs:
            break
        if tag.sourceline is None or tag.sourcepos is None:
            continue
        start = line_starts[tag.sourceline - 1] + tag.sourcepos
        if not _PARAGRAPH_OPEN.match(html, start):
            # Offsets drifted (unusual markup); fall back to the next opening tag
            match = _PARAGRAPH_OPEN.search(html, start)
            if match is None:
                break
            start = match.start()
        end = html.find(PARAGRAPH_CLOSE, start)
        if end == -1:
            break
        parts.append(html[start:end + len(PARAGRAPH_CLOSE)])

    if not parts:
        logger.debug("No top-level paragraph in rendered preview, keeping full HTML")
        return html
    return "".join(parts)


def build_preview(
    body: str,
    summary: Optional[str] = None,
    min_body_chars: int = MIN_BODY_PREVIEW_CHARS,
    full_preview: bool = False,
) -> str:
    """Produce the HTML preview for one document.

    Args:
        body: Markdown body of the document
        summary: Authored summary, if any
        min_body_chars: Body length (characters, trimmed) needed to prefer the body
        full_preview: Render the whole body and skip extraction

    Returns:
        HTML preview, at most PREVIEW_MAX_CHARS characters unless full_preview
    """
    if full_preview:
        return markdown_to_html(body or "")

    source = select_preview_source(body, summary, min_body_chars)
    source = strip_leading_boilerplate(source)
    source = char_prefix(source, PREVIEW_MD_SLICE_CHARS)

    raw_html = markdown_to_html(source)
    preview = first_paragraphs(raw_html, PREVIEW_MAX_PARAGRAPHS)
    return char_prefix(preview, PREVIEW_MAX_CHARS)
