#!/usr/bin/env python3
"""
Document collection for the feed builder.

Walks an mdBook source tree, picks up every Markdown chapter (skipping the
generated SUMMARY.md navigation file), resolves its metadata and returns the
documents newest first. One unreadable file never aborts the walk; only an
unreadable tree root does.
"""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Union

from config import get_logger
from errors import FeedBuildError
from frontmatter import parse_document_text
from models import Document
from telemetry import trace_span

# Module-specific logger
logger = get_logger("collector")

MARKDOWN_EXTENSIONS = frozenset({".md", ".markdown"})
NAVIGATION_FILE = "summary.md"

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def is_eligible(file_path: Path) -> bool:
    """Markdown file that is not the book's navigation file."""
    if file_path.suffix.lower() not in MARKDOWN_EXTENSIONS:
        return False
    return file_path.name.lower() != NAVIGATION_FILE


def modification_time(file_path: Path) -> datetime:
    """File modification time in UTC, or the Unix epoch when it cannot be read."""
    try:
        return datetime.fromtimestamp(file_path.stat().st_mtime, tz=timezone.utc)
    except (OSError, OverflowError, ValueError) as e:
        logger.debug(f"Cannot stat {file_path}: {e}")
        return EPOCH


def relative_path(root: Path, file_path: Path) -> str:
    """Slash-separated path of ``file_path`` below ``root``."""
    try:
        rel = file_path.relative_to(root)
    except ValueError:
        rel = file_path
    return rel.as_posix().replace("\\", "/")


def load_document(root: Path, file_path: Path) -> Optional[Document]:
    """Read and parse one chapter, returning None when the file cannot be read."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping unreadable file {file_path}: {e}")
        return None

    meta, body = parse_document_text(text, file_path.stem, modification_time(file_path))
    return Document(path=relative_path(root, file_path), body=body, meta=meta)


def _check_root(root: Path) -> None:
    if not root.exists():
        raise FeedBuildError(f"Source directory {root} does not exist", {"path": str(root)})
    if not root.is_dir():
        raise FeedBuildError(f"Source path {root} is not a directory", {"path": str(root)})
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise FeedBuildError(f"Cannot read source directory {root}: {e}", {"path": str(root), "error": str(e)}) from e


def iter_markdown_files(root: Path):
    """Yield eligible files under ``root`` in a stable, sorted walk order."""
    def _on_error(err: OSError) -> None:
        logger.debug(f"Skipping unreadable directory {getattr(err, 'filename', '?')}: {err}")

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames.sort()
        for name in sorted(filenames):
            file_path = Path(dirpath) / name
            if is_eligible(file_path) and file_path.is_file():
                yield file_path


def sort_documents(documents: List[Document]) -> List[Document]:
    """Newest first; documents sharing a date keep their discovery order."""
    # sorted() stays stable with reverse=True
    return sorted(documents, key=lambda doc: doc.meta.date, reverse=True)


@trace_span("collect_documents", tracer_name="collector", attr_from_args=lambda src_dir: {"source.dir": str(src_dir)})
def collect_documents(src_dir: Union[str, Path]) -> List[Document]:
    """Collect all Markdown chapters under ``src_dir``, newest first.

    Raises:
        FeedBuildError: if the root itself is missing or unreadable
    """
    root = Path(src_dir)
    _check_root(root)

    documents: List[Document] = []
    skipped = 0
    for file_path in iter_markdown_files(root):
        document = load_document(root, file_path)
        if document is None:
            skipped += 1
            continue
        documents.append(document)

    if skipped:
        logger.info(f"Skipped {skipped} unreadable file(s) under {root}")
    logger.info(f"Collected {len(documents)} document(s) from {root}")
    return sort_documents(documents)
