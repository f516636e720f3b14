#!/usr/bin/env python3
"""
Utility functions for the feed builder.

Shared text helpers used by the metadata resolver and preview extractor,
XML sanitising for the renderers, and atomic file output for the publisher.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Union

from config import get_logger

# Module-specific logger
logger = get_logger("utils")


def split_lines(text: str) -> List[str]:
    """Split text on newlines, dropping a trailing carriage return from each line.

    A final newline does not produce an extra empty line, so "a\\nb\\n" and
    "a\\nb" both yield ["a", "b"].
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def char_prefix(text: str, max_chars: int) -> str:
    """Return at most ``max_chars`` characters (code points) of ``text``.

    Slicing a Python str never splits a multi-byte UTF-8 sequence, so the
    result always re-encodes cleanly.
    """
    if max_chars <= 0 or not text:
        return ""
    return text[:max_chars]


def sanitize_xml_string(text: str) -> str:
    """Sanitize a string for XML output by removing control characters and NULL bytes."""
    if not text:
        return ''
    if isinstance(text, bytes):
        text = text.decode('utf-8', errors='ignore')
    # Keep tab, newline and carriage return; drop everything else below 0x20, DEL,
    # lone surrogates and the two non-characters XML 1.0 forbids
    return ''.join(
        char for char in text
        if char in ('\t', '\n', '\r') or (
            ord(char) >= 32
            and ord(char) != 0x7F
            and not 0xD800 <= ord(char) <= 0xDFFF
            and ord(char) not in (0xFFFE, 0xFFFF)
        )
    )


def atomic_write(output_file: Union[str, Path], content: bytes) -> int:
    """Write ``content`` to ``output_file`` through a temp file in the same directory.

    Returns:
        Number of bytes written
    """
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(mode='wb', suffix=output_file.suffix,
                                     dir=output_file.parent, delete=False) as temp_file:
        temp_file.write(content)
        temp_file.flush()
        os.fsync(temp_file.fileno())
        temp_path = temp_file.name

    try:
        shutil.move(temp_path, output_file)
    except Exception:
        Path(temp_path).unlink(missing_ok=True)
        raise
    # NamedTemporaryFile creates 0600 files
    os.chmod(output_file, 0o644)
    logger.debug(f"Wrote {len(content)} bytes to {output_file}")
    return len(content)
