#!/usr/bin/env python3
"""Common error types shared across modules.

Provides shared lightweight exceptions to avoid circular imports.
"""

from typing import Dict, Any, Optional


class FeedBuildError(Exception):
    """Raised when no feed can be produced at all (e.g. the document tree root is unreadable).

    Per-document problems never raise; they are absorbed by the collector.

    Attributes:
        details: Optional payload for diagnostics (path, underlying error).
    """

    def __init__(self, message: str = "Feed build failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}

__all__ = ["FeedBuildError"]
