#!/usr/bin/env python3
"""
Configuration management for the mdBook feed builder.

This module centralizes logging setup, process-level settings read from the
environment, and the per-run feed options supplied by the host build
pipeline. Settings are validated on load and fall back to sane defaults with
a warning instead of aborting the build.
"""

from os import environ, path
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional
from logging import getLogger, basicConfig, StreamHandler, INFO, DEBUG, WARNING, ERROR
import sys
from dotenv import load_dotenv

def _setup_global_logger():
    """Setup a single global logger for the entire application.

    Environment Variables:
        LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR) - defaults to INFO
        LOG_TIMESTAMPS: Enable/disable timestamps in logs (true/false) - defaults to true

    Output goes to stderr: stdout carries the book JSON handed back to mdBook,
    so nothing else may be printed there.
    """
    level_str = environ.get("LOG_LEVEL", "INFO").upper()
    level_map = {
        "DEBUG": DEBUG,
        "INFO": INFO,
        "WARNING": WARNING,
        "ERROR": ERROR
    }
    level = level_map.get(level_str, INFO)

    show_timestamps = environ.get("LOG_TIMESTAMPS", "true").lower() != "false"

    if show_timestamps:
        log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    else:
        log_format = '%(name)s - %(levelname)s - %(message)s'

    basicConfig(
        level=level,
        format=log_format,
        handlers=[StreamHandler(sys.stderr)],
        force=True  # Force reconfiguration if already configured
    )

    # markdown logs every extension load at DEBUG
    getLogger("MARKDOWN").setLevel(max(level, WARNING))

    return getLogger("FeedBuilder")

def get_logger(name: str):
    """Get a module-specific logger with the unified configuration.

    Args:
        name: The logger name (e.g., "collector", "preview", "publisher")

    Returns:
        A logger named "FeedBuilder.{name}"
    """
    return getLogger(f"FeedBuilder.{name}")

# Create single global logger instance
logger = _setup_global_logger()

DEFAULT_TITLE = "My mdBook"
DEFAULT_SITE_URL = "https://example.com/"
DEFAULT_DESCRIPTION = "An mdBook-generated site"
DEFAULT_SRC_DIR = "src"
PREPROCESSOR_NAME = "rss-feed"
APP_NAME = "mdbook-feeds"
APP_VERSION = "1.0.0"


class Config:
    """Process-level settings for the feed builder.

    Values are loaded from the environment, optionally seeded from a `.env`
    file sitting next to this module:

    ```
    PREVIEW_MIN_BODY_CHARS=80
    FEEDS_OUTPUT_DIR=/tmp/feeds
    FEED_GENERATOR=mdbook-feeds
    ```
    """

    def __init__(self):
        """Initialize configuration with environment variables and validation."""
        self._load_environment()
        self._validate_and_set_config()

    def _load_environment(self):
        """Load environment variables from a .env file if present."""
        dotenv_path = path.join(path.dirname(path.abspath(__file__)), '.env')
        if path.exists(dotenv_path):
            load_dotenv(dotenv_path)
            logger.info(f"Loaded environment variables from {dotenv_path}")

    def _validate_positive_int(self, env_var: str, default: int, min_val: int = 1) -> int:
        """Validate and parse a positive integer environment variable."""
        try:
            value = int(environ.get(env_var, str(default)))
            if value < min_val:
                logger.warning(f"{env_var} must be at least {min_val}, using default {default}")
                return default
            return value
        except (ValueError, TypeError):
            logger.warning(f"Invalid {env_var} value, using default {default}")
            return default

    def _validate_and_set_config(self):
        """Validate and set all configuration values."""
        # Bodies shorter than this (in characters) preview from the summary instead
        self.PREVIEW_MIN_BODY_CHARS = self._validate_positive_int("PREVIEW_MIN_BODY_CHARS", 80, 0)

        output_dir = environ.get("FEEDS_OUTPUT_DIR", "").strip()
        self.FEEDS_OUTPUT_DIR: Optional[str] = output_dir or None

        self.FEED_GENERATOR = environ.get("FEED_GENERATOR", APP_NAME).strip() or APP_NAME

    def get_config_summary(self) -> Dict[str, Any]:
        """Get a summary of current configuration for logging/debugging."""
        return {
            "preview_min_body_chars": self.PREVIEW_MIN_BODY_CHARS,
            "feeds_output_dir": self.FEEDS_OUTPUT_DIR,
            "feed_generator": self.FEED_GENERATOR,
        }


def _pointer(document: Any, pointer: str) -> Any:
    """Resolve a JSON pointer ("/a/b") against nested dicts, returning None when absent."""
    node = document
    for part in pointer.strip("/").split("/"):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def _as_bool(value: Any, default: bool, key: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    logger.warning(f"Option '{key}' must be a boolean, using default {default}")
    return default


def _as_count(value: Any, default: int, key: str) -> int:
    if value is None:
        return default
    # bool is an int subclass; reject it explicitly
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    logger.warning(f"Option '{key}' must be a non-negative integer, using default {default}")
    return default


def _as_text(value: Any, default: str) -> str:
    if not isinstance(value, str):
        return default
    value = value.strip()
    return value or default


@dataclass(frozen=True)
class FeedOptions:
    """Per-run options supplied by the host build pipeline.

    Attributes:
        src_dir: Root of the document tree to scan
        title: Feed title (book title)
        site_url: Public base URL of the rendered site
        description: Feed description
        full_preview: Embed whole rendered chapters instead of previews
        paginated: Split the feed into pages of ``max_items``
        max_items: Items per page, 0 meaning unlimited
        emit_atom: Also produce Atom feeds
        emit_json: Also produce JSON feeds
        min_body_chars: Body length below which an authored summary is preferred
    """

    src_dir: Path
    title: str = DEFAULT_TITLE
    site_url: str = DEFAULT_SITE_URL
    description: str = DEFAULT_DESCRIPTION
    full_preview: bool = False
    paginated: bool = False
    max_items: int = 0
    emit_atom: bool = False
    emit_json: bool = False
    min_body_chars: int = 80

    @property
    def page_size(self) -> int:
        """Items per page as seen by the page planner (0 = single page)."""
        return self.max_items if self.paginated else 0

    @classmethod
    def from_context(cls, context: Dict[str, Any]) -> "FeedOptions":
        """Build options from the mdBook preprocessor context object."""
        if not isinstance(context, dict):
            context = {}
        root = _as_text(_pointer(context, "/root"), ".")
        src = _as_text(_pointer(context, "/config/book/src"), DEFAULT_SRC_DIR)
        prefix = f"/config/preprocessor/{PREPROCESSOR_NAME}"

        def option(*names: str) -> Any:
            for name in names:
                value = _pointer(context, f"{prefix}/{name}")
                if value is not None:
                    return value
            return None

        description = _pointer(context, "/config/book/description")
        return cls(
            src_dir=Path(root) / src,
            title=_as_text(_pointer(context, "/config/book/title"), DEFAULT_TITLE),
            site_url=_as_text(_pointer(context, "/config/output/html/site-url"), DEFAULT_SITE_URL),
            description=description if isinstance(description, str) else DEFAULT_DESCRIPTION,
            full_preview=_as_bool(option("full-preview"), False, "full-preview"),
            paginated=_as_bool(option("paginated"), False, "paginated"),
            max_items=_as_count(option("max-items"), 0, "max-items"),
            emit_atom=_as_bool(option("atom", "emit-atom"), False, "atom"),
            emit_json=_as_bool(option("json-feed", "emit-json"), False, "json-feed"),
            min_body_chars=_as_count(
                option("preview-min-body-chars"), config.PREVIEW_MIN_BODY_CHARS, "preview-min-body-chars"
            ),
        )

# Global configuration instance
config = Config()
