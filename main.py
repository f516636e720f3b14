#!/usr/bin/env python3
"""
mdBook preprocessor entry point.

mdBook runs a preprocessor in two ways:

1. ``mdbook-feeds supports <renderer>``: exit status 0 means the renderer is
   supported (every renderer is).
2. ``mdbook-feeds`` with ``[context, book]`` JSON on stdin: the feeds are
   built from the book sources and written next to them, then the book is
   echoed back unchanged as JSON on stdout.

Logs go to stderr so that stdout only ever carries the book.
"""

import argparse
import json
import sys
from typing import Any, List, Optional, TextIO, Tuple

from config import config, get_logger, FeedOptions, APP_NAME, APP_VERSION
from errors import FeedBuildError
from publisher import FeedPublisher
from telemetry import init_telemetry, get_tracer

# Module-specific logger
logger = get_logger("main")
init_telemetry("mdbook-feeds")
_tracer = get_tracer("main")


def read_host_input(stream: TextIO) -> Tuple[Any, Any]:
    """Parse the ``[context, book]`` array mdBook writes to stdin.

    Raises:
        FeedBuildError: if the input is not JSON or not an array of at least two elements
    """
    try:
        payload = json.load(stream)
    except json.JSONDecodeError as e:
        raise FeedBuildError(f"Invalid JSON on stdin: {e}") from e
    if not isinstance(payload, list) or len(payload) < 2:
        raise FeedBuildError("Expected a [context, book] JSON array on stdin")
    return payload[0], payload[1]


def run_preprocessor(stdin: TextIO, stdout: TextIO) -> int:
    """Build and write the feeds, then echo the book. Returns the exit status."""
    with _tracer.start_as_current_span("preprocess") as span:
        try:
            context, book = read_host_input(stdin)
            options = FeedOptions.from_context(context)
            span.set_attribute("feed.src_dir", str(options.src_dir))
            logger.debug(f"Options: {options}, settings: {config.get_config_summary()}")

            publisher = FeedPublisher(options)
            publisher.publish(config.FEEDS_OUTPUT_DIR)
        except FeedBuildError as e:
            logger.error(f"Feed generation failed: {e}")
            return 1
        except OSError as e:
            logger.error(f"Could not write feeds: {e}")
            return 1

    sys.stderr.flush()
    stdout.write(json.dumps(book))
    stdout.write("\n")
    stdout.flush()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description='mdBook preprocessor generating RSS, Atom and JSON feeds from the book sources',
    )
    parser.add_argument('-V', '--version', action='version', version=f"{APP_NAME} {APP_VERSION}")
    subparsers = parser.add_subparsers(dest='command')
    supports = subparsers.add_parser('supports', help='Report whether a renderer is supported')
    supports.add_argument('renderer', help='Renderer name (e.g. html)')
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.command == 'supports':
        logger.debug(f"Renderer '{args.renderer}' is supported")
        sys.exit(0)

    try:
        sys.exit(run_preprocessor(sys.stdin, sys.stdout))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(1)


if __name__ == "__main__":
    main()
