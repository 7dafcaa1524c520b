"""Helper functions for generate_feed CLI."""

from __future__ import annotations

import argparse


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def parse_generate_feed_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for generate_feed."""

    parser = argparse.ArgumentParser(description="Generate an RSS feed from the official channel page")
    parser.add_argument(
        "--config",
        default=None,
        help="YAML config file (default: $FEED_CONFIG, then environment only)",
    )
    parser.add_argument("--output", default=None, help="Output file path (overrides OUTPUT_PATH)")
    parser.add_argument(
        "--max-items",
        type=positive_int,
        default=None,
        help="Maximum number of list entries to consider (overrides MAX_ITEMS)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build the feed and log item titles without writing it",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)
