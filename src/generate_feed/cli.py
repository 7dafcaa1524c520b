"""CLI for generating the RSS feed."""

from __future__ import annotations

import dataclasses
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from common.cli_helpers import setup_logging
from generate_feed.config import load_config
from generate_feed.errors import FeedError
from generate_feed.generate_feed import generate_feed
from generate_feed.helpers import parse_generate_feed_args
from generate_feed.write_feed.write_feed import write_feed

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    args = parse_generate_feed_args(argv)

    load_dotenv()
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    overrides = {}
    if args.output:
        overrides["output_path"] = args.output
    if args.max_items is not None:
        overrides["max_items"] = args.max_items
    try:
        config = load_config(args.config)
        if overrides:
            config = dataclasses.replace(config, **overrides)
    except (OSError, ValueError) as e:
        logger.error("%s: %s", type(e).__name__, e)
        sys.exit(1)

    try:
        items = generate_feed(config)
        if args.dry_run:
            for item in items:
                logger.info("%s  %s", item.published_at.isoformat(), item.title)
            logger.info("Dry run: %d items, nothing written", len(items))
            return
        path = write_feed(items, config.feed_metadata(), config.output_path)
    except (FeedError, OSError) as e:
        category = getattr(e, "category", type(e).__name__)
        logger.error("%s: %s", category, e)
        if Path(config.output_path).exists():
            logger.error("Keeping existing RSS file: %s", config.output_path)
        sys.exit(1)

    logger.info("RSS feed generated successfully at %s", path)


if __name__ == "__main__":
    main()
