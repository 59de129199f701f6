"""CLI entry point for the venue scraper."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Sequence

from .browser import PlaywrightEngine
from .config import ScraperConfig
from .pipeline import EngineFactory, search_venues
from .static import StaticEngine

ENGINES: dict[str, EngineFactory] = {
    "browser": PlaywrightEngine.from_config,
    "static": StaticEngine.from_config,
}


def main(argv: Sequence[str] | None = None) -> int:
    """Execute the CLI and return the process exit status."""

    args = _parse_args(argv)
    _configure_logging(args.log_level)

    config = ScraperConfig.from_env().with_overrides(
        seed_url=args.seed_url,
        concurrency=args.concurrency,
        result_cap=args.result_cap,
        iteration_cap=args.iteration_cap,
        headless=False if args.headed else None,
    )
    logging.info("Searching %s for %s", config.seed_url, ", ".join(args.keywords))

    response = asyncio.run(
        search_venues(
            args.keywords,
            config=config,
            engine_factory=ENGINES[args.engine],
            include_details=args.details,
        )
    )
    json.dump(response, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 1 if "error" in response else 0


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "keywords",
        nargs="*",
        help="Keywords an article headline must contain (case-insensitive)",
    )
    parser.add_argument("--seed-url", default=None, help="Listing page to discover articles on")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Maximum number of article pages rendered at once",
    )
    parser.add_argument(
        "--result-cap",
        type=int,
        default=None,
        help="Maximum number of articles to crawl",
    )
    parser.add_argument(
        "--iteration-cap",
        type=int,
        default=None,
        help="Maximum number of 'more stories' clicks on the listing page",
    )
    parser.add_argument(
        "--engine",
        choices=sorted(ENGINES),
        default="browser",
        help="Render pages in headless Chromium or fetch static HTML",
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument(
        "--details",
        action="store_true",
        help="Include cuisine, source and venue type in the output",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (e.g. INFO, DEBUG)",
    )

    return parser.parse_args(argv)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(message)s",
        stream=sys.stderr,
    )


if __name__ == "__main__":
    sys.exit(main())
