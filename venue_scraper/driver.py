"""Concurrency-limited crawl of article pages."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Sequence, TypeVar

from .config import ScraperConfig
from .heuristics import to_venue
from .models import Venue
from .parse import parse_article
from .render import NavigationOptions, PageHandle, RenderEngine

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def bounded_map(
    items: Sequence[T],
    limit: int,
    func: Callable[[T, int], Awaitable[R]],
) -> list[R]:
    """Apply *func* to every item with at most *limit* calls in flight.

    Workers share one cursor. Claiming an index and advancing the cursor
    happen without an ``await`` in between, which keeps them atomic on the
    event loop. Results are returned in input order.
    """

    if limit < 1:
        raise ValueError("limit must be >= 1")

    results: list[R] = [None] * len(items)  # type: ignore[list-item]
    cursor = 0

    async def worker() -> None:
        nonlocal cursor
        while cursor < len(items):
            index = cursor
            cursor += 1
            results[index] = await func(items[index], index)

    workers = [asyncio.create_task(worker()) for _ in range(min(limit, len(items)))]
    await asyncio.gather(*workers)
    return results


async def crawl(
    engine: RenderEngine,
    links: Sequence[str],
    config: ScraperConfig,
) -> list[list[Venue]]:
    """Parse every article in *links*; failed links yield no venues."""

    options = NavigationOptions(
        timeout_ms=config.article_timeout_ms,
        wait_until=config.wait_until,
    )
    total = len(links)

    async def crawl_one(href: str, index: int) -> list[Venue]:
        logger.info("Crawling (%d/%d): %s", index + 1, total, href)
        page: PageHandle | None = None
        try:
            page = await engine.open(href, options)
            records = await parse_article(page, href, config)
            venues = [to_venue(record, tables=config.tables) for record in records]
        except Exception as exc:
            logger.warning("Error crawling %s: %s", href, exc)
            return []
        finally:
            if page is not None:
                try:
                    await page.close()
                except Exception as exc:
                    logger.warning("Failed to close page for %s: %s", href, exc)

        logger.info("Crawled (%d/%d) %s -> %d venues", index + 1, total, href, len(venues))
        return venues

    return await bounded_map(links, config.concurrency, crawl_one)
