"""Keyword-filtered article link discovery on a paginated listing page."""

from __future__ import annotations

import logging
from typing import Iterable

from .config import ScraperConfig
from .models import ElementText
from .render import PageHandle, RenderError

logger = logging.getLogger(__name__)


def match_links(anchors: Iterable[ElementText], keywords: Iterable[str]) -> list[str]:
    """Return the ``href`` of every anchor whose text contains a keyword.

    Matching is a case-insensitive substring test, so "bar" also matches
    "barely".
    """

    lowered_keywords = tuple(keyword.lower() for keyword in keywords)
    found: list[str] = []
    for anchor in anchors:
        if not anchor.href:
            continue
        text = anchor.text.lower()
        if any(keyword in text for keyword in lowered_keywords):
            found.append(anchor.href)
    return found


async def discover_links(
    page: PageHandle,
    keywords: Iterable[str],
    config: ScraperConfig,
) -> list[str]:
    """Collect article links from the listing *page*, clicking "load more".

    Stops once ``config.result_cap`` links are known, after
    ``config.iteration_cap`` clicks, or when no "load more" control is left.
    Links keep the order in which they were first seen.
    """

    keyword_list = [keyword.lower() for keyword in keywords]
    # dict preserves first-seen order and doubles as the membership set
    links: dict[str, None] = {}
    iterations = 0

    logger.info("Gathering article links for keywords %s", keyword_list)

    while len(links) < config.result_cap and iterations < config.iteration_cap:
        anchors = await page.query(config.article_link_selector)
        initial_count = len(anchors)
        logger.debug(
            "Iteration %d: %d article anchors on page, %d links collected",
            iterations,
            initial_count,
            len(links),
        )

        fresh = match_links(anchors, keyword_list)
        for href in fresh:
            links.setdefault(href, None)
        logger.debug("Iteration %d: %d matching links", iterations, len(fresh))

        clicked = await page.click(
            config.load_more_selector,
            text_pattern=config.load_more_pattern,
        )
        if not clicked:
            logger.debug("No %r control found; stopping discovery", config.load_more_pattern)
            break

        try:
            await page.wait_for_count(
                config.article_link_selector,
                initial_count,
                config.settle_timeout_ms,
            )
        except RenderError as exc:
            logger.warning(
                "New stories did not appear after clicking %r (iteration %d): %s",
                config.load_more_pattern,
                iterations,
                exc,
            )
        iterations += 1

    logger.info("Finished gathering links: %d found", len(links))
    return list(links)[: config.result_cap]
