"""End-to-end venue search: discover articles, crawl them, clean the results."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from .browser import PlaywrightEngine
from .config import ScraperConfig
from .discovery import discover_links
from .driver import crawl
from .models import Venue
from .postprocess import deduplicate, filter_junk
from .render import NavigationOptions, RenderEngine, RenderError

logger = logging.getLogger(__name__)

EngineFactory = Callable[[ScraperConfig], RenderEngine]

MISSING_KEYWORDS_MESSAGE = "At least one keyword must be provided."


def default_engine_factory(config: ScraperConfig) -> RenderEngine:
    return PlaywrightEngine.from_config(config)


def normalize_keywords(keywords: Iterable[str] | None) -> list[str]:
    """Validate *keywords* and return them lower-cased.

    Raises:
        ValueError: if no usable keyword is given or an element is not a string.
    """

    if keywords is None or isinstance(keywords, str):
        raise ValueError("Keywords must be a list of strings")

    items = list(keywords)
    if any(not isinstance(item, str) for item in items):
        raise ValueError("Keywords must be a list of strings")

    lowered = [item.lower() for item in items if item.strip()]
    if not lowered:
        raise ValueError(MISSING_KEYWORDS_MESSAGE)
    return lowered


async def run_scraper(
    keywords: Iterable[str],
    *,
    config: ScraperConfig | None = None,
    engine_factory: EngineFactory | None = None,
) -> list[Venue]:
    """Return the de-duplicated venues found in articles matching *keywords*.

    Keywords are validated before any render engine is created. A seed page
    that fails to load ends the run with an empty result.
    """

    keyword_list = normalize_keywords(keywords)
    config = config or ScraperConfig()
    engine = (engine_factory or default_engine_factory)(config)

    try:
        # Launch failures are errors, not an empty seed page
        await engine.start()

        seed_options = NavigationOptions(
            timeout_ms=config.seed_timeout_ms,
            wait_until=config.wait_until,
        )
        try:
            seed = await engine.open(config.seed_url, seed_options)
        except RenderError as exc:
            logger.warning("Could not load seed page %s: %s", config.seed_url, exc)
            return []
        logger.info("Seed page loaded: %s", config.seed_url)

        try:
            links = await discover_links(seed, keyword_list, config)
        finally:
            await seed.close()
        logger.info("Matched %d articles", len(links))

        per_link = await crawl(engine, links, config)
    finally:
        await engine.aclose()

    venues = [venue for batch in per_link for venue in batch]
    cleaned = filter_junk(venues, phrases=config.tables.boilerplate_phrases)
    unique = deduplicate(cleaned)
    logger.info(
        "Found %d venues (%d raw, %d dropped as noise, %d duplicates removed)",
        len(unique),
        len(venues),
        len(venues) - len(cleaned),
        len(cleaned) - len(unique),
    )
    return unique


async def search_venues(
    keywords: Any,
    *,
    config: ScraperConfig | None = None,
    engine_factory: EngineFactory | None = None,
    include_details: bool = False,
) -> dict[str, Any]:
    """Run a search and wrap the outcome in a response envelope.

    Success: ``{"data": [names]}`` (or venue dicts with *include_details*).
    Failure: ``{"error": message, "details": reason}``.
    """

    try:
        keyword_list = normalize_keywords(keywords)
    except (TypeError, ValueError) as exc:
        return {"error": "Invalid keywords", "details": str(exc)}

    try:
        venues = await run_scraper(
            keyword_list,
            config=config,
            engine_factory=engine_factory,
        )
    except Exception as exc:
        logger.exception("Venue search failed for %s", keyword_list)
        return {"error": "Scrape failed", "details": str(exc)}

    if include_details:
        return {"data": [venue.to_dict() for venue in venues]}
    return {"data": [venue.name for venue in venues]}
