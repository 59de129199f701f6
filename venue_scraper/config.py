"""Runtime configuration for the venue scraper.

Every site-specific constant lives on :class:`ScraperConfig` so that the
pipeline can be pointed at fixtures or a different listing page without
editing module code. Scalar settings can be overridden through environment
variables (see :meth:`ScraperConfig.from_env`).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields, replace
from typing import Mapping

from .heuristics import ClassificationTables

logger = logging.getLogger(__name__)

DEFAULT_SEED_URL = "https://ny.eater.com/"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)
DEFAULT_CONCURRENCY = 4
DEFAULT_RESULT_CAP = 40
DEFAULT_ITERATION_CAP = 10
DEFAULT_SEED_TIMEOUT_MS = 60_000
DEFAULT_ARTICLE_TIMEOUT_MS = 60_000
DEFAULT_SETTLE_TIMEOUT_MS = 15_000

ENV_PREFIX = "VENUE_SCRAPER_"


@dataclass(slots=True)
class ScraperConfig:
    """Selectors, caps and timeouts for a scraper run."""

    seed_url: str = DEFAULT_SEED_URL

    # Listing page
    article_link_selector: str = "h2.c-entry-box--compact__title a"
    load_more_selector: str = "button, a"
    load_more_pattern: str = "more stories"

    # Article pages
    card_selector: str = "section.c-mapstack__card"
    card_address_class: str = "c-mapstack__address"
    content_selector: str = "div.c-entry-content"
    article_heading_tag: str = "h2"

    result_cap: int = DEFAULT_RESULT_CAP
    iteration_cap: int = DEFAULT_ITERATION_CAP
    concurrency: int = DEFAULT_CONCURRENCY

    seed_timeout_ms: int = DEFAULT_SEED_TIMEOUT_MS
    article_timeout_ms: int = DEFAULT_ARTICLE_TIMEOUT_MS
    settle_timeout_ms: int = DEFAULT_SETTLE_TIMEOUT_MS
    wait_until: str = "networkidle"

    headless: bool = True
    viewport: tuple[int, int] = (1280, 1800)
    user_agent: str = DEFAULT_USER_AGENT

    tables: ClassificationTables = field(default_factory=ClassificationTables)

    def __post_init__(self) -> None:
        if self.concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        if self.result_cap < 0:
            raise ValueError("result_cap must be >= 0")
        if self.iteration_cap < 0:
            raise ValueError("iteration_cap must be >= 0")

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        prefix: str = ENV_PREFIX,
    ) -> "ScraperConfig":
        """Build a config from ``VENUE_SCRAPER_*`` environment variables.

        Only scalar fields are read. Values that cannot be parsed are ignored
        and the default is kept.
        """

        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        defaults = cls()

        for item in fields(cls):
            raw = env.get(prefix + item.name.upper())
            if raw is None:
                continue
            default = getattr(defaults, item.name)
            if isinstance(default, bool):
                overrides[item.name] = raw.strip().lower() in {"1", "true", "yes", "on"}
            elif isinstance(default, int):
                try:
                    overrides[item.name] = int(raw)
                except (TypeError, ValueError):
                    logger.warning("Ignoring invalid integer for %s%s: %r", prefix, item.name.upper(), raw)
            elif isinstance(default, str):
                overrides[item.name] = raw.strip()

        return cls(**overrides)

    def with_overrides(self, **changes: object) -> "ScraperConfig":
        """Return a copy with the non-``None`` *changes* applied."""

        return replace(self, **{key: value for key, value in changes.items() if value is not None})
