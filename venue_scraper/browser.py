"""Playwright-backed render engine for the venue scraper."""

from __future__ import annotations

import logging

from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright,
)

from .config import ScraperConfig
from .models import ElementText
from .render import NavigationOptions, RenderError, RenderTimeout

logger = logging.getLogger(__name__)

_QUERY_SCRIPT = """
(elements) => elements.map((el) => ({
  text: (el.textContent || "").trim(),
  href: el.href || el.getAttribute("href"),
}))
"""

_CLICK_SCRIPT = """
([selector, source]) => {
  const pattern = source === null ? null : new RegExp(source, "i");
  const target = [...document.querySelectorAll(selector)].find(
    (el) => pattern === null || pattern.test(el.textContent || "")
  );
  if (!target) {
    return false;
  }
  target.click();
  return true;
}
"""

_COUNT_ABOVE_SCRIPT = "([selector, n]) => document.querySelectorAll(selector).length > n"


class PlaywrightPage:
    """A page living in its own browser context."""

    def __init__(self, context: BrowserContext, page: Page) -> None:
        self._context = context
        self._page = page

    @property
    def url(self) -> str:
        return self._page.url

    async def title(self) -> str:
        try:
            return await self._page.title()
        except PlaywrightError as exc:
            raise RenderError(f"Could not read title of {self.url}: {exc}") from exc

    async def content(self) -> str:
        try:
            return await self._page.content()
        except PlaywrightError as exc:
            raise RenderError(f"Could not read content of {self.url}: {exc}") from exc

    async def query(self, selector: str) -> list[ElementText]:
        try:
            rows = await self._page.eval_on_selector_all(selector, _QUERY_SCRIPT)
        except PlaywrightError as exc:
            raise RenderError(f"Query {selector!r} failed on {self.url}: {exc}") from exc
        return [ElementText(text=row.get("text") or "", href=row.get("href")) for row in rows]

    async def click(self, selector: str, *, text_pattern: str | None = None) -> bool:
        try:
            clicked = await self._page.evaluate(_CLICK_SCRIPT, [selector, text_pattern])
        except PlaywrightError as exc:
            raise RenderError(f"Click on {selector!r} failed on {self.url}: {exc}") from exc
        return bool(clicked)

    async def wait_for_count(self, selector: str, more_than: int, timeout_ms: int) -> None:
        try:
            await self._page.wait_for_function(
                _COUNT_ABOVE_SCRIPT,
                arg=[selector, more_than],
                timeout=timeout_ms,
            )
        except PlaywrightTimeoutError as exc:
            raise RenderTimeout(
                f"Fewer than {more_than + 1} matches for {selector!r} after {timeout_ms} ms"
            ) from exc
        except PlaywrightError as exc:
            raise RenderError(f"Waiting for {selector!r} failed on {self.url}: {exc}") from exc

    async def close(self) -> None:
        try:
            await self._context.close()
        except PlaywrightError as exc:  # pragma: no cover - browser already gone
            logger.debug("Failed to close browser context for %s: %s", self.url, exc)


class PlaywrightEngine:
    """Headless Chromium shared by all workers of a run."""

    def __init__(
        self,
        *,
        headless: bool = True,
        viewport: tuple[int, int] = (1280, 1800),
        user_agent: str | None = None,
    ) -> None:
        self._headless = headless
        self._viewport = {"width": viewport[0], "height": viewport[1]}
        self._user_agent = user_agent
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    @classmethod
    def from_config(cls, config: ScraperConfig) -> "PlaywrightEngine":
        return cls(
            headless=config.headless,
            viewport=config.viewport,
            user_agent=config.user_agent,
        )

    async def __aenter__(self) -> "PlaywrightEngine":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def start(self) -> None:
        if self._browser is not None:
            return
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(headless=self._headless)
        except PlaywrightError as exc:
            await self._playwright.stop()
            self._playwright = None
            raise RenderError(f"Could not launch Chromium: {exc}") from exc
        logger.debug("Launched Chromium (headless=%s)", self._headless)

    async def open(self, url: str, options: NavigationOptions) -> PlaywrightPage:
        if self._browser is None:
            await self.start()
        assert self._browser is not None  # for type checkers

        try:
            context = await self._browser.new_context(
                viewport=self._viewport,
                user_agent=self._user_agent,
            )
        except PlaywrightError as exc:
            raise RenderError(f"Could not open a browser context for {url}: {exc}") from exc
        try:
            page = await context.new_page()
            await page.goto(url, wait_until=options.wait_until, timeout=options.timeout_ms)
        except PlaywrightTimeoutError as exc:
            await context.close()
            raise RenderTimeout(f"Timed out loading {url} after {options.timeout_ms} ms") from exc
        except PlaywrightError as exc:
            await context.close()
            raise RenderError(f"Failed to load {url}: {exc}") from exc
        return PlaywrightPage(context, page)

    async def aclose(self) -> None:
        if self._browser is not None:
            await self._browser.close()
            self._browser = None
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
