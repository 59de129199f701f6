"""Script-free render engine backed by httpx and BeautifulSoup.

Useful for article pages that are fully server rendered. Because no scripts
run, "load more" controls cannot be activated and link discovery only sees
the first listing page.
"""

from __future__ import annotations

import logging
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup

from .config import ScraperConfig
from .models import ElementText
from .render import NavigationOptions, RenderError, RenderTimeout

logger = logging.getLogger(__name__)

DEFAULT_ACCEPT_HEADER = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
)


class StaticPage:
    """A fetched HTML document exposed through the page handle interface."""

    def __init__(self, url: str, html: str) -> None:
        self.url = url
        self._html = html
        self._soup = BeautifulSoup(html, "lxml")

    async def title(self) -> str:
        if self._soup.title is None:
            return ""
        return self._soup.title.get_text().strip()

    async def content(self) -> str:
        return self._html

    async def query(self, selector: str) -> list[ElementText]:
        results: list[ElementText] = []
        for element in self._soup.select(selector):
            href = element.get("href")
            results.append(
                ElementText(
                    text=element.get_text().strip(),
                    href=urljoin(self.url, href) if href else None,
                )
            )
        return results

    async def click(self, selector: str, *, text_pattern: str | None = None) -> bool:
        logger.debug("Static page %s cannot activate %r; treating as absent", self.url, selector)
        return False

    async def wait_for_count(self, selector: str, more_than: int, timeout_ms: int) -> None:
        if len(self._soup.select(selector)) > more_than:
            return
        raise RenderTimeout(f"Static page {self.url} will never grow past {more_than} matches for {selector!r}")

    async def close(self) -> None:
        return None


class StaticEngine:
    """Fetch pages over HTTP without executing scripts."""

    def __init__(self, *, user_agent: str, client: httpx.AsyncClient | None = None) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={
                "User-Agent": user_agent,
                "Accept": DEFAULT_ACCEPT_HEADER,
                "Accept-Language": "en-US,en;q=0.9",
            },
            http2=True,
            follow_redirects=True,
        )

    @classmethod
    def from_config(cls, config: ScraperConfig) -> "StaticEngine":
        return cls(user_agent=config.user_agent)

    async def __aenter__(self) -> "StaticEngine":
        return self

    async def start(self) -> None:
        return None

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def open(self, url: str, options: NavigationOptions) -> StaticPage:
        timeout = options.timeout_ms / 1000
        try:
            response = await self._client.get(url, timeout=timeout)
        except httpx.TimeoutException as exc:
            raise RenderTimeout(f"Timed out loading {url} after {options.timeout_ms} ms") from exc
        except httpx.RequestError as exc:
            raise RenderError(f"Failed to load {url}: {exc}") from exc

        if response.status_code >= 400:
            raise RenderError(f"Failed to load {url}: HTTP {response.status_code}")

        return StaticPage(str(response.url), response.text)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
