"""Shared fixtures: an in-memory render engine and literal HTML pages."""

from __future__ import annotations

import asyncio

import pytest
from bs4 import BeautifulSoup

from venue_scraper.config import ScraperConfig
from venue_scraper.models import ElementText
from venue_scraper.render import NavigationOptions, RenderError, RenderTimeout

SEED_URL = "https://ny.example.com/"

MAP_PAGE = """
<html>
  <head><title>The 10 Best Dive Bars in NYC</title></head>
  <body>
    <section class="c-mapstack__card">
      <h2><span>#1</span> Holiday Cocktail Lounge <button>Copy Link</button></h2>
      <p class="c-mapstack__address">75 St Marks Pl, New York, NY 10003</p>
      <p>A storied East Village haunt with cheap drinks and a jukebox.</p>
      <p>Copy Link</p>
    </section>
    <section class="c-mapstack__card">
      <h2>#2 Sophie's Bar</h2>
      <p>509 East 5th Street</p>
      <p>Pints and pool in a proper dive.</p>
    </section>
    <section class="c-mapstack__card">
      <p>A card without any heading.</p>
    </section>
    <section class="c-mapstack__card">
      <h2>Related Maps</h2>
      <p>Where to drink in Brooklyn.</p>
    </section>
    <section class="c-mapstack__card">
      <h3>Copy Link</h3>
    </section>
    <section class="c-mapstack__card">
      <div><h4># 12 Via Carota</h4></div>
      <p>Chef Jody Williams's menu of Italian dishes.</p>
    </section>
  </body>
</html>
"""

ARTICLE_PAGE = """
<html>
  <head><title>Where to Eat in the East Village</title></head>
  <body>
    <h2>Not part of the article</h2>
    <div class="c-entry-content">
      <p>The neighborhood has never been better.</p>
      <h2><a href="https://example.com/dhamaka">Dhamaka</a></h2>
      <p>119 Delancey St, NYC</p>
      <p>Regional Indian dishes from chef Chintan Pandya.</p>
      <figure><img src="dhamaka.jpg"></figure>
      <p>Reserve ahead.</p>
      <h2>Late-night pierogi at Veselka</h2>
      <p>A Ukrainian diner open around the clock.</p>
      <h2>Ramen Bar</h2>
      <div><p>Nested paragraphs are not siblings.</p></div>
      <p>Tonkotsu ramen and cold beer.</p>
    </div>
  </body>
</html>
"""


def listing_html(anchors: list[tuple[str, str]]) -> str:
    items = "".join(
        f'<h2 class="c-entry-box--compact__title"><a href="{href}">{text}</a></h2>'
        for text, href in anchors
    )
    return f"<html><body>{items}</body></html>"


class FakePage:
    """Page handle over a literal HTML document."""

    def __init__(self, url: str, html: str = "", *, delay: float = 0.0, fail_on_content: bool = False) -> None:
        self.url = url
        self._html = html
        self._soup = BeautifulSoup(html, "lxml")
        self._delay = delay
        self._fail_on_content = fail_on_content
        self.engine: FakeEngine | None = None
        self.closed = False

    async def title(self) -> str:
        await asyncio.sleep(self._delay)
        if self._soup.title is None:
            return ""
        return self._soup.title.get_text().strip()

    async def content(self) -> str:
        await asyncio.sleep(self._delay)
        if self._fail_on_content:
            raise RenderError(f"evaluation failed on {self.url}")
        return self._html

    async def query(self, selector: str) -> list[ElementText]:
        return [
            ElementText(text=element.get_text().strip(), href=element.get("href"))
            for element in self._soup.select(selector)
        ]

    async def click(self, selector: str, *, text_pattern: str | None = None) -> bool:
        return False

    async def wait_for_count(self, selector: str, more_than: int, timeout_ms: int) -> None:
        if len(await self.query(selector)) <= more_than:
            raise RenderTimeout("no new elements")

    async def close(self) -> None:
        self.closed = True
        if self.engine is not None:
            self.engine.release()


class FakeListingPage(FakePage):
    """Listing page that reveals one more batch of stories per click."""

    def __init__(
        self,
        url: str,
        batches: list[list[tuple[str, str]]],
        *,
        has_load_more: bool = True,
    ) -> None:
        super().__init__(url)
        self.batches = batches
        self.has_load_more = has_load_more
        self.shown = 1
        self.clicks = 0
        self.queries = 0

    async def query(self, selector: str) -> list[ElementText]:
        self.queries += 1
        return [
            ElementText(text=text, href=href)
            for batch in self.batches[: self.shown]
            for text, href in batch
        ]

    async def click(self, selector: str, *, text_pattern: str | None = None) -> bool:
        if not self.has_load_more:
            return False
        self.clicks += 1
        if self.shown < len(self.batches):
            self.shown += 1
        return True


class FakeEngine:
    """Render engine double that records every call it receives."""

    def __init__(self, pages: dict[str, FakePage | BaseException]) -> None:
        self.pages = pages
        self.opened: list[tuple[str, NavigationOptions]] = []
        self.active = 0
        self.max_active = 0
        self.started = 0
        self.closed = False

    async def open(self, url: str, options: NavigationOptions) -> FakePage:
        self.opened.append((url, options))
        await asyncio.sleep(0)
        target = self.pages.get(url)
        if target is None:
            raise RenderError(f"no fixture for {url}")
        if isinstance(target, BaseException):
            raise target
        target.engine = self
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        return target

    async def start(self) -> None:
        self.started += 1

    def release(self) -> None:
        self.active -= 1

    async def aclose(self) -> None:
        self.closed = True


class RecordingFactory:
    """Engine factory that counts how often an engine was requested."""

    def __init__(self, engine: FakeEngine) -> None:
        self.engine = engine
        self.calls = 0

    def __call__(self, config: ScraperConfig) -> FakeEngine:
        self.calls += 1
        return self.engine


@pytest.fixture
def config() -> ScraperConfig:
    return ScraperConfig(seed_url=SEED_URL)


@pytest.fixture
def site_engine() -> FakeEngine:
    """A listing page with three matching articles, one of which times out."""

    listing = FakeListingPage(
        SEED_URL,
        [
            [
                ("Where to Eat in the East Village", "https://ny.example.com/east-village"),
                ("Best Bagels in Brooklyn", "https://ny.example.com/bagels"),
            ],
            [
                ("The 10 Best Dive Bars in NYC", "https://ny.example.com/dive-bars"),
                ("East Village Pizza, Ranked", "https://ny.example.com/broken"),
            ],
        ],
    )
    return FakeEngine(
        {
            SEED_URL: listing,
            "https://ny.example.com/east-village": FakePage("https://ny.example.com/east-village", ARTICLE_PAGE),
            "https://ny.example.com/dive-bars": FakePage("https://ny.example.com/dive-bars", MAP_PAGE),
            "https://ny.example.com/broken": RenderTimeout("Timed out loading https://ny.example.com/broken"),
        }
    )
