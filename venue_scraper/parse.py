"""Venue extraction from rendered article pages.

Two page layouts are supported:

* map pages, built from repeated card blocks that each describe one venue;
* narrative articles, where a level-two heading introduces each venue and the
  following paragraphs describe it.

Malformed cards or headings are skipped; parsing never fails because an
optional element is missing.
"""

from __future__ import annotations

import logging
import re
from typing import Literal

from bs4 import BeautifulSoup, Tag

from .config import ScraperConfig
from .models import RawVenueRecord
from .render import PageHandle

logger = logging.getLogger(__name__)

PageMode = Literal["map", "article"]

CARD_HEADING_TAGS = ["h1", "h2", "h3", "h4"]
COPY_LINK_LABEL = "Copy Link"

_COPY_LINK_RE = re.compile(re.escape(COPY_LINK_LABEL), re.IGNORECASE)
_RANK_RE = re.compile(r"^#\s*\d*\s*")
_EXCLUDED_CARD_RE = re.compile(r"^(more in maps|related maps?|related|map points)", re.IGNORECASE)
_CARD_ADDRESS_RE = re.compile(r"^\d{2,4}\s+\w+")
_ARTICLE_ADDRESS_RE = re.compile(
    r"^\d+\s.+\b(?:St|Street|Ave|Avenue|Road|Rd|Blvd|Boulevard|NYC?)\b",
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")


def detect_mode(soup: BeautifulSoup, config: ScraperConfig) -> PageMode:
    """Return ``"map"`` when the page contains at least one venue card."""

    return "map" if soup.select_one(config.card_selector) is not None else "article"


def parse_map(soup: BeautifulSoup, config: ScraperConfig, *, title: str = "") -> list[RawVenueRecord]:
    records: list[RawVenueRecord] = []

    for card in soup.select(config.card_selector):
        heading = card.find(CARD_HEADING_TAGS)
        if heading is None:
            continue

        name = clean_card_name(_text(heading))
        if not name or _EXCLUDED_CARD_RE.match(name):
            continue

        parts: list[str] = []
        for paragraph in card.find_all("p"):
            text = _text(paragraph)
            if not text or text == COPY_LINK_LABEL:
                continue
            if _is_card_address(paragraph, text, config.card_address_class):
                continue
            parts.append(text)

        records.append(
            RawVenueRecord(
                name=name,
                description=" ".join(parts),
                source="map",
                context_title=title,
            )
        )

    return records


def parse_narrative(soup: BeautifulSoup, config: ScraperConfig, *, title: str = "") -> list[RawVenueRecord]:
    records: list[RawVenueRecord] = []
    heading_tag = config.article_heading_tag

    for heading in soup.select(f"{config.content_selector} > {heading_tag}"):
        name = venue_name_from_heading(heading)
        if not name:
            continue

        node = heading.find_next_sibling()
        if node is not None and node.name == "p" and _ARTICLE_ADDRESS_RE.match(_text(node)):
            node = node.find_next_sibling()

        parts: list[str] = []
        while node is not None and node.name != heading_tag:
            if node.name == "p":
                text = _text(node)
                if text:
                    parts.append(text)
            node = node.find_next_sibling()

        records.append(
            RawVenueRecord(
                name=name,
                description=" ".join(parts),
                source="article",
                context_title=title,
            )
        )

    return records


def parse_html(html: str, config: ScraperConfig, *, title: str = "") -> list[RawVenueRecord]:
    """Detect the layout of *html* and extract raw venue records from it."""

    soup = BeautifulSoup(html, "lxml")
    if detect_mode(soup, config) == "map":
        return parse_map(soup, config, title=title)
    return parse_narrative(soup, config, title=title)


async def parse_article(page: PageHandle, url: str, config: ScraperConfig) -> list[RawVenueRecord]:
    """Extract raw venue records from an already loaded article *page*."""

    title = await page.title()
    html = await page.content()
    records = parse_html(html, config, title=title)
    logger.debug("Parsed %d raw venues from %s", len(records), url)
    return records


def clean_card_name(text: str) -> str:
    """Strip the "Copy Link" label and a leading rank marker like "# 14"."""

    name = _COPY_LINK_RE.sub("", text, count=1).strip()
    return _RANK_RE.sub("", name).strip()


def venue_name_from_heading(heading: Tag) -> str:
    """Anchor text, else the text after the last " at ", else the heading."""

    anchor = heading.find("a")
    if anchor is not None:
        return _text(anchor)
    text = _text(heading)
    if " at " in text:
        return text.rsplit(" at ", 1)[-1].strip()
    return text


def _is_card_address(paragraph: Tag, text: str, address_class: str) -> bool:
    classes = paragraph.get("class") or []
    return address_class in classes or bool(_CARD_ADDRESS_RE.match(text))


def _text(element: Tag) -> str:
    return _WHITESPACE_RE.sub(" ", element.get_text()).strip()
