"""Data models used across the venue scraper."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

VenueSource = Literal["map", "article", "unknown"]
VenueType = Literal["bar", "restaurant", "unknown"]


@dataclass(slots=True, frozen=True)
class Venue:
    """A classified bar or restaurant mention."""

    name: str
    cuisine: str
    source: VenueSource
    venue_type: VenueType

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "cuisine": self.cuisine,
            "source": self.source,
            "venueType": self.venue_type,
        }


@dataclass(slots=True)
class RawVenueRecord:
    """A venue mention as read off a page, before classification."""

    name: str
    description: str
    source: VenueSource = "unknown"
    context_title: str = ""


@dataclass(slots=True)
class ElementText:
    """Text and link target of an element returned by a render engine query."""

    text: str
    href: Optional[str] = None
