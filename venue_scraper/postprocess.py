"""Noise filtering and de-duplication of crawled venues."""

from __future__ import annotations

from typing import Iterable, Sequence

from .heuristics import BOILERPLATE_PHRASES
from .models import Venue

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 30


def filter_junk(
    venues: Iterable[Venue],
    *,
    phrases: Sequence[str] = BOILERPLATE_PHRASES,
) -> list[Venue]:
    """Drop venues whose name is too short, too long or site boilerplate."""

    kept: list[Venue] = []
    for venue in venues:
        length = len(venue.name.strip())
        if length < MIN_NAME_LENGTH or length > MAX_NAME_LENGTH:
            continue
        lowered = venue.name.lower()
        if any(phrase in lowered for phrase in phrases):
            continue
        kept.append(venue)
    return kept


def deduplicate(venues: Iterable[Venue]) -> list[Venue]:
    """Keep one venue per exact name.

    When a name repeats, the later venue replaces the earlier one but keeps
    the position where the name was first seen.
    """

    unique: dict[str, Venue] = {}
    for venue in venues:
        unique[venue.name] = venue
    return list(unique.values())
