"""Venue type and cuisine heuristics for the venue scraper."""

from __future__ import annotations

from dataclasses import dataclass

from .models import RawVenueRecord, Venue, VenueType

# Space-prefixed so that " bar" matches a word start ("Joe's Bar", "bar & grill")
BAR_KEYWORDS: tuple[str, ...] = (
    " bar",
    " pub",
    " tavern",
    " saloon",
    " taproom",
    " dive",
)

RESTAURANT_KEYWORDS: tuple[str, ...] = (
    " restaurant",
    " steakhouse",
    " bistro",
    " cafe",
    " diner",
    " trattoria",
    " ristorante",
    " kitchen",
)

# Context phrases are only looked up in the description
BAR_CONTEXT: tuple[str, ...] = (
    "cocktail",
    "cheap drinks",
    "happy hour",
    "jukebox",
    "pint",
)

RESTAURANT_CONTEXT: tuple[str, ...] = (
    "chef",
    "menu",
    "dining room",
    "tasting",
    "course",
    "dish",
)

# Priority order: the first hint found in the description wins
CUISINE_HINTS: tuple[str, ...] = (
    "ramen",
    "sushi",
    "omakase",
    "dim sum",
    "dumpling",
    "pizza",
    "pasta",
    "taco",
    "burger",
    "barbecue",
    "bbq",
    "bagel",
    "deli",
    "seafood",
    "oyster",
    "steak",
    "vegan",
    "vegetarian",
    "italian",
    "mexican",
    "japanese",
    "chinese",
    "korean",
    "thai",
    "vietnamese",
    "indian",
    "french",
    "spanish",
    "greek",
    "turkish",
    "lebanese",
    "middle eastern",
    "mediterranean",
    "caribbean",
    "ethiopian",
    "peruvian",
    "brazilian",
    "american",
)

BOILERPLATE_PHRASES: tuple[str, ...] = (
    "newsletter",
    "sign up",
    "subscribe",
    "log in",
    "terms of",
    "privacy notice",
    "cookie policy",
    "about eater",
    "contact us",
    "community guidelines",
    "vox media",
    "follow eater",
    "site search",
    "more from",
    "most read",
    "the latest",
    "archive",
    "comment",
    "advertise",
    "jobs @",
    "press room",
    "masthead",
    "ethics",
    "licensing",
    "platform status",
    "methodology",
    "faq",
    "skip to main content",
    "log in or sign up",
    "site map",
    "accessibility",
    "cookie settings",
    "send us a tip",
    "eater.com",
    "eater ny",
)

UNKNOWN = "unknown"


@dataclass(slots=True)
class ClassificationTables:
    """Declarative keyword tables consulted by the heuristics.

    All entries are expected in lower case. ``cuisine_hints`` is ordered by
    priority.
    """

    bar_keywords: tuple[str, ...] = BAR_KEYWORDS
    restaurant_keywords: tuple[str, ...] = RESTAURANT_KEYWORDS
    bar_context: tuple[str, ...] = BAR_CONTEXT
    restaurant_context: tuple[str, ...] = RESTAURANT_CONTEXT
    cuisine_hints: tuple[str, ...] = CUISINE_HINTS
    boilerplate_phrases: tuple[str, ...] = BOILERPLATE_PHRASES


DEFAULT_TABLES = ClassificationTables()


def classify(
    name: str,
    description: str,
    context_title: str = "",
    *,
    tables: ClassificationTables = DEFAULT_TABLES,
) -> VenueType:
    """Decide whether a venue is a bar, a restaurant or unknown."""

    combined = f" {name.lower()} {description.lower()} {context_title.lower()} "
    lowered_description = description.lower()

    bar_hit = any(keyword in combined for keyword in tables.bar_keywords) or any(
        phrase in lowered_description for phrase in tables.bar_context
    )
    restaurant_hit = any(keyword in combined for keyword in tables.restaurant_keywords) or any(
        phrase in lowered_description for phrase in tables.restaurant_context
    )

    if bar_hit and not restaurant_hit:
        return "bar"
    if restaurant_hit and not bar_hit:
        return "restaurant"
    if bar_hit and restaurant_hit:
        return "bar" if "bar" in name.lower() else "restaurant"
    return "unknown"


def guess_cuisine(description: str, *, tables: ClassificationTables = DEFAULT_TABLES) -> str:
    """Return the capitalized first cuisine hint found in *description*."""

    lowered = description.lower()
    for hint in tables.cuisine_hints:
        if hint in lowered:
            return hint[:1].upper() + hint[1:]
    return UNKNOWN


def to_venue(record: RawVenueRecord, *, tables: ClassificationTables = DEFAULT_TABLES) -> Venue:
    """Classify a raw record into an immutable :class:`Venue`."""

    return Venue(
        name=record.name,
        cuisine=guess_cuisine(record.description, tables=tables),
        source=record.source,
        venue_type=classify(
            record.name,
            record.description,
            record.context_title,
            tables=tables,
        ),
    )
