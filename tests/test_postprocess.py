"""Tests for noise filtering and de-duplication."""

import pytest

from venue_scraper.models import Venue
from venue_scraper.postprocess import deduplicate, filter_junk


def _venue(name, cuisine="unknown", venue_type="unknown", source="article"):
    return Venue(name=name, cuisine=cuisine, source=source, venue_type=venue_type)


class TestFilterJunk:
    @pytest.mark.parametrize(
        "name",
        [
            "Sign up for our Newsletter",
            "Ab",
            "A" * 31,
            "Cookie Settings",
            "More from Eater NY",
            "   Al   ",
        ],
    )
    def test_rejects(self, name):
        assert filter_junk([_venue(name)]) == []

    @pytest.mark.parametrize("name", ["Lilia", "Abc", "B" * 30])
    def test_accepts(self, name):
        venue = _venue(name)
        assert filter_junk([venue]) == [venue]

    def test_custom_phrase_table(self):
        venues = [_venue("Lilia"), _venue("Sponsored Pick")]
        assert filter_junk(venues, phrases=("sponsored",)) == [venues[0]]


class TestDeduplicate:
    def test_later_record_wins_on_name_collision(self):
        first = _venue("Lilia", cuisine="Italian", venue_type="restaurant", source="map")
        second = _venue("Lilia", cuisine="unknown", venue_type="bar", source="article")

        result = deduplicate([first, second])

        assert result == [second]

    def test_names_are_case_sensitive(self):
        venues = [_venue("Lilia"), _venue("LILIA")]
        assert deduplicate(venues) == venues

    def test_keeps_first_seen_position(self):
        a, b, a_again = _venue("Atoboy"), _venue("Bernie's"), _venue("Atoboy", cuisine="Korean")
        assert deduplicate([a, b, a_again]) == [a_again, b]
