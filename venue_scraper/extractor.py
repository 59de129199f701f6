"""Class-name keyed text extraction.

An alternative to the card/heading parsers for pages where each field of
interest carries a stable CSS class, e.g.::

    extractor = ClassNameExtractor({"name": "SearchResult__venue-name"})
    extractor.extract(html)  # {"name": ["Via Carota", "Dhamaka"]}
"""

from __future__ import annotations

from typing import Mapping

from bs4 import BeautifulSoup


class ClassNameExtractor:
    """Map output keys to the trimmed text of elements with a given class."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = dict(mapping)

    def extract(self, html: str) -> dict[str, list[str]]:
        """Return every matching text per key; keys without matches map to ``[]``."""

        soup = BeautifulSoup(html or "", "lxml")
        extracted: dict[str, list[str]] = {}
        for key, class_name in self._mapping.items():
            extracted[key] = [
                element.get_text().strip()
                for element in soup.find_all(class_=class_name)
            ]
        return extracted

    def extract_multiple(self, html: str, item_selector: str) -> list[dict[str, list[str]]]:
        """Extract fields separately for each block matching *item_selector*.

        Only descendants of a block are searched. Blocks where no key found
        any text are left out.
        """

        if not html or not item_selector:
            return []

        soup = BeautifulSoup(html, "lxml")
        items: list[dict[str, list[str]]] = []
        for block in soup.select(item_selector):
            fields = {
                key: [element.get_text().strip() for element in block.find_all(class_=class_name)]
                for key, class_name in self._mapping.items()
            }
            if any(fields.values()):
                items.append(fields)
        return items
