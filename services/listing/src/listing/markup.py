"""Structure checks for HTML listing descriptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from bs4 import BeautifulSoup


@dataclass
class MarkupOutline:
    headings: List[str] = field(default_factory=list)
    list_items: List[str] = field(default_factory=list)
    paragraphs: int = 0
    word_count: int = 0

    @property
    def is_structured(self) -> bool:
        return bool(self.headings) and bool(self.list_items)


def outline_markup(markup: str) -> MarkupOutline:
    """Collect headings, list items and rendered word count from ``markup``."""

    soup = BeautifulSoup(markup or "", "lxml")
    headings = [node.get_text(" ", strip=True) for node in soup.find_all(["h2", "h3", "h4"])]
    items = [node.get_text(" ", strip=True) for node in soup.find_all("li")]
    text = soup.get_text(" ", strip=True)
    return MarkupOutline(
        headings=headings,
        list_items=items,
        paragraphs=len(soup.find_all("p")),
        word_count=len(text.split()),
    )


__all__ = ["MarkupOutline", "outline_markup"]
