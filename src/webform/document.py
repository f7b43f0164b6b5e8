"""Selector-query document model over BeautifulSoup."""

from __future__ import annotations

from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import Tag


class Document:
    """Parsed HTML page answering CSS-selector queries."""

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    def select(self, selector: str) -> List[Tag]:
        # soupsieve raises SelectorSyntaxError on malformed selectors; callers decide how to recover.
        return self.soup.select(selector)

    @staticmethod
    def text(node: Tag) -> str:
        return node.get_text().strip()

    @staticmethod
    def attr(node: Tag, name: str) -> Optional[str]:
        value = node.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def joined_text(self, nodes: List[Tag]) -> str:
        return "".join(node.get_text() for node in nodes).strip()


def parse_html(html: str) -> Document:
    return Document(BeautifulSoup(html, "html.parser"))


__all__ = ["Document", "parse_html"]
