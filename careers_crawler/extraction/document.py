"""Document query adapter over BeautifulSoup.

Gives the field extractor a narrow query surface (first match for a
selector, then its text, inner HTML or an attribute) so the extraction
rules do not depend on a particular HTML library.
"""

from typing import Optional

from bs4 import BeautifulSoup
from bs4.element import Tag

from .exceptions import ParseError

HTML_PARSER = "html.parser"


class Selection:
    """First element matched by a selector; empty when nothing matched."""

    def __init__(self, element: Optional[Tag]) -> None:
        self._element = element

    @property
    def exists(self) -> bool:
        return self._element is not None

    def text(self) -> str:
        """Concatenated text of the element and its descendants ('' if empty)."""
        if self._element is None:
            return ""
        return self._element.get_text()

    def html(self) -> str:
        """Inner HTML of the element ('' if empty)."""
        if self._element is None:
            return ""
        return self._element.decode_contents()

    def attr(self, name: str) -> Optional[str]:
        """Attribute value, or None when the element or attribute is missing."""
        if self._element is None:
            return None
        value = self._element.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value


class DocumentQuery:
    """Parsed HTML document answering CSS selector queries."""

    def __init__(self, markup: str) -> None:
        if not isinstance(markup, str):
            raise ParseError(f"Expected HTML markup as str, got {type(markup).__name__}")

        try:
            self._soup = BeautifulSoup(markup, HTML_PARSER)
        except Exception as e:
            raise ParseError(f"Error parsing HTML: {e}", fragment=markup) from e

    def find(self, selector: str) -> Selection:
        """Return the first element matching a CSS selector."""
        return Selection(self._soup.select_one(selector))
