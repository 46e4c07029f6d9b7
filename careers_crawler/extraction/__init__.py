"""Listing fragment parsing and field extraction.

Usage:
    from careers_crawler.extraction import FieldExtractor, ExtractionError

    extractor = FieldExtractor(selectors, description_placeholder="to be implemented")
    try:
        record = extractor.extract(fragment_html)
    except ExtractionError:
        ...  # skip this fragment
"""

from .document import DocumentQuery, Selection
from .exceptions import ExtractionError, MalformedLocationFormat, MissingURL, ParseError
from .extractor import FieldExtractor, split_level_location

__all__ = [
    "DocumentQuery",
    "Selection",
    "FieldExtractor",
    "split_level_location",
    # Exceptions
    "ExtractionError",
    "ParseError",
    "MalformedLocationFormat",
    "MissingURL",
]
