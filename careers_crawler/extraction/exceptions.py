"""Exceptions raised while extracting a record from a listing fragment.

All of them are recoverable: the pagination controller logs the failure,
counts it and moves on to the next fragment.
"""


class ExtractionError(Exception):
    """Base exception for fragment extraction failures."""

    def __init__(self, message: str, fragment: str = "") -> None:
        super().__init__(message)
        self.fragment = fragment


class ParseError(ExtractionError):
    """Fragment could not be parsed as an HTML document."""

    pass


class MalformedLocationFormat(ExtractionError):
    """Level/location block did not split into at least two segments."""

    pass


class MissingURL(ExtractionError):
    """Listing anchor or its href attribute is missing."""

    pass
