"""Field extraction from a single listing fragment."""

import html
import re
from typing import List

from careers_crawler.config.models import SelectorConfig
from careers_crawler.domain.models import JobRecord, ListingFragment
from careers_crawler.logging import get_logger

from .document import DocumentQuery
from .exceptions import MalformedLocationFormat, MissingURL

logger = get_logger(__name__, component="extract")

LINE_BREAK = re.compile(r"<br\s*/?>", flags=re.IGNORECASE)
TAG = re.compile(r"<[^>]+>")


class FieldExtractor:
    """Turns one listing fragment into a JobRecord.

    A listing card carries the title, a combined block rendered as
    ``<level><br/><location>`` and an anchor pointing at the posting.
    The description is not part of the card and is set to a fixed
    placeholder.

    The returned record is not guaranteed complete: selectors that match
    nothing yield empty strings, so callers must check
    JobRecord.is_complete() before persisting.
    """

    def __init__(
        self,
        selectors: SelectorConfig | None = None,
        description_placeholder: str = "to be implemented",
    ) -> None:
        self.selectors = selectors or SelectorConfig()
        self.description_placeholder = description_placeholder

    def extract(self, fragment: ListingFragment) -> JobRecord:
        """Extract a record from one fragment.

        Args:
            fragment: Outer HTML of one listing card

        Returns:
            JobRecord, possibly incomplete

        Raises:
            ParseError: Fragment is not parseable markup
            MalformedLocationFormat: Level/location block has fewer than two segments
            MissingURL: Listing anchor or its href is missing
        """
        doc = DocumentQuery(fragment)

        title = doc.find(self.selectors.title).text().strip()
        level_location = doc.find(self.selectors.level_location).html()

        url = doc.find(self.selectors.link).attr("href")
        if url is None:
            raise MissingURL("Listing anchor has no href", fragment=fragment)

        segments = split_level_location(level_location)
        if len(segments) < 2:
            raise MalformedLocationFormat(
                f"Invalid level/location format: expected 2 segments, got {len(segments)}",
                fragment=fragment,
            )

        record = JobRecord(
            title=title,
            location=segments[1],
            description=self.description_placeholder,
            experience_level=segments[0],
            url=url.strip(),
        )

        logger.debug(
            "Extracted listing",
            extra={"event": "extract.succeeded", "title": record.title, "url": record.url},
        )
        return record


def split_level_location(block_html: str) -> List[str]:
    """Split a '<level><br/><location>' block into cleaned text segments.

    Each segment has nested tags removed, entities decoded and surrounding
    whitespace trimmed. An empty block yields a single empty segment.
    """
    return [_clean_segment(part) for part in LINE_BREAK.split(block_html)]


def _clean_segment(segment: str) -> str:
    return html.unescape(TAG.sub("", segment)).strip()
