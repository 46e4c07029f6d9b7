"""Data models for crawl state and statistics."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class CrawlState(str, Enum):
    """States of the pagination state machine.

    LOADING -> PROCESSING -> ADVANCING -> (LOADING | DONE)
    """

    LOADING = "loading"
    PROCESSING = "processing"
    ADVANCING = "advancing"
    DONE = "done"


@dataclass
class RenderedPage:
    """What the renderer reported for one results page."""

    fragments: List[str] = field(default_factory=list)
    next_disabled: bool = False


@dataclass
class CrawlStats:
    """
    Counters accumulated over one crawl.

    Attributes:
        pages_visited: Pages successfully loaded and processed
        last_page: Number of the last page loaded (0 if none)
        fragments_seen: Listing fragments returned by the renderer
        records_written: Complete records accepted by the sink
        extraction_failures: Fragments skipped because extraction failed
        incomplete_records: Extracted records skipped for missing title, location or url
        write_failures: Records the sink failed to write
        flush_failures: Pages whose records could not be flushed to durable storage
        render_retries: Page render attempts that were retried
        page_cap_reached: Crawl stopped at crawl.max_pages before the last page
        cancelled: Crawl stopped because cancellation was requested
    """

    pages_visited: int = 0
    last_page: int = 0
    fragments_seen: int = 0
    records_written: int = 0
    extraction_failures: int = 0
    incomplete_records: int = 0
    write_failures: int = 0
    flush_failures: int = 0
    render_retries: int = 0
    page_cap_reached: bool = False
    cancelled: bool = False

    @property
    def skipped(self) -> int:
        """Fragments that did not end up in the sink."""
        return self.extraction_failures + self.incomplete_records + self.write_failures
