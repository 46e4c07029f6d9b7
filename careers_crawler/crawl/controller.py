"""Pagination controller driving the renderer across result pages."""

import json
import threading
import time
from typing import Callable, Optional

from careers_crawler.config.models import CrawlConfig
from careers_crawler.domain.models import PageCursor
from careers_crawler.extraction.exceptions import ExtractionError
from careers_crawler.extraction.extractor import FieldExtractor
from careers_crawler.logging import get_logger
from careers_crawler.logging.context import log_context
from careers_crawler.rendering.base import PageRenderer
from careers_crawler.rendering.exceptions import EvaluationError, RenderError, RendererLaunchError
from careers_crawler.sinks.base import RecordSink
from careers_crawler.sinks.exceptions import SinkWriteError

from .exceptions import CrawlError
from .models import CrawlState, CrawlStats, RenderedPage

logger = get_logger(__name__, component="crawl")

MAX_RETRY_DELAY = 60.0


class PaginationController:
    """
    Walks numbered result pages until the site reports no next page.

    Pages are visited strictly in increasing order and one at a time:
    page n+1 is not requested until every record of page n has been
    handed to the sink and the sink has been flushed.

    Per-fragment problems (extraction failures, incomplete records, a
    failed write) are logged, counted and skipped. A page that cannot be
    rendered after max_attempts_per_page attempts aborts the crawl with
    CrawlError.
    """

    def __init__(
        self,
        renderer: PageRenderer,
        extractor: FieldExtractor,
        sink: RecordSink,
        crawl_config: Optional[CrawlConfig] = None,
        cancel_event: Optional[threading.Event] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the controller.

        Args:
            renderer: Page renderer used to load each page
            extractor: Field extractor applied to each fragment
            sink: Opened record sink receiving complete records
            crawl_config: Pagination, selector and retry settings
            cancel_event: Set from another thread to stop at the next page boundary
            sleep: Function used for retry backoff (injectable for tests)
        """
        self.renderer = renderer
        self.extractor = extractor
        self.sink = sink
        self.config = crawl_config or CrawlConfig()
        self.cancel_event = cancel_event
        self._sleep = sleep

        selectors = self.config.selectors
        self.listing_script = (
            f"Array.from(document.querySelectorAll({json.dumps(selectors.listing)}))"
            ".map(e => e.outerHTML)"
        )
        self.next_disabled_script = (
            f"document.querySelector({json.dumps(selectors.next_disabled)}) !== null"
        )

    def crawl(self, stats: Optional[CrawlStats] = None) -> CrawlStats:
        """
        Run the state machine from the start page to DONE.

        Args:
            stats: Counters to accumulate into; the caller keeps them even if the crawl aborts

        Returns:
            CrawlStats for the crawl

        Raises:
            CrawlError: A page could not be rendered within the allowed attempts
        """
        stats = stats if stats is not None else CrawlStats()
        cursor = PageCursor.start(self.config.url_template, self.config.start_page)
        page: Optional[RenderedPage] = None
        state = CrawlState.LOADING

        logger.info(
            "Crawl started",
            extra={
                "event": "crawl.started",
                "url": cursor.url,
                "max_pages": self.config.max_pages,
            },
        )

        while state is not CrawlState.DONE:
            with log_context(page=cursor.page_number):
                if state is CrawlState.LOADING:
                    if self._cancel_requested():
                        stats.cancelled = True
                        logger.warning(
                            "Crawl cancelled at page boundary",
                            extra={"event": "crawl.cancelled", "pages_visited": stats.pages_visited},
                        )
                        state = CrawlState.DONE
                        continue

                    page = self._load_page(cursor, stats)
                    cursor.has_next = not page.next_disabled
                    stats.last_page = cursor.page_number
                    state = CrawlState.PROCESSING

                elif state is CrawlState.PROCESSING:
                    self._process_page(page, stats)
                    stats.pages_visited += 1
                    page = None
                    state = CrawlState.ADVANCING

                elif state is CrawlState.ADVANCING:
                    state = self._advance(cursor, stats)
                    if state is CrawlState.LOADING:
                        cursor = cursor.advance(self.config.url_template)

        logger.info(
            f"Crawl completed. Total jobs extracted: {stats.records_written}",
            extra={
                "event": "crawl.completed",
                "pages_visited": stats.pages_visited,
                "fragments_seen": stats.fragments_seen,
                "records_written": stats.records_written,
                "skipped": stats.skipped,
                "flush_failures": stats.flush_failures,
                "page_cap_reached": stats.page_cap_reached,
                "cancelled": stats.cancelled,
            },
        )
        return stats

    def _advance(self, cursor: PageCursor, stats: CrawlStats) -> CrawlState:
        if not cursor.has_next:
            logger.info(
                "Last page reached",
                extra={"event": "crawl.last_page", "page": cursor.page_number},
            )
            return CrawlState.DONE

        if self.config.max_pages and stats.pages_visited >= self.config.max_pages:
            stats.page_cap_reached = True
            logger.warning(
                f"Page cap of {self.config.max_pages} reached before the last page",
                extra={"event": "crawl.page_cap_reached", "max_pages": self.config.max_pages},
            )
            return CrawlState.DONE

        return CrawlState.LOADING

    def _load_page(self, cursor: PageCursor, stats: CrawlStats) -> RenderedPage:
        """Render one page, retrying render failures with exponential backoff."""
        max_attempts = self.config.max_attempts_per_page
        last_error: Optional[RenderError] = None

        for attempt in range(1, max_attempts + 1):
            if attempt > 1:
                delay = self.config.retry_initial_delay * (
                    self.config.retry_backoff_multiplier ** (attempt - 2)
                )
                delay = min(delay, MAX_RETRY_DELAY)
                stats.render_retries += 1
                logger.warning(
                    f"Retrying page {cursor.page_number} (attempt {attempt}/{max_attempts}) after {delay:.1f}s delay",
                    extra={"event": "crawl.page.retry", "attempt": attempt, "delay_seconds": delay},
                )
                self._sleep(delay)

            try:
                page = self._render(cursor.url)
            except RendererLaunchError:
                raise
            except RenderError as e:
                last_error = e
                logger.warning(
                    f"Render failed for page {cursor.page_number} (attempt {attempt}/{max_attempts}): {e}",
                    extra={
                        "event": "crawl.page.render_failed",
                        "attempt": attempt,
                        "error_type": type(e).__name__,
                        "url": cursor.url,
                    },
                )
                continue

            logger.info(
                f"Scraping page {cursor.page_number}, count so far: {stats.records_written}",
                extra={
                    "event": "crawl.page.loaded",
                    "url": cursor.url,
                    "fragments": len(page.fragments),
                    "next_disabled": page.next_disabled,
                    "attempt": attempt,
                },
            )
            return page

        logger.error(
            f"Giving up on page {cursor.page_number} after {max_attempts} attempts",
            extra={"event": "crawl.page.failed", "url": cursor.url, "error": str(last_error)},
        )
        raise CrawlError(
            f"Failed to render page {cursor.page_number} ({cursor.url}) "
            f"after {max_attempts} attempts: {last_error}",
            page_number=cursor.page_number,
            url=cursor.url,
            attempts=max_attempts,
        ) from last_error

    def _render(self, url: str) -> RenderedPage:
        self.renderer.navigate(url)
        self.renderer.wait_visible(self.config.selectors.listing, self.config.page_timeout)

        fragments = self.renderer.evaluate(self.listing_script)
        if not isinstance(fragments, list) or not all(isinstance(f, str) for f in fragments):
            raise EvaluationError(
                f"Listing script returned {type(fragments).__name__}, expected a list of strings",
                url=url,
            )

        next_disabled = self.renderer.evaluate(self.next_disabled_script)
        return RenderedPage(fragments=fragments, next_disabled=bool(next_disabled))

    def _process_page(self, page: RenderedPage, stats: CrawlStats) -> None:
        stats.fragments_seen += len(page.fragments)

        for index, fragment in enumerate(page.fragments):
            try:
                record = self.extractor.extract(fragment)
            except ExtractionError as e:
                stats.extraction_failures += 1
                logger.warning(
                    f"Error extracting job info: {e}",
                    extra={
                        "event": "extract.failed",
                        "fragment_index": index,
                        "error_type": type(e).__name__,
                    },
                )
                continue

            if not record.is_complete():
                stats.incomplete_records += 1
                logger.info(
                    "Skipping incomplete record",
                    extra={
                        "event": "extract.incomplete",
                        "fragment_index": index,
                        "title": record.title,
                        "has_location": bool(record.location.strip()),
                        "has_url": bool(record.url.strip()),
                    },
                )
                continue

            try:
                self.sink.write(record)
            except SinkWriteError as e:
                stats.write_failures += 1
                logger.error(
                    f"Failed to persist record: {e}",
                    extra={"event": "sink.write.failed", "fragment_index": index, "title": record.title},
                )
                continue

            stats.records_written += 1

        try:
            self.sink.flush()
        except SinkWriteError as e:
            stats.flush_failures += 1
            logger.error(
                f"Failed to flush sink: {e}",
                extra={"event": "sink.flush.failed", "flush_failures": stats.flush_failures},
            )

    def _cancel_requested(self) -> bool:
        return self.cancel_event is not None and self.cancel_event.is_set()
