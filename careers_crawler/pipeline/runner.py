"""Pipeline orchestration: crawl, persist, then forward to the warehouse."""

import threading
from typing import Callable, Optional
from uuid import uuid4

from careers_crawler.config.environment import EnvironmentConfig
from careers_crawler.config.models import AppConfig
from careers_crawler.crawl.controller import PaginationController
from careers_crawler.crawl.exceptions import CrawlError
from careers_crawler.crawl.models import CrawlStats
from careers_crawler.extraction.extractor import FieldExtractor
from careers_crawler.logging import get_logger
from careers_crawler.logging.context import log_context
from careers_crawler.rendering.base import PageRenderer
from careers_crawler.rendering.exceptions import RenderError
from careers_crawler.rendering.playwright_renderer import PlaywrightRenderer
from careers_crawler.sinks.base import RecordSink
from careers_crawler.sinks.exceptions import PersistError
from careers_crawler.sinks.factory import get_sink
from careers_crawler.utils.timestamps import format_timestamp_for_log, utc_now
from careers_crawler.warehouse.exceptions import WarehouseError
from careers_crawler.warehouse.loader import WarehouseLoader
from careers_crawler.warehouse.publisher import BatchPublisher

from .models import PipelineRunResult

logger = get_logger(__name__, component="pipeline")

FATAL_ERRORS = (CrawlError, RenderError, PersistError, WarehouseError)


class CrawlPipeline:
    """
    Runs one complete crawl and optionally forwards its artifact.

    Steps: open sink -> crawl all pages -> close sink -> upload artifact
    -> load into the warehouse. Per-record problems are absorbed by the
    pagination controller; any infrastructure failure aborts the run and
    is recorded on the result instead of propagating.
    """

    def __init__(
        self,
        app_config: AppConfig,
        env_config: EnvironmentConfig,
        renderer_factory: Optional[Callable[[], PageRenderer]] = None,
        sink_factory: Optional[Callable[[], RecordSink]] = None,
        publisher: Optional[BatchPublisher] = None,
        loader: Optional[WarehouseLoader] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            app_config: Application configuration
            env_config: Environment configuration
            renderer_factory: Builds a fresh renderer per run (default: PlaywrightRenderer)
            sink_factory: Builds a fresh sink per run (default: from output config)
            publisher: Object store publisher (default built from warehouse config)
            loader: Warehouse loader (default built from warehouse config)
            cancel_event: Shared cancellation token checked at page boundaries
        """
        self.app_config = app_config
        self.env_config = env_config
        self.renderer_factory = renderer_factory or self._default_renderer
        self.sink_factory = sink_factory or (lambda: get_sink(app_config.output))
        self.cancel_event = cancel_event or threading.Event()

        project = app_config.warehouse.project or env_config.google_cloud_project
        self.publisher = publisher or BatchPublisher(project=project)
        self.loader = loader or WarehouseLoader(
            project=project,
            location=app_config.warehouse.location,
            poll_interval=app_config.warehouse.poll_interval,
            timeout=app_config.warehouse.load_timeout,
        )
        self.extractor = FieldExtractor(
            selectors=app_config.crawl.selectors,
            description_placeholder=app_config.crawl.description_placeholder,
        )
        self._lock = threading.Lock()

    def _default_renderer(self) -> PageRenderer:
        browser = self.app_config.browser
        headless = browser.headless
        if self.env_config.browser_headless is not None:
            headless = self.env_config.browser_headless
        return PlaywrightRenderer(
            headless=headless,
            user_agent=browser.user_agent,
            navigation_timeout=browser.navigation_timeout,
        )

    def cancel(self) -> None:
        """Ask a running crawl to stop at the next page boundary."""
        self.cancel_event.set()

    def run_once(self) -> PipelineRunResult:
        """
        Execute one run.

        Returns:
            PipelineRunResult; fatal errors are recorded on it, not raised
        """
        run_id = uuid4().hex
        started_at = utc_now()

        if not self._lock.acquire(blocking=False):
            with log_context(run_id=run_id):
                logger.warning(
                    "Pipeline run skipped: previous run still in progress",
                    extra={"event": "pipeline.run.skipped", "reason": "lock_held"},
                )
            return PipelineRunResult(
                run_id=run_id, run_started_at=started_at, run_finished_at=utc_now(), skipped=True
            )

        try:
            with log_context(run_id=run_id):
                return self._run(run_id, started_at)
        finally:
            # A cancel applies to the run in flight only
            self.cancel_event.clear()
            self._lock.release()

    def _run(self, run_id: str, started_at) -> PipelineRunResult:
        stats = CrawlStats()
        artifact_path = None
        uploaded_uri = None
        load_job = None
        fatal_error = None
        error_type = None

        logger.info(
            "Pipeline run started",
            extra={
                "event": "pipeline.run.started",
                "url_template": self.app_config.crawl.url_template,
                "output_format": self.app_config.output.format,
                "warehouse_enabled": self.app_config.warehouse.enabled,
            },
        )

        try:
            sink = self.sink_factory()
            artifact_path = str(sink.artifact_path)
            self._crawl(sink, stats)

            if stats.cancelled:
                logger.warning(
                    "Skipping warehouse forwarding for cancelled run",
                    extra={"event": "pipeline.forward.skipped", "reason": "cancelled"},
                )
            elif self.app_config.warehouse.enabled:
                uploaded_uri, load_job = self._forward(sink.artifact_path)

        except FATAL_ERRORS as e:
            fatal_error = str(e)
            error_type = type(e).__name__
            logger.error(
                f"Pipeline run aborted: {e}",
                extra={"event": "pipeline.run.failed", "error_type": error_type},
                exc_info=True,
            )

        result = PipelineRunResult(
            run_id=run_id,
            run_started_at=started_at,
            run_finished_at=utc_now(),
            crawl=stats,
            artifact_path=artifact_path,
            uploaded_uri=uploaded_uri,
            load_job=load_job,
            fatal_error=fatal_error,
            error_type=error_type,
        )

        logger.info(
            "Pipeline run completed",
            extra={
                "event": "pipeline.run.completed",
                "run_started_at": format_timestamp_for_log(result.run_started_at),
                "duration_ms": int(result.total_duration_seconds * 1000),
                "pages_visited": stats.pages_visited,
                "records_written": stats.records_written,
                "skipped_fragments": stats.skipped,
                "flush_failures": stats.flush_failures,
                "uploaded": uploaded_uri is not None,
                "had_errors": result.had_errors,
                "cancelled": stats.cancelled,
            },
        )
        return result

    def _crawl(self, sink: RecordSink, stats: CrawlStats) -> None:
        # The sink is closed even when the crawl aborts so the partial artifact is flushed
        sink.open()
        try:
            with self.renderer_factory() as renderer:
                controller = PaginationController(
                    renderer=renderer,
                    extractor=self.extractor,
                    sink=sink,
                    crawl_config=self.app_config.crawl,
                    cancel_event=self.cancel_event,
                )
                controller.crawl(stats)
        except BaseException:
            # The crawl failure is the one reported; a close failure on top of it is only logged
            try:
                sink.close()
            except PersistError as close_error:
                logger.error(
                    f"Failed to close sink after crawl failure: {close_error}",
                    extra={"event": "sink.close.failed", "error_type": type(close_error).__name__},
                )
            raise
        sink.close()

    def _forward(self, artifact_path):
        warehouse = self.app_config.warehouse

        uploaded_uri = self.publisher.publish(artifact_path, warehouse.bucket, warehouse.object_name)
        load_job = self.loader.load(
            warehouse.bucket, warehouse.object_name, warehouse.dataset, warehouse.table
        )
        return uploaded_uri, load_job
