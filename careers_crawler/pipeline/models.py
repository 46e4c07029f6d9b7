"""Data models for pipeline execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from careers_crawler.crawl.models import CrawlStats
from careers_crawler.domain.models import LoadJobHandle


@dataclass
class PipelineRunResult:
    """
    Outcome of one crawl-persist-forward run.

    Attributes:
        run_id: Identifier stamped on every log record of the run
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run completed
        total_duration_seconds: Wall-clock duration of the run
        crawl: Crawl counters (pages, records, skips)
        artifact_path: Local artifact written by the sink
        uploaded_uri: gs:// URI of the uploaded artifact, if forwarded
        load_job: Handle of the warehouse load job, if one was submitted
        fatal_error: Message of the error that aborted the run
        error_type: Exception class name of fatal_error
        skipped: Run did not start because another run held the lock
    """

    run_id: str
    run_started_at: datetime
    run_finished_at: datetime
    total_duration_seconds: float = 0.0
    crawl: CrawlStats = field(default_factory=CrawlStats)
    artifact_path: Optional[str] = None
    uploaded_uri: Optional[str] = None
    load_job: Optional[LoadJobHandle] = None
    fatal_error: Optional[str] = None
    error_type: Optional[str] = None
    skipped: bool = False

    def __post_init__(self):
        if self.total_duration_seconds == 0.0:
            delta = self.run_finished_at - self.run_started_at
            self.total_duration_seconds = delta.total_seconds()

    @property
    def had_errors(self) -> bool:
        """True if a fatal error aborted the run."""
        return self.fatal_error is not None

    @property
    def cancelled(self) -> bool:
        return self.crawl.cancelled

    @property
    def records_written(self) -> int:
        return self.crawl.records_written
