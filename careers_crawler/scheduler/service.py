"""Recurring crawl runs on an APScheduler background thread."""

import threading
from datetime import datetime, timezone
from typing import Callable, Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, EVENT_JOB_MISSED, JobExecutionEvent
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from careers_crawler.logging import get_logger

logger = get_logger(__name__, component="scheduler")

JOB_ID = "careers-crawl"


class SchedulerService:
    """
    Fires the crawl right away, then once per interval.

    At most one crawl is in flight; a tick that arrives while a crawl is
    still running is coalesced into the next one. Each finished run is
    summarised in the log from the PipelineRunResult it returned.
    """

    def __init__(
        self,
        pipeline_callable: Callable[[], object],
        interval_seconds: int,
        shutdown_event: Optional[threading.Event] = None,
    ):
        """
        Args:
            pipeline_callable: Called on each tick, usually CrawlPipeline.run_once
            interval_seconds: Seconds between crawl starts
            shutdown_event: Set once the scheduler stops, releasing the main thread
        """
        self.pipeline_callable = pipeline_callable
        self.interval_seconds = interval_seconds
        self.shutdown_event = shutdown_event
        self.completed_runs = 0

        self.scheduler = BackgroundScheduler(
            job_defaults={
                "max_instances": 1,
                "coalesce": True,
                "misfire_grace_time": interval_seconds,
            },
            timezone=timezone.utc,
        )
        self.scheduler.add_listener(
            self._on_job_event, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR | EVENT_JOB_MISSED
        )

    def start(self) -> None:
        """Register the crawl job with an immediate first run and start ticking."""
        first_run = datetime.now(timezone.utc)
        trigger = IntervalTrigger(seconds=self.interval_seconds, timezone=timezone.utc)

        self.scheduler.add_job(
            func=self.pipeline_callable,
            trigger=trigger,
            id=JOB_ID,
            name="Careers crawl",
            next_run_time=first_run,
            replace_existing=True,
        )
        self.scheduler.start()

        logger.info(
            f"Scheduler started with interval: {self.interval_seconds} seconds",
            extra={
                "event": "scheduler.started",
                "interval_seconds": self.interval_seconds,
                "next_run_time": first_run.isoformat(),
            },
        )

    def shutdown(self, wait: bool = False) -> None:
        """
        Stop ticking and release whoever waits on shutdown_event.

        Args:
            wait: Block until an in-flight crawl returns
        """
        logger.info(
            "Stopping scheduler",
            extra={"event": "scheduler.stopping", "wait_for_jobs": wait},
        )

        if self.is_running():
            self.scheduler.shutdown(wait=wait)

        if self.shutdown_event is not None:
            self.shutdown_event.set()

        logger.info(
            "Scheduler stopped",
            extra={"event": "scheduler.stopped", "completed_runs": self.completed_runs},
        )

    def is_running(self) -> bool:
        return self.scheduler.running

    def get_next_run_time(self) -> Optional[datetime]:
        """Next tick, or None before start()."""
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None

    def _on_job_event(self, event: JobExecutionEvent) -> None:
        if event.code == EVENT_JOB_MISSED:
            logger.warning(
                "Scheduled crawl missed its start time",
                extra={"event": "scheduler.run.missed", "scheduled_for": str(event.scheduled_run_time)},
            )
            return

        if event.code == EVENT_JOB_ERROR:
            # run_once records fatal errors itself, so this is a programming error
            logger.error(
                f"Scheduled crawl raised: {event.exception}",
                extra={"event": "scheduler.run.crashed", "error_type": type(event.exception).__name__},
            )
            return

        self.completed_runs += 1
        result = event.retval
        logger.info(
            "Scheduled crawl finished",
            extra={
                "event": "scheduler.run.finished",
                "completed_runs": self.completed_runs,
                "records_written": getattr(result, "records_written", None),
                "had_errors": getattr(result, "had_errors", None),
                "skipped": getattr(result, "skipped", None),
            },
        )
