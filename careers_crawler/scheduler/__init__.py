"""Periodic execution of the crawl pipeline."""

from .service import SchedulerService

__all__ = [
    "SchedulerService",
]
