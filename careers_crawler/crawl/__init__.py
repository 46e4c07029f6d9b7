"""Pagination controller and crawl statistics."""

from .controller import PaginationController
from .exceptions import CrawlError
from .models import CrawlState, CrawlStats, RenderedPage

__all__ = [
    "PaginationController",
    "CrawlError",
    "CrawlState",
    "CrawlStats",
    "RenderedPage",
]
