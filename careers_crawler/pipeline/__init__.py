"""Pipeline orchestration for crawling, persistence and warehouse forwarding."""

from .models import PipelineRunResult
from .runner import CrawlPipeline

__all__ = [
    "CrawlPipeline",
    "PipelineRunResult",
]
