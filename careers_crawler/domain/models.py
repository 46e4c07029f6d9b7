"""Core domain models for scraped listings and warehouse load jobs.

This module defines the data structures passed between components:
- ListingFragment: raw markup of one listing tile, as emitted by the renderer
- JobRecord: structured job listing produced by the field extractor
- PageCursor: position of the pagination controller in the result pages
- LoadJobHandle: identifier and terminal status of a warehouse load job
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

# One listing card's outer HTML. Never persisted.
ListingFragment = str

CSV_HEADER = ["Title", "Location", "Description", "ExperienceLevel", "URL"]


class JobRecord(BaseModel):
    """Structured job listing extracted from a single listing fragment.

    Records are immutable once constructed. A record may still be
    incomplete (empty title, location or url) when a selector silently
    matched nothing; callers must check is_complete() before persisting.
    """

    title: str = Field("", description="Job title")
    location: str = Field("", description="Job location")
    description: str = Field("", description="Job description (placeholder until detail pages are scraped)")
    experience_level: str = Field("", description="Experience level, e.g. 'Early career'")
    url: str = Field("", description="Link to the job posting as found on the listing")

    model_config = {
        "frozen": True,
        "json_schema_extra": {"example": {
            "title": "Software Engineer",
            "location": "Austin, TX",
            "description": "to be implemented",
            "experience_level": "Early career",
            "url": "/jobs/123",
        }},
    }

    def is_complete(self) -> bool:
        """Return True if title, location and url are all non-empty."""
        return all(value.strip() for value in (self.title, self.location, self.url))

    def as_row(self) -> List[str]:
        """Return the record as a tabular row in CSV_HEADER order."""
        return [self.title, self.location, self.description, self.experience_level, self.url]

    def as_document(self) -> Dict[str, str]:
        """Return the record as a JSON-serialisable document."""
        return self.model_dump()


@dataclass
class PageCursor:
    """Current position in the paginated listing.

    Attributes:
        page_number: 1-based result page number
        url: Fully built URL for page_number
        has_next: False once the page reported its "next" control disabled
    """

    page_number: int
    url: str
    has_next: bool = True

    def __post_init__(self):
        if self.page_number < 1:
            raise ValueError(f"page_number must be >= 1, got: {self.page_number}")

    @classmethod
    def start(cls, url_template: str, page_number: int = 1) -> "PageCursor":
        """Build the cursor for the first page to load."""
        return cls(page_number=page_number, url=url_template.format(page=page_number))

    def advance(self, url_template: str) -> "PageCursor":
        """Return the cursor for the following page."""
        next_page = self.page_number + 1
        return PageCursor(page_number=next_page, url=url_template.format(page=next_page))


class LoadJobState(str, Enum):
    """Lifecycle states of a warehouse load job."""

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class LoadJobHandle:
    """Handle for one warehouse ingestion job.

    Attributes:
        job_id: Warehouse-assigned job identifier
        state: Current state; SUCCEEDED and FAILED are terminal
        reason: Failure reason reported by the warehouse, if any
        output_rows: Number of rows loaded, when reported
    """

    job_id: str
    state: LoadJobState = LoadJobState.PENDING
    reason: Optional[str] = None
    output_rows: Optional[int] = None

    @property
    def is_terminal(self) -> bool:
        return self.state in (LoadJobState.SUCCEEDED, LoadJobState.FAILED)
