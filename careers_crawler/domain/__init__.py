"""Domain models for the Careers Crawler."""

from .models import JobRecord, ListingFragment, LoadJobHandle, LoadJobState, PageCursor

__all__ = ["JobRecord", "ListingFragment", "PageCursor", "LoadJobHandle", "LoadJobState"]
