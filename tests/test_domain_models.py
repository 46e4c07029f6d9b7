"""Unit tests for domain models."""

import pytest
from pydantic import ValidationError

from careers_crawler.domain.models import (
    CSV_HEADER,
    JobRecord,
    LoadJobHandle,
    LoadJobState,
    PageCursor,
)


class TestJobRecord:
    """Test suite for JobRecord."""

    def test_complete_record(self):
        record = JobRecord(
            title="Software Engineer",
            location="Austin, TX",
            description="to be implemented",
            experience_level="Early career",
            url="/jobs/123",
        )

        assert record.is_complete()

    @pytest.mark.parametrize("missing", ["title", "location", "url"])
    def test_record_missing_required_field_is_incomplete(self, missing):
        values = {"title": "Engineer", "location": "Remote", "url": "/jobs/1"}
        values[missing] = "   "

        assert not JobRecord(**values).is_complete()

    def test_empty_experience_level_is_still_complete(self):
        """Only title, location and url are required for persistence."""
        record = JobRecord(title="Engineer", location="Remote", url="/jobs/1")

        assert record.experience_level == ""
        assert record.is_complete()

    def test_as_row_follows_csv_header_order(self):
        record = JobRecord(
            title="T", location="L", description="D", experience_level="E", url="U"
        )

        assert CSV_HEADER == ["Title", "Location", "Description", "ExperienceLevel", "URL"]
        assert record.as_row() == ["T", "L", "D", "E", "U"]

    def test_as_document(self):
        record = JobRecord(title="T", location="L", url="U")

        assert record.as_document() == {
            "title": "T",
            "location": "L",
            "description": "",
            "experience_level": "",
            "url": "U",
        }

    def test_record_is_immutable(self):
        record = JobRecord(title="T", location="L", url="U")

        with pytest.raises(ValidationError):
            record.title = "Changed"


class TestPageCursor:
    """Test suite for PageCursor."""

    def test_start_builds_first_page_url(self):
        cursor = PageCursor.start("https://example.com/search?p={page}")

        assert cursor.page_number == 1
        assert cursor.url == "https://example.com/search?p=1"
        assert cursor.has_next is True

    def test_start_at_custom_page(self):
        cursor = PageCursor.start("https://example.com/search?p={page}", page_number=4)

        assert cursor.url == "https://example.com/search?p=4"

    def test_advance_increments_page(self):
        template = "https://example.com/search?p={page}"
        cursor = PageCursor.start(template).advance(template).advance(template)

        assert cursor.page_number == 3
        assert cursor.url == "https://example.com/search?p=3"

    def test_page_number_must_be_positive(self):
        with pytest.raises(ValueError, match="page_number must be >= 1"):
            PageCursor(page_number=0, url="https://example.com")


class TestLoadJobHandle:
    """Test suite for LoadJobHandle."""

    def test_new_handle_is_pending(self):
        handle = LoadJobHandle(job_id="job-1")

        assert handle.state == LoadJobState.PENDING
        assert not handle.is_terminal

    @pytest.mark.parametrize("state", [LoadJobState.SUCCEEDED, LoadJobState.FAILED])
    def test_terminal_states(self, state):
        assert LoadJobHandle(job_id="job-1", state=state).is_terminal
