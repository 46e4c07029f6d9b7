"""Unit tests for record sinks."""

import json
from unittest.mock import patch

import pytest

from careers_crawler.config.models import OutputConfig
from careers_crawler.domain.models import JobRecord
from careers_crawler.sinks import (
    CsvRecordSink,
    JsonRecordSink,
    SinkOpenError,
    SinkWriteError,
    document_filename,
    get_sink,
)


@pytest.fixture
def record():
    return JobRecord(
        title="Software Engineer",
        location="Austin, TX",
        description="to be implemented",
        experience_level="Early career",
        url="/jobs/123",
    )


class TestCsvRecordSink:
    """Test suite for CsvRecordSink."""

    def test_writes_header_and_row(self, tmp_path, record):
        path = tmp_path / "jobs.csv"

        with CsvRecordSink(path) as sink:
            sink.write(record)

        assert path.read_bytes() == (
            b"Title,Location,Description,ExperienceLevel,URL\n"
            b'Software Engineer,"Austin, TX",to be implemented,Early career,/jobs/123\n'
        )
        assert sink.records_written == 1

    def test_empty_crawl_produces_header_only(self, tmp_path):
        path = tmp_path / "jobs.csv"

        with CsvRecordSink(path):
            pass

        assert path.read_text(encoding="utf-8") == "Title,Location,Description,ExperienceLevel,URL\n"

    def test_quotes_embedded_quotes_and_newlines(self, tmp_path):
        path = tmp_path / "jobs.csv"
        record = JobRecord(title='Lead "Ops"', location="Line1\nLine2", url="/j")

        with CsvRecordSink(path) as sink:
            sink.write(record)

        body = path.read_text(encoding="utf-8").split("\n", 1)[1]
        assert body == '"Lead ""Ops""","Line1\nLine2",,,/j\n'

    def test_identical_input_is_byte_identical(self, tmp_path, record):
        first, second = tmp_path / "a.csv", tmp_path / "b.csv"

        for path in (first, second):
            with CsvRecordSink(path) as sink:
                sink.write(record)
                sink.write(record)

        assert first.read_bytes() == second.read_bytes()

    def test_non_ascii_is_written_as_utf8(self, tmp_path):
        path = tmp_path / "jobs.csv"

        with CsvRecordSink(path) as sink:
            sink.write(JobRecord(title="Ingénieur", location="Zürich", url="/j"))

        assert "Ingénieur,Zürich" in path.read_bytes().decode("utf-8")

    def test_creates_parent_directories(self, tmp_path, record):
        path = tmp_path / "out" / "nested" / "jobs.csv"

        with CsvRecordSink(path) as sink:
            sink.write(record)

        assert path.exists()

    def test_open_failure_raises_sink_open_error(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")

        with pytest.raises(SinkOpenError):
            CsvRecordSink(blocker / "jobs.csv").open()

    def test_write_before_open_raises(self, tmp_path, record):
        with pytest.raises(SinkWriteError, match="not open"):
            CsvRecordSink(tmp_path / "jobs.csv").write(record)

    def test_close_is_idempotent(self, tmp_path, record):
        sink = CsvRecordSink(tmp_path / "jobs.csv")
        sink.open()
        sink.write(record)

        sink.close()
        sink.close()

        assert not sink.is_open

    def test_close_without_open_is_noop(self, tmp_path):
        CsvRecordSink(tmp_path / "jobs.csv").close()

    def test_flush_makes_rows_visible_before_close(self, tmp_path, record):
        path = tmp_path / "jobs.csv"
        sink = CsvRecordSink(path)
        sink.open()
        sink.write(record)

        sink.flush()

        assert path.read_text(encoding="utf-8").count("\n") == 2
        sink.close()

    def test_reopen_truncates_previous_artifact(self, tmp_path, record):
        path = tmp_path / "jobs.csv"
        with CsvRecordSink(path) as sink:
            sink.write(record)
            sink.write(record)

        with CsvRecordSink(path) as sink:
            sink.write(record)

        assert path.read_text(encoding="utf-8").count("\n") == 2


class TestJsonRecordSink:
    """Test suite for JsonRecordSink."""

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Software Engineer", "Software_Engineer.json"),
            ("Data Engineer / Analyst", "Data_Engineer___Analyst.json"),
            ("QA\\Test\tLead", "QA_Test_Lead.json"),
        ],
    )
    def test_document_filename(self, title, expected):
        assert document_filename(title) == expected

    def test_writes_one_document_per_record(self, tmp_path, record):
        out_dir = tmp_path / "jobs"

        with JsonRecordSink(out_dir) as sink:
            sink.write(record)
            sink.write(JobRecord(title="Data Scientist", location="Remote", url="/jobs/9"))

        assert sorted(p.name for p in out_dir.iterdir()) == [
            "Data_Scientist.json",
            "Software_Engineer.json",
        ]
        document = json.loads((out_dir / "Software_Engineer.json").read_text(encoding="utf-8"))
        assert document == {
            "title": "Software Engineer",
            "location": "Austin, TX",
            "description": "to be implemented",
            "experience_level": "Early career",
            "url": "/jobs/123",
        }
        assert sink.records_written == 2

    def test_same_title_overwrites_and_warns(self, tmp_path, record):
        out_dir = tmp_path / "jobs"
        later = JobRecord(title=record.title, location="Remote", url="/jobs/456")

        with patch("careers_crawler.sinks.json_sink.logger") as mock_logger:
            with JsonRecordSink(out_dir) as sink:
                sink.write(record)
                sink.write(later)

        files = list(out_dir.iterdir())
        assert len(files) == 1
        assert json.loads(files[0].read_text(encoding="utf-8"))["url"] == "/jobs/456"
        overwrite_calls = [
            c for c in mock_logger.warning.call_args_list
            if c.kwargs["extra"]["event"] == "sink.write.overwrite"
        ]
        assert len(overwrite_calls) == 1

    def test_write_before_open_raises(self, tmp_path, record):
        with pytest.raises(SinkWriteError):
            JsonRecordSink(tmp_path / "jobs").write(record)

    def test_open_failure_raises_sink_open_error(self, tmp_path):
        blocker = tmp_path / "jobs"
        blocker.write_text("not a directory")

        with pytest.raises(SinkOpenError):
            JsonRecordSink(blocker).open()


class TestGetSink:
    """Test suite for the sink factory."""

    def test_csv_sink_by_default(self):
        sink = get_sink(OutputConfig())

        assert isinstance(sink, CsvRecordSink)
        assert str(sink.artifact_path) == "ibm_jobs.csv"

    def test_json_sink(self, tmp_path):
        sink = get_sink(OutputConfig(format="json", path=str(tmp_path / "docs")))

        assert isinstance(sink, JsonRecordSink)
        assert sink.artifact_path == tmp_path / "docs"

    def test_factory_does_not_open(self, tmp_path):
        sink = get_sink(OutputConfig(path=str(tmp_path / "jobs.csv")))

        assert not sink.is_open
        assert not (tmp_path / "jobs.csv").exists()
