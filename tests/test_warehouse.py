"""Unit tests for artifact upload and warehouse load."""

import pytest
from google.api_core.exceptions import BadRequest, Forbidden, ServiceUnavailable
from google.cloud import bigquery

from careers_crawler.domain.models import LoadJobState
from careers_crawler.warehouse import (
    BatchPublisher,
    LoadResultError,
    LoadSubmitError,
    LoadWaitError,
    UploadError,
    WarehouseLoader,
    build_load_job_config,
)
from tests.helpers import FakeBigQueryClient, FakeLoadJob, FakeStorageClient


@pytest.fixture
def artifact(tmp_path):
    path = tmp_path / "ibm_jobs.csv"
    path.write_text(
        "Title,Location,Description,ExperienceLevel,URL\n"
        "Software Engineer,\"Austin, TX\",to be implemented,Early career,/jobs/123\n",
        encoding="utf-8",
    )
    return path


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestBatchPublisher:
    """Test suite for BatchPublisher."""

    def test_uploads_file_contents(self, artifact):
        client = FakeStorageClient()
        publisher = BatchPublisher(project="proj", client_factory=client)

        uri = publisher.publish(artifact, "ibm_jobs_bucket", "ibm_jobs.csv")

        assert uri == "gs://ibm_jobs_bucket/ibm_jobs.csv"
        assert client.objects[("ibm_jobs_bucket", "ibm_jobs.csv")] == artifact.read_bytes()
        assert client.content_types[("ibm_jobs_bucket", "ibm_jobs.csv")] == "text/csv"
        assert client.project == "proj"
        assert client.closed

    def test_missing_artifact_raises_upload_error(self, tmp_path):
        client = FakeStorageClient()
        publisher = BatchPublisher(client_factory=client)

        with pytest.raises(UploadError, match="Artifact not found"):
            publisher.publish(tmp_path / "missing.csv", "bucket", "missing.csv")

        assert client.objects == {}

    def test_upload_failure_raises_upload_error(self, artifact):
        client = FakeStorageClient(upload_error=Forbidden("no access"))
        publisher = BatchPublisher(client_factory=client)

        with pytest.raises(UploadError) as exc_info:
            publisher.publish(artifact, "bucket", "obj.csv")

        assert exc_info.value.bucket == "bucket"
        assert exc_info.value.object_name == "obj.csv"
        assert client.closed

    def test_client_creation_failure(self, artifact):
        def failing_factory(project=None):
            raise OSError("no credentials file")

        with pytest.raises(UploadError, match="storage client"):
            BatchPublisher(client_factory=failing_factory).publish(artifact, "bucket", "obj.csv")


class TestWarehouseLoader:
    """Test suite for WarehouseLoader."""

    def test_load_job_config(self):
        config = build_load_job_config()

        assert config.source_format == bigquery.SourceFormat.CSV
        assert config.field_delimiter == ","
        assert config.skip_leading_rows == 1
        assert config.write_disposition == bigquery.WriteDisposition.WRITE_APPEND

    def test_successful_load(self):
        job = FakeLoadJob(job_id="job-42", states=["RUNNING", "DONE"], output_rows=7)
        client = FakeBigQueryClient(job=job)
        sleep_calls = []
        loader = WarehouseLoader(
            project="proj",
            location="US",
            poll_interval=0.5,
            client_factory=client,
            sleep=sleep_calls.append,
        )

        handle = loader.load("ibm_jobs_bucket", "ibm_jobs.csv", "ibm_jobs", "ibm_jobs_main_table")

        assert handle.job_id == "job-42"
        assert handle.state == LoadJobState.SUCCEEDED
        assert handle.output_rows == 7
        assert client.submitted[0]["source_uri"] == "gs://ibm_jobs_bucket/ibm_jobs.csv"
        assert client.submitted[0]["destination"] == "ibm_jobs.ibm_jobs_main_table"
        assert (client.project, client.location) == ("proj", "US")
        assert sleep_calls == [0.5]
        assert client.closed

    def test_submit_failure_raises_load_submit_error(self):
        client = FakeBigQueryClient(submit_error=BadRequest("dataset not found"))
        loader = WarehouseLoader(client_factory=client, sleep=lambda s: None)

        with pytest.raises(LoadSubmitError) as exc_info:
            loader.load("bucket", "obj.csv", "ds", "tbl")

        assert exc_info.value.source_uri == "gs://bucket/obj.csv"
        assert client.closed

    def test_poll_failure_raises_load_wait_error(self):
        job = FakeLoadJob(job_id="job-1", reload_error=ServiceUnavailable("backend error"))
        loader = WarehouseLoader(client_factory=FakeBigQueryClient(job=job), sleep=lambda s: None)

        with pytest.raises(LoadWaitError) as exc_info:
            loader.load("bucket", "obj.csv", "ds", "tbl")

        assert exc_info.value.job_id == "job-1"

    def test_timeout_raises_load_wait_error(self):
        clock = FakeClock()
        job = FakeLoadJob(states=["RUNNING"] * 100)
        loader = WarehouseLoader(
            timeout=10,
            poll_interval=2.0,
            client_factory=FakeBigQueryClient(job=job),
            sleep=clock.advance,
            clock=clock,
        )

        with pytest.raises(LoadWaitError, match="after 10 seconds"):
            loader.load("bucket", "obj.csv", "ds", "tbl")

        assert job.reload_calls == 6

    def test_error_result_raises_load_result_error(self):
        job = FakeLoadJob(
            job_id="job-9",
            states=["DONE"],
            error_result={"reason": "invalid", "message": "Too many errors"},
            errors=[{"reason": "invalid", "message": "CSV table references column position 5"}],
        )
        loader = WarehouseLoader(client_factory=FakeBigQueryClient(job=job), sleep=lambda s: None)

        with pytest.raises(LoadResultError) as exc_info:
            loader.load("bucket", "obj.csv", "ds", "tbl")

        assert exc_info.value.job_id == "job-9"
        assert exc_info.value.reason == "Too many errors"
        assert len(exc_info.value.errors) == 1

    def test_job_finishing_after_deadline_is_not_a_timeout(self):
        clock = FakeClock()
        job = FakeLoadJob(states=["RUNNING", "DONE"])
        loader = WarehouseLoader(
            timeout=1,
            poll_interval=5.0,
            client_factory=FakeBigQueryClient(job=job),
            sleep=clock.advance,
            clock=clock,
        )

        handle = loader.load("bucket", "obj.csv", "ds", "tbl")

        assert handle.state == LoadJobState.SUCCEEDED
