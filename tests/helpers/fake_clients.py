"""Stand-ins for the Cloud Storage and BigQuery clients."""

from typing import Dict, List, Optional


class FakeBlob:
    def __init__(self, bucket: "FakeBucket", name: str):
        self.bucket = bucket
        self.name = name

    def upload_from_filename(self, filename: str, content_type: Optional[str] = None) -> None:
        client = self.bucket.client
        if client.upload_error is not None:
            raise client.upload_error
        with open(filename, "rb") as f:
            client.objects[(self.bucket.name, self.name)] = f.read()
        client.content_types[(self.bucket.name, self.name)] = content_type


class FakeBucket:
    def __init__(self, client: "FakeStorageClient", name: str):
        self.client = client
        self.name = name

    def blob(self, name: str) -> FakeBlob:
        return FakeBlob(self, name)


class FakeStorageClient:
    """Records uploaded objects as bytes keyed by (bucket, object_name)."""

    def __init__(self, upload_error: Optional[Exception] = None):
        self.upload_error = upload_error
        self.objects: Dict[tuple, bytes] = {}
        self.content_types: Dict[tuple, Optional[str]] = {}
        self.closed = False
        self.project = None

    def __call__(self, project=None):
        # Used directly as the publisher's client_factory
        self.project = project
        return self

    def bucket(self, name: str) -> FakeBucket:
        return FakeBucket(self, name)

    def close(self) -> None:
        self.closed = True


class FakeLoadJob:
    """Load job whose state advances through a scripted list on each reload()."""

    def __init__(
        self,
        job_id: str = "job-1",
        states: Optional[List[str]] = None,
        error_result: Optional[dict] = None,
        errors: Optional[List[dict]] = None,
        output_rows: Optional[int] = 2,
        reload_error: Optional[Exception] = None,
    ):
        self.job_id = job_id
        self._states = list(states or ["DONE"])
        self.state = "PENDING"
        self.error_result = error_result
        self.errors = errors
        self.output_rows = output_rows
        self.reload_error = reload_error
        self.reload_calls = 0

    def reload(self) -> None:
        self.reload_calls += 1
        if self.reload_error is not None:
            raise self.reload_error
        if self._states:
            self.state = self._states.pop(0)


class FakeBigQueryClient:
    """Returns a prepared FakeLoadJob from load_table_from_uri()."""

    def __init__(self, job: Optional[FakeLoadJob] = None, submit_error: Optional[Exception] = None):
        self.job = job or FakeLoadJob()
        self.submit_error = submit_error
        self.submitted: List[dict] = []
        self.closed = False
        self.project = None
        self.location = None

    def __call__(self, project=None, location=None):
        self.project = project
        self.location = location
        return self

    def load_table_from_uri(self, source_uri, destination, job_config=None):
        if self.submit_error is not None:
            raise self.submit_error
        self.submitted.append(
            {"source_uri": source_uri, "destination": destination, "job_config": job_config}
        )
        return self.job

    def close(self) -> None:
        self.closed = True
