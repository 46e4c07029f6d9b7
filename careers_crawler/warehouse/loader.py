"""Loads an uploaded CSV artifact into a BigQuery table."""

import time
from typing import Callable, Optional

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import bigquery

from careers_crawler.domain.models import LoadJobHandle, LoadJobState
from careers_crawler.logging import get_logger

from .exceptions import LoadResultError, LoadSubmitError, LoadWaitError

logger = get_logger(__name__, component="warehouse")

_TRANSPORT_ERRORS = (GoogleAPIError, GoogleAuthError, OSError)


def build_load_job_config() -> bigquery.LoadJobConfig:
    """CSV, comma-delimited, header row skipped, appended to the table."""
    return bigquery.LoadJobConfig(
        source_format=bigquery.SourceFormat.CSV,
        field_delimiter=",",
        skip_leading_rows=1,
        write_disposition=bigquery.WriteDisposition.WRITE_APPEND,
    )


class WarehouseLoader:
    """
    Submits a load job for a Cloud Storage object and polls it to completion.

    Three failure points raise distinct errors: submitting the job
    (LoadSubmitError), polling it (LoadWaitError, including timeout), and
    a job that finished with an error result (LoadResultError). None of
    them are retried.
    """

    def __init__(
        self,
        project: Optional[str] = None,
        location: Optional[str] = None,
        poll_interval: float = 2.0,
        timeout: float = 600,
        client_factory: Optional[Callable[..., bigquery.Client]] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.project = project
        self.location = location
        self.poll_interval = poll_interval
        self.timeout = timeout
        self._client_factory = client_factory or bigquery.Client
        self._sleep = sleep
        self._clock = clock

    def load(self, bucket: str, object_name: str, dataset: str, table: str) -> LoadJobHandle:
        """
        Load gs://bucket/object_name into dataset.table and wait for the result.

        Returns:
            LoadJobHandle in state SUCCEEDED

        Raises:
            LoadSubmitError: Client creation or job submission failed
            LoadWaitError: Polling failed or the job did not finish within timeout
            LoadResultError: The job finished with an error result
        """
        source_uri = f"gs://{bucket}/{object_name}"
        destination = f"{dataset}.{table}"

        try:
            client = self._client_factory(project=self.project, location=self.location)
        except _TRANSPORT_ERRORS as e:
            raise LoadSubmitError(f"Failed to create BigQuery client: {e}", source_uri=source_uri) from e

        try:
            job = self._submit(client, source_uri, destination)
            handle = LoadJobHandle(job_id=job.job_id)
            self._wait(job, handle)
            return handle
        finally:
            client.close()

    def _submit(self, client, source_uri: str, destination: str):
        logger.info(
            "Submitting load job",
            extra={"event": "warehouse.load.submitting", "source_uri": source_uri, "destination": destination},
        )

        try:
            job = client.load_table_from_uri(source_uri, destination, job_config=build_load_job_config())
        except (*_TRANSPORT_ERRORS, ValueError) as e:
            logger.error(
                f"Failed to start load job: {e}",
                extra={"event": "warehouse.load.submit_failed", "error_type": type(e).__name__},
            )
            raise LoadSubmitError(f"Failed to start load job: {e}", source_uri=source_uri) from e

        logger.info(
            "Load job submitted",
            extra={"event": "warehouse.load.submitted", "job_id": job.job_id},
        )
        return job

    def _wait(self, job, handle: LoadJobHandle) -> None:
        deadline = self._clock() + self.timeout

        while True:
            try:
                job.reload()
            except _TRANSPORT_ERRORS as e:
                raise LoadWaitError(
                    f"Job {handle.job_id} did not complete successfully: {e}", job_id=handle.job_id
                ) from e

            if job.state == "DONE":
                break

            if self._clock() >= deadline:
                raise LoadWaitError(
                    f"Job {handle.job_id} still {job.state} after {self.timeout} seconds",
                    job_id=handle.job_id,
                )

            logger.debug(
                "Load job pending",
                extra={"event": "warehouse.load.polling", "job_id": handle.job_id, "state": job.state},
            )
            self._sleep(self.poll_interval)

        if job.error_result:
            handle.state = LoadJobState.FAILED
            handle.reason = job.error_result.get("message") or job.error_result.get("reason")
            logger.error(
                f"Load job {handle.job_id} completed with error: {handle.reason}",
                extra={
                    "event": "warehouse.load.failed",
                    "job_id": handle.job_id,
                    "errors": job.errors or [],
                },
            )
            raise LoadResultError(
                f"Job completed with error: {handle.reason}",
                job_id=handle.job_id,
                reason=handle.reason,
                errors=job.errors,
            )

        handle.state = LoadJobState.SUCCEEDED
        handle.output_rows = job.output_rows
        logger.info(
            "Load job completed",
            extra={
                "event": "warehouse.load.completed",
                "job_id": handle.job_id,
                "output_rows": handle.output_rows,
            },
        )
