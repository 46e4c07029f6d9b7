"""Object store and warehouse exceptions. All of them are fatal for a run."""

from typing import List, Optional


class WarehouseError(Exception):
    """Base exception for upload and load failures."""

    pass


class UploadError(WarehouseError):
    """The local artifact could not be uploaded to the object store."""

    def __init__(self, message: str, bucket: str, object_name: str) -> None:
        super().__init__(message)
        self.bucket = bucket
        self.object_name = object_name


class LoadSubmitError(WarehouseError):
    """The warehouse rejected or never received the load job."""

    def __init__(self, message: str, source_uri: str) -> None:
        super().__init__(message)
        self.source_uri = source_uri


class LoadWaitError(WarehouseError):
    """Polling the load job failed or timed out before a terminal state."""

    def __init__(self, message: str, job_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.job_id = job_id


class LoadResultError(WarehouseError):
    """The load job finished but reported a processing error."""

    def __init__(
        self,
        message: str,
        job_id: Optional[str] = None,
        reason: Optional[str] = None,
        errors: Optional[List[dict]] = None,
    ) -> None:
        super().__init__(message)
        self.job_id = job_id
        self.reason = reason
        self.errors = list(errors or [])
