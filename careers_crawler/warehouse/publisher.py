"""Uploads the crawl artifact to Google Cloud Storage."""

from pathlib import Path
from typing import Callable, Optional

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage

from careers_crawler.logging import get_logger

from .exceptions import UploadError

logger = get_logger(__name__, component="warehouse")


class BatchPublisher:
    """
    Publishes a local file as a Cloud Storage object.

    The object is overwritten if it already exists. A storage client is
    created per call and closed before returning.
    """

    def __init__(
        self,
        project: Optional[str] = None,
        client_factory: Optional[Callable[..., storage.Client]] = None,
    ):
        """
        Args:
            project: Cloud project for the storage client (None = client default)
            client_factory: Callable returning a storage client (injectable for tests)
        """
        self.project = project
        self._client_factory = client_factory or storage.Client

    def publish(self, local_path: Path | str, bucket: str, object_name: str) -> str:
        """
        Upload local_path to gs://bucket/object_name.

        Args:
            local_path: File to upload
            bucket: Destination bucket name
            object_name: Destination object name

        Returns:
            The gs:// URI of the uploaded object

        Raises:
            UploadError: File missing, client creation failed, or the upload failed
        """
        path = Path(local_path)
        uri = f"gs://{bucket}/{object_name}"

        if not path.is_file():
            raise UploadError(f"Artifact not found: {path}", bucket=bucket, object_name=object_name)

        logger.info(
            "Uploading artifact",
            extra={
                "event": "warehouse.upload.started",
                "local_path": str(path),
                "uri": uri,
                "size_bytes": path.stat().st_size,
            },
        )

        try:
            client = self._client_factory(project=self.project)
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            raise UploadError(
                f"Failed to create storage client: {e}", bucket=bucket, object_name=object_name
            ) from e

        try:
            blob = client.bucket(bucket).blob(object_name)
            blob.upload_from_filename(str(path), content_type="text/csv")
        except (GoogleAPIError, GoogleAuthError, OSError, ValueError) as e:
            logger.error(
                f"Upload to {uri} failed: {e}",
                extra={"event": "warehouse.upload.failed", "uri": uri, "error_type": type(e).__name__},
            )
            raise UploadError(
                f"Failed to copy file to {uri}: {e}", bucket=bucket, object_name=object_name
            ) from e
        finally:
            client.close()

        logger.info("Artifact uploaded", extra={"event": "warehouse.upload.completed", "uri": uri})
        return uri
