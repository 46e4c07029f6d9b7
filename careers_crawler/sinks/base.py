"""Abstract record sink.

Sinks own their destination handle from open() to close(). Writes from a
crawl are strictly sequential, so sinks do no internal locking.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from careers_crawler.domain.models import JobRecord


class RecordSink(ABC):
    """Base class for record persistence strategies.

    Attributes:
        destination: File (tabular) or directory (per-record) path
        records_written: Number of records successfully written since open()
    """

    def __init__(self, destination: Path | str) -> None:
        self.destination = Path(destination)
        self.records_written = 0
        self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    @property
    def artifact_path(self) -> Path:
        """Path of the durable artifact produced by this sink."""
        return self.destination

    @abstractmethod
    def open(self) -> None:
        """Prepare the destination.

        Raises:
            SinkOpenError: Destination cannot be created
        """

    @abstractmethod
    def write(self, record: JobRecord) -> None:
        """Persist one record.

        Raises:
            SinkWriteError: This record could not be written
        """

    def flush(self) -> None:
        """Push buffered writes to durable storage."""

    @abstractmethod
    def close(self) -> None:
        """Flush and release the destination. Idempotent.

        Raises:
            SinkCloseError: Final flush or close failed
        """

    def __enter__(self) -> "RecordSink":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
