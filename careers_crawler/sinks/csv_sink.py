"""Tabular (CSV) record sink."""

import csv
from typing import IO, Optional

from careers_crawler.domain.models import CSV_HEADER, JobRecord
from careers_crawler.logging import get_logger

from .base import RecordSink
from .exceptions import SinkCloseError, SinkOpenError, SinkWriteError

logger = get_logger(__name__, component="sink")


class CsvRecordSink(RecordSink):
    """Writes all records as rows of a single UTF-8 CSV file.

    The header row is written once at open(). Fields are quoted only
    when they contain a delimiter, quote or newline, and rows end in
    '\\n', so identical input produces byte-identical files.
    """

    def __init__(self, destination, header=None) -> None:
        super().__init__(destination)
        self.header = list(header or CSV_HEADER)
        self._file: Optional[IO[str]] = None
        self._writer = None

    def open(self) -> None:
        if self._opened:
            return

        try:
            self.destination.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.destination, "w", encoding="utf-8", newline="")
            self._writer = csv.writer(self._file, lineterminator="\n")
            self._writer.writerow(self.header)
        except OSError as e:
            self._release()
            raise SinkOpenError(
                f"Failed to create output file {self.destination}: {e}",
                destination=str(self.destination),
            ) from e

        self._opened = True
        self.records_written = 0
        logger.info(
            "Opened CSV sink",
            extra={"event": "sink.opened", "destination": str(self.destination)},
        )

    def write(self, record: JobRecord) -> None:
        if not self._opened:
            raise SinkWriteError("Sink is not open", destination=str(self.destination))

        try:
            self._writer.writerow(record.as_row())
        except (OSError, csv.Error) as e:
            raise SinkWriteError(
                f"Failed to write record '{record.title}': {e}",
                destination=str(self.destination),
            ) from e

        self.records_written += 1

    def flush(self) -> None:
        if self._file is None:
            return
        try:
            self._file.flush()
        except OSError as e:
            raise SinkWriteError(
                f"Failed to flush {self.destination}: {e}", destination=str(self.destination)
            ) from e

    def close(self) -> None:
        if not self._opened:
            return

        self._opened = False
        try:
            self._file.flush()
            self._file.close()
        except OSError as e:
            raise SinkCloseError(
                f"Failed to close output file {self.destination}: {e}",
                destination=str(self.destination),
            ) from e
        finally:
            self._file = None
            self._writer = None

        logger.info(
            "Closed CSV sink",
            extra={
                "event": "sink.closed",
                "destination": str(self.destination),
                "records_written": self.records_written,
            },
        )

    def _release(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            except OSError as e:
                logger.warning(
                    "Failed to release output file",
                    extra={"event": "sink.release.failed", "error": str(e)},
                )
        self._file = None
        self._writer = None
