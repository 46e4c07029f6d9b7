"""Per-record JSON document sink."""

import json
import re
from typing import Set

from careers_crawler.domain.models import JobRecord
from careers_crawler.logging import get_logger

from .base import RecordSink
from .exceptions import SinkOpenError, SinkWriteError

logger = get_logger(__name__, component="sink")

_UNSAFE_FILENAME_CHARS = re.compile(r"[\s/\\]")


def document_filename(title: str) -> str:
    """Derive a file name from a job title.

    Whitespace and path separators become underscores. Listings that share
    a title map to the same name.

    Example:
        >>> document_filename("Data Engineer / Analyst")
        'Data_Engineer___Analyst.json'
    """
    return _UNSAFE_FILENAME_CHARS.sub("_", title.strip()) + ".json"


class JsonRecordSink(RecordSink):
    """Writes each record to its own UTF-8 JSON file inside a directory.

    A later record whose title derives the same file name overwrites the
    earlier file; this is logged as a warning.
    """

    def __init__(self, destination) -> None:
        super().__init__(destination)
        self._names_written: Set[str] = set()

    def open(self) -> None:
        if self._opened:
            return

        try:
            self.destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SinkOpenError(
                f"Failed to create output directory {self.destination}: {e}",
                destination=str(self.destination),
            ) from e

        self._opened = True
        self.records_written = 0
        self._names_written.clear()
        logger.info(
            "Opened JSON sink",
            extra={"event": "sink.opened", "destination": str(self.destination)},
        )

    def write(self, record: JobRecord) -> None:
        if not self._opened:
            raise SinkWriteError("Sink is not open", destination=str(self.destination))

        filename = document_filename(record.title)
        path = self.destination / filename

        if filename in self._names_written or path.exists():
            logger.warning(
                "Overwriting existing record file",
                extra={"event": "sink.write.overwrite", "file": str(path), "title": record.title},
            )

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(record.as_document(), f, ensure_ascii=False, indent=2)
        except (OSError, TypeError, ValueError) as e:
            raise SinkWriteError(
                f"Failed to write record file {path}: {e}", destination=str(path)
            ) from e

        self._names_written.add(filename)
        self.records_written += 1

    def close(self) -> None:
        if not self._opened:
            return

        self._opened = False
        logger.info(
            "Closed JSON sink",
            extra={
                "event": "sink.closed",
                "destination": str(self.destination),
                "records_written": self.records_written,
                "files": len(self._names_written),
            },
        )
