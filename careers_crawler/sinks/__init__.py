"""Record sinks: durable persistence of extracted job records.

Two shapes share the RecordSink contract (open / write / flush / close):
- CsvRecordSink: one row per record in a single CSV file
- JsonRecordSink: one JSON document per record in a directory

Use the factory to build the configured sink:
    from careers_crawler.sinks import get_sink
    with get_sink(app_config.output) as sink:
        sink.write(record)
"""

from .base import RecordSink
from .csv_sink import CsvRecordSink
from .exceptions import PersistError, SinkCloseError, SinkOpenError, SinkWriteError
from .factory import get_sink
from .json_sink import JsonRecordSink, document_filename

__all__ = [
    "RecordSink",
    "CsvRecordSink",
    "JsonRecordSink",
    "document_filename",
    "get_sink",
    # Exceptions
    "PersistError",
    "SinkOpenError",
    "SinkWriteError",
    "SinkCloseError",
]
