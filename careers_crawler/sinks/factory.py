"""Factory for the configured record sink."""

from careers_crawler.config.models import OutputConfig, OutputFormat
from careers_crawler.logging import get_logger

from .base import RecordSink
from .csv_sink import CsvRecordSink
from .json_sink import JsonRecordSink

logger = get_logger(__name__, component="sink")

_SINKS = {
    OutputFormat.CSV.value: CsvRecordSink,
    OutputFormat.JSON.value: JsonRecordSink,
}


def get_sink(output_config: OutputConfig) -> RecordSink:
    """Instantiate the sink selected by output.format.

    Args:
        output_config: Output configuration (format and path)

    Returns:
        Unopened RecordSink

    Raises:
        ValueError: If the format is not supported
    """
    fmt = output_config.format
    fmt = fmt.value if isinstance(fmt, OutputFormat) else str(fmt).lower()

    sink_class = _SINKS.get(fmt)
    if sink_class is None:
        supported = ", ".join(sorted(_SINKS))
        raise ValueError(f"Unknown output format: {output_config.format}. Supported formats: {supported}")

    logger.debug(
        "Creating record sink",
        extra={"format": fmt, "destination": output_config.path, "sink_class": sink_class.__name__},
    )
    return sink_class(output_config.path)
