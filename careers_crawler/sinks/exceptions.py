"""Record sink exceptions.

Open and close failures are fatal for a run; a failure writing one record
is logged and counted by the caller, and the crawl continues.
"""


class PersistError(Exception):
    """Base exception for all record sink errors."""

    def __init__(self, message: str, destination: str | None = None) -> None:
        super().__init__(message)
        self.destination = destination


class SinkOpenError(PersistError):
    """The destination could not be created or opened."""

    pass


class SinkWriteError(PersistError):
    """A single record could not be written."""

    pass


class SinkCloseError(PersistError):
    """Flushing or closing the destination failed."""

    pass
