class SourceError(Exception):
    """Base class for errors raised by source adapters."""


class TransportError(SourceError, ConnectionError):
    """A request completed with a non-success HTTP status."""

    def __init__(self, url: str, status: int) -> None:
        super().__init__(f"Request to {url} failed with status {status}")
        self.url = url
        self.status = status


class UnsupportedOperation(SourceError, NotImplementedError):
    """An optional operation was requested from a source that lacks it."""

    def __init__(self, source_id: int, operation: str) -> None:
        super().__init__(f"Source {source_id} does not support {operation!r}")
        self.source_id = source_id
        self.operation = operation


class SourceNotFound(SourceError, LookupError):
    """No source is registered under the requested id."""
