"""Exception hierarchy for the OpenSearch repository.

Errors raised by the engine client itself (``opensearchpy.TransportError``
and friends) are not wrapped when the request never reached the engine;
they propagate to the caller unchanged.
"""

from __future__ import annotations


class OpenSearchRepositoryError(Exception):
    """Base class for all repository exceptions."""


class OperationFailedError(OpenSearchRepositoryError):
    """Raised when the engine answered a request with an error status."""

    def __init__(self, operation: str, status_code: int | None = None):
        self.operation = operation
        self.status_code = status_code
        super().__init__(f"{operation} failed")


class InvalidQueryError(OperationFailedError):
    """Raised when a search or suggest request is rejected by the engine."""

    def __init__(self, status_code: int | None = None):
        super().__init__("query", status_code)
        self.args = ("invalid query",)


class MalformedResponseError(OpenSearchRepositoryError):
    """Raised when a response envelope lacks the keys the repository reads."""


class RepositoryTimeoutError(OpenSearchRepositoryError, TimeoutError):
    """Raised when the engine did not answer within the request budget."""


class BulkIndexerError(OpenSearchRepositoryError):
    """Base class for bulk indexer channel errors."""


class BulkIndexerClosedError(BulkIndexerError):
    """Raised when items are added to, or close is called on, a closed indexer."""


class BulkIndexerFullError(BulkIndexerError):
    """Raised when no worker slot frees up before the add timeout."""


def engine_status_code(error: BaseException) -> int | None:
    """Return the HTTP status the engine answered with, if it answered at all.

    opensearch-py reports connection-level failures with a non-numeric
    status such as ``"N/A"`` or ``"TIMEOUT"``.
    """
    status = getattr(error, "status_code", None)
    if isinstance(status, int) and not isinstance(status, bool):
        return status
    return None
