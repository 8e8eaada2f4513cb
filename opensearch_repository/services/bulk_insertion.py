import logging
import threading
from typing import Any, Dict, Iterable, List, Optional

from opensearchpy import OpenSearch
from opensearchpy.exceptions import SerializationError, TransportError

from ..dtos.bulk_item import BulkItem
from ..dtos.bulk_outcome import BulkItemFailure, BulkOutcome
from ..exceptions import BulkIndexerError
from ..opensearch.abstract_classes.document import (
    OpenSearchDocumentAble,
    serialize_document,
)
from ..opensearch.bulk_indexer import BulkIndexer


class BulkOutcomeTracker:
    """Thread-safe per-item accounting for one bulk insertion.

    Callbacks fire on bulk worker threads, so every update goes through a lock.
    """

    def __init__(self, index_name: str):
        self.index_name = index_name
        self._lock = threading.Lock()
        self.num_flushed = 0
        self.num_failed = 0
        self.num_dropped = 0
        self.failures: List[BulkItemFailure] = []

    def record_success(self) -> None:
        with self._lock:
            self.num_flushed += 1

    def record_failure(self, failure: BulkItemFailure) -> None:
        with self._lock:
            self.num_failed += 1
            self.failures.append(failure)

    def record_dropped(self) -> None:
        with self._lock:
            self.num_dropped += 1

    def outcome(self) -> BulkOutcome:
        with self._lock:
            return BulkOutcome(
                index_name=self.index_name,
                num_flushed=self.num_flushed,
                num_failed=self.num_failed,
                num_dropped=self.num_dropped,
                failures=list(self.failures),
            )


def describe_failure(
    item: BulkItem,
    response_item: Dict[str, Any],
    error: Optional[BaseException],
) -> BulkItemFailure:
    """Build failure detail from the engine's item error or the raised exception."""
    engine_error = response_item.get("error")
    if error is None and isinstance(engine_error, dict):
        return BulkItemFailure(
            document_id=item.document_id,
            error_type=engine_error.get("type") or "unknown",
            reason=engine_error.get("reason"),
        )

    if error is not None:
        return BulkItemFailure(
            document_id=item.document_id,
            error_type=type(error).__name__,
            reason=str(error),
        )

    return BulkItemFailure(
        document_id=item.document_id,
        reason=str(engine_error) if engine_error else None,
    )


class BulkInsertion:
    """Index many documents through a ``BulkIndexer`` on a best-effort basis.

    A failing item never stops the others. ``insert`` does not raise for
    per-item failures: they are logged one by one, summarized once the
    indexer is closed, and returned as a ``BulkOutcome``.
    """

    def __init__(
        self,
        client: OpenSearch,
        logger: logging.Logger | None = None,
        num_workers: int = 4,
        flush_bytes: int = 5_000_000,
        flush_interval: float = 30.0,
        add_timeout: float = 5.0,
        request_timeout: Optional[float] = None,
    ):
        self._client = client
        self._logger = logger or logging.getLogger(__name__)
        self._num_workers = num_workers
        self._flush_bytes = flush_bytes
        self._flush_interval = flush_interval
        self._add_timeout = add_timeout
        self._request_timeout = request_timeout

    def open_indexer(self, index_name: str) -> BulkIndexer:
        """Return a new bulk indexer bound to ``index_name``."""
        return BulkIndexer(
            self._client,
            index_name,
            num_workers=self._num_workers,
            flush_bytes=self._flush_bytes,
            flush_interval=self._flush_interval,
            request_timeout=self._request_timeout,
        )

    def insert(
        self, index_name: str, content_list: Iterable[OpenSearchDocumentAble]
    ) -> BulkOutcome:
        """Index every document of ``content_list`` into ``index_name``.

        Args:
            index_name (str): Target index.
            content_list (Iterable): Documents satisfying ``OpenSearchDocumentAble``.

        Returns:
            BulkOutcome: Counters and per-item failure detail. Items dropped
            before reaching the engine are counted in ``num_dropped`` only.
        """
        tracker = BulkOutcomeTracker(index_name)
        contents = list(content_list)
        if not contents:
            return tracker.outcome()

        indexer = self.open_indexer(index_name)

        try:
            for content in contents:
                self._add(indexer, tracker, index_name, content)
        finally:
            # Close the indexer and flush remaining items
            self._close(indexer, index_name)

        # Report the indexer statistics
        stats = indexer.stats()
        if stats.num_failed > 0:
            self._logger.error(
                "inserting some document failed",
                extra={
                    "index_name": index_name,
                    "num_flush": stats.num_flushed,
                    "num_failed": stats.num_failed,
                },
            )
        else:
            self._logger.info(
                "successfully insert bulk document",
                extra={"index_name": index_name, "num_flush": stats.num_flushed},
            )

        outcome = tracker.outcome()
        if outcome.num_dropped:
            self._logger.warning(
                "some documents never reached the bulk indexer",
                extra={"index_name": index_name, "num_dropped": outcome.num_dropped},
            )
        return outcome

    def _close(self, indexer: BulkIndexer, index_name: str) -> None:
        try:
            indexer.close()
        except (BulkIndexerError, TransportError) as exc:
            self._logger.error(str(exc), extra={"index_name": index_name})
        except Exception as exc:
            self._logger.exception(
                f"bulk indexer failed while closing: {exc}",
                extra={"index_name": index_name},
            )

    def _add(
        self,
        indexer: BulkIndexer,
        tracker: BulkOutcomeTracker,
        index_name: str,
        content: OpenSearchDocumentAble,
    ) -> None:
        doc_id = content.get_id()
        context = {"index_name": index_name, "doc_id": doc_id}

        try:
            body = self._client.transport.serializer.dumps(serialize_document(content))
        except (SerializationError, ValueError, TypeError) as exc:
            # pydantic reports unserializable values as ValueError subclasses
            self._logger.error(str(exc), extra=context)
            tracker.record_dropped()
            return

        def on_success(item: BulkItem, response_item: Dict[str, Any]) -> None:
            tracker.record_success()
            self._logger.info("successfully insert doc content", extra=context)

        def on_failure(
            item: BulkItem,
            response_item: Dict[str, Any],
            error: Optional[BaseException],
        ) -> None:
            failure = describe_failure(item, response_item, error)
            tracker.record_failure(failure)
            self._logger.error(
                failure.reason or "inserting document failed",
                extra={
                    **context,
                    "error_type": failure.error_type,
                    "error_reason": failure.reason,
                },
            )

        item = BulkItem(
            index=index_name,
            document_id=doc_id,
            body=body,
            action="index",
            on_success=on_success,
            on_failure=on_failure,
        )

        try:
            indexer.add(item, timeout=self._add_timeout)
        except BulkIndexerError as exc:
            self._logger.error(str(exc), extra=context)
            tracker.record_dropped()
