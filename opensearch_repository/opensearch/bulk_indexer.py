import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import List, Optional

from opensearchpy import OpenSearch, helpers

from ..dtos.bulk_item import BulkItem
from ..exceptions import BulkIndexerClosedError, BulkIndexerFullError

logger = logging.getLogger(__name__)


@dataclass
class BulkIndexerStats:
    """Counters kept by a bulk indexer; stable once the indexer is closed."""

    num_added: int = 0
    num_flushed: int = 0
    num_failed: int = 0
    num_requests: int = 0


class BulkIndexer:
    """Buffer bulk items and flush them to OpenSearch from a worker pool.

    Items are grouped into batches of at most ``flush_bytes`` of document
    body, or whatever is buffered when ``flush_interval`` elapses. Each batch
    is sent with ``opensearchpy.helpers.streaming_bulk`` on a worker thread,
    and every item gets exactly one ``on_success`` or ``on_failure`` call
    from that thread. Items of different batches may complete in any order.
    """

    def __init__(
        self,
        client: OpenSearch,
        index: str,
        num_workers: int = 4,
        flush_bytes: int = 5_000_000,
        flush_interval: float = 30.0,
        request_timeout: Optional[float] = None,
    ):
        """Create an indexer bound to one index and start its flush ticker.

        Args:
            client: OpenSearch client shared with the caller.
            index: Default index for items that do not name one.
            num_workers: Number of batches sent concurrently.
            flush_bytes: Buffered body size that triggers a flush.
            flush_interval: Seconds after which a non-empty buffer is flushed.
            request_timeout: Per-request timeout passed to the bulk API.
        """
        self._client = client
        self.index = index
        self._flush_bytes = flush_bytes
        self._request_timeout = request_timeout

        self._executor = ThreadPoolExecutor(
            max_workers=num_workers, thread_name_prefix=f"bulk-{index}"
        )
        # at most two batches queued per worker
        self._slots = threading.BoundedSemaphore(num_workers * 2)

        self._lock = threading.Lock()
        self._stats_lock = threading.Lock()
        self._buffer: List[BulkItem] = []
        self._buffer_bytes = 0
        self._futures: List[Future] = []
        self._stats = BulkIndexerStats()
        self._closed = False
        self._callback_error: Optional[BaseException] = None

        self._stop = threading.Event()
        self._ticker = threading.Thread(
            target=self._tick,
            args=(flush_interval,),
            name=f"bulk-{index}-ticker",
            daemon=True,
        )
        self._ticker.start()

    def add(self, item: BulkItem, timeout: Optional[float] = None) -> None:
        """Buffer ``item``, flushing the current buffer first if it is full.

        Args:
            item: The item to index.
            timeout: Total seconds to wait for the indexer and a free worker
                slot; ``None`` waits for as long as it takes.

        Raises:
            BulkIndexerClosedError: The indexer was already closed.
            BulkIndexerFullError: No worker slot freed up in time. The item
                is not buffered.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        if not self._lock.acquire(timeout=-1 if timeout is None else timeout):
            raise BulkIndexerFullError(
                f"bulk indexer for {self.index} is busy after {timeout}s"
            )
        try:
            if self._closed:
                raise BulkIndexerClosedError(f"bulk indexer for {self.index} is closed")

            if not item.index:
                item.index = self.index

            size = item.size()
            if self._buffer and self._buffer_bytes + size > self._flush_bytes:
                # the lock wait and the slot wait share one deadline
                remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
                self._dispatch_locked(remaining)

            self._buffer.append(item)
            self._buffer_bytes += size
        finally:
            self._lock.release()

        with self._stats_lock:
            self._stats.num_added += 1

    def close(self) -> None:
        """Flush the remaining items and wait for every batch to complete.

        Raises:
            BulkIndexerClosedError: The indexer was already closed.
            Exception: The first error a worker or an item callback raised,
                re-raised after all batches finished.
        """
        with self._lock:
            if self._closed:
                raise BulkIndexerClosedError(f"bulk indexer for {self.index} is closed")
            self._closed = True
            self._stop.set()
            if self._buffer:
                self._dispatch_locked(None)

        self._ticker.join()
        self._executor.shutdown(wait=True)

        for future in self._futures:
            error = future.exception()
            if error is not None:
                raise error

        if self._callback_error is not None:
            raise self._callback_error

    def stats(self) -> BulkIndexerStats:
        """Return a snapshot of the indexer counters."""
        with self._stats_lock:
            return replace(self._stats)

    def _tick(self, interval: float) -> None:
        while not self._stop.wait(interval):
            with self._lock:
                if self._buffer and not self._closed:
                    self._dispatch_locked(None)

    def _dispatch_locked(self, timeout: Optional[float]) -> None:
        """Hand the buffer to a worker; the caller must hold ``_lock``."""
        if not self._slots.acquire(timeout=timeout):
            raise BulkIndexerFullError(
                f"no bulk worker available for {self.index} after {timeout}s"
            )

        batch, self._buffer, self._buffer_bytes = self._buffer, [], 0
        future = self._executor.submit(self._run_batch, batch)
        future.add_done_callback(lambda _: self._slots.release())

        # keep failed futures around so close() can report them
        self._futures = [
            f for f in self._futures if not f.done() or f.exception() is not None
        ]
        self._futures.append(future)

    def _run_batch(self, batch: List[BulkItem]) -> None:
        kwargs = {}
        if self._request_timeout is not None:
            kwargs["request_timeout"] = self._request_timeout

        results = helpers.streaming_bulk(
            self._client,
            (item.to_action() for item in batch),
            chunk_size=len(batch),
            raise_on_error=False,
            raise_on_exception=False,
            **kwargs,
        )

        with self._stats_lock:
            self._stats.num_requests += 1

        logger.debug(
            "flushing bulk batch",
            extra={"index_name": self.index, "batch_size": len(batch)},
        )

        reported = 0
        try:
            for item, (ok, info) in zip(batch, results):
                reported += 1
                # info is {op_type: response_item}
                response_item = next(iter(info.values()), {})
                if ok:
                    with self._stats_lock:
                        self._stats.num_flushed += 1
                    self._notify(item.on_success, item, response_item)
                else:
                    with self._stats_lock:
                        self._stats.num_failed += 1
                    self._notify(
                        item.on_failure, item, response_item, response_item.get("exception")
                    )
        except Exception as exc:
            # items the engine never answered for still get exactly one callback
            logger.error(
                f"bulk batch failed: {exc}",
                extra={"index_name": self.index, "batch_size": len(batch)},
            )
            for item in batch[reported:]:
                with self._stats_lock:
                    self._stats.num_failed += 1
                self._notify(item.on_failure, item, {"error": str(exc)}, exc)
            raise

    def _notify(self, callback, *args) -> None:
        """Run an item callback; the first one to raise is re-raised by close()."""
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as exc:
            logger.exception("bulk item callback failed", extra={"index_name": self.index})
            with self._stats_lock:
                if self._callback_error is None:
                    self._callback_error = exc
