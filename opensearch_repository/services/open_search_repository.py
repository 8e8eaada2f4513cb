import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Generic, Iterable, MutableMapping, TypeVar

from opensearchpy import OpenSearch
from opensearchpy.exceptions import ConnectionTimeout, TransportError

from ..dtos.bulk_outcome import BulkOutcome
from ..dtos.pagination_metadata import PaginationMetadata
from ..exceptions import (
    OperationFailedError,
    RepositoryTimeoutError,
    engine_status_code,
)
from ..global_config import GlobalConfig, global_config
from ..opensearch.abstract_classes.document import (
    OpenSearchDocumentAble,
    serialize_document,
)
from .bulk_insertion import BulkInsertion
from .search_executor import SearchExecutor

T = TypeVar("T", bound=OpenSearchDocumentAble)


class OpenSearchRepository(Generic[T]):
    """
    Repository for storing and querying documents of one type in OpenSearch.
    """

    def __init__(
        self,
        client: OpenSearch,
        logger: logging.Logger | None = None,
        config: GlobalConfig | None = None,
    ):
        """
            Class constructor inject the required dependencies via the parameters
        Args:
            client (OpenSearch): Shared OpenSearch client.
            logger (logging.Logger, optional): Logger receiving every success and failure.
            config (GlobalConfig, optional): Timeouts and bulk settings. Defaults to
                the module-level ``global_config``.
        """
        self._client = client
        self._logger = logger or logging.getLogger(__name__)
        self._config = config or global_config
        self._timeout = self._config.request_timeout

        self._executor = SearchExecutor(
            client,
            logger=self._logger,
            request_timeout=self._config.request_timeout,
        )
        self._bulk = BulkInsertion(
            client,
            logger=self._logger,
            num_workers=self._config.bulk_num_workers,
            flush_bytes=self._config.bulk_flush_bytes,
            flush_interval=self._config.bulk_flush_interval,
            add_timeout=self._config.bulk_add_timeout,
            request_timeout=self._config.request_timeout,
        )

    def create_index(self, index_name: str, index_body: bytes | str | Mapping) -> None:
        """Create ``index_name`` with the given settings and mappings body."""
        if isinstance(index_body, Mapping):
            index_body = dict(index_body)

        self._call(
            "create index",
            lambda: self._client.indices.create(
                index=index_name,
                body=index_body,
                request_timeout=self._timeout,
            ),
            index_name=index_name,
        )

        self._logger.info("successfully create index", extra={"index_name": index_name})

    def insert(self, index_name: str, doc_id: str, doc: T) -> None:
        """Create or replace the document stored under ``doc_id``."""
        body = serialize_document(doc)

        self._call(
            "insert",
            lambda: self._client.index(
                index=index_name,
                id=doc_id,
                body=body,
                request_timeout=self._timeout,
            ),
            index_name=index_name,
            doc_id=doc_id,
        )

        self._logger.info(
            "successfully insert document",
            extra={"index_name": index_name, "doc_id": doc_id},
        )

    def insert_bulk(self, index_name: str, content_list: Iterable[T]) -> BulkOutcome:
        """Index every document of ``content_list``; see ``BulkInsertion.insert``."""
        return self._bulk.insert(index_name, content_list)

    def update(self, index_name: str, doc_id: str, doc: Mapping[str, Any]) -> None:
        """Merge the fields of ``doc`` into the stored document."""
        self._call(
            "update",
            lambda: self._client.update(
                index=index_name,
                id=doc_id,
                body={"doc": dict(doc)},
                request_timeout=self._timeout,
            ),
            index_name=index_name,
            doc_id=doc_id,
        )

        self._logger.info(
            "successfully update document",
            extra={"index_name": index_name, "doc_id": doc_id},
        )

    def delete(self, index_name: str, doc_id: str) -> None:
        """Delete the document stored under ``doc_id``."""
        self._call(
            "delete",
            lambda: self._client.delete(
                index=index_name,
                id=doc_id,
                request_timeout=self._timeout,
            ),
            index_name=index_name,
            doc_id=doc_id,
        )

        self._logger.info(
            "successfully delete document",
            extra={"index_name": index_name, "doc_id": doc_id},
        )

    def search(
        self,
        index_name: str,
        request: MutableMapping[str, Any],
        meta: PaginationMetadata,
    ) -> Dict[str, Any]:
        """Run a paginated search; ``meta`` is filled in place."""
        return self._executor.search(index_name, request, meta)

    def suggest(
        self, index_name: str, request: MutableMapping[str, Any]
    ) -> Dict[str, Any]:
        """Run an autocomplete request capped at the configured suggestion count."""
        return self._executor.suggest(index_name, request)

    def _call(self, operation: str, request: Callable[[], Any], **context: str) -> Any:
        """Send ``request`` and translate engine errors for ``operation``.

        Errors that never reached the engine are logged and re-raised as is.
        """
        try:
            return request()
        except ConnectionTimeout as exc:
            self._logger.error(str(exc), extra=context)
            raise RepositoryTimeoutError(
                f"{operation} timed out after {self._timeout}s"
            ) from exc
        except TransportError as exc:
            status_code = engine_status_code(exc)
            if status_code is not None and status_code >= 400:
                self._logger.error(
                    f"{operation} failed",
                    extra={**context, "status_code": status_code},
                )
                raise OperationFailedError(operation, status_code) from exc

            self._logger.error(str(exc), extra=context)
            raise
