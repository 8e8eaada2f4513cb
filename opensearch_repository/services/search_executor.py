import logging
from collections.abc import Mapping
from typing import Any, Dict, MutableMapping

from opensearchpy import OpenSearch
from opensearchpy.exceptions import ConnectionTimeout, SerializationError, TransportError

from ..dtos.pagination_metadata import PaginationMetadata
from ..exceptions import (
    InvalidQueryError,
    MalformedResponseError,
    RepositoryTimeoutError,
    engine_status_code,
)
from ..query_utils.pagination import compute_metadata

# set maximum suggestion
SUGGEST_SIZE = 10


class SearchExecutor:
    """Run search and suggest requests with a fixed time budget.

    Request bodies are engine-native query DSL supplied by the caller; only
    ``from`` and ``size`` are written before submission. Any status above
    200 from the engine is reported as ``InvalidQueryError``.
    """

    def __init__(
        self,
        client: OpenSearch,
        logger: logging.Logger | None = None,
        request_timeout: float = 5.0,
    ):
        self._client = client
        self._logger = logger or logging.getLogger(__name__)
        self._request_timeout = request_timeout

    def search(
        self,
        index_name: str,
        request: MutableMapping[str, Any],
        meta: PaginationMetadata,
    ) -> Dict[str, Any]:
        """Run a paginated search and fill ``meta`` from the response.

        Args:
            index_name (str): Index to search.
            request (MutableMapping): Query body; ``from`` and ``size`` are
                overwritten in place from ``meta``.
            meta (PaginationMetadata): Requested page, updated in place.

        Returns:
            dict: The decoded response envelope.
        """
        request["from"] = meta.offset
        request["size"] = meta.items_per_page

        result = self._execute(index_name, request)

        try:
            compute_metadata(meta, result)
        except MalformedResponseError as exc:
            self._logger.error(str(exc), extra={"index_name": index_name})
            raise

        return result

    def suggest(
        self, index_name: str, request: MutableMapping[str, Any]
    ) -> Dict[str, Any]:
        """Run an autocomplete request and return the decoded response.

        Args:
            index_name (str): Index to query.
            request (MutableMapping): Query body; ``size`` is overwritten in place.

        Returns:
            dict: The decoded response envelope.
        """
        request["size"] = SUGGEST_SIZE

        return self._execute(index_name, request)

    def _execute(
        self, index_name: str, request: MutableMapping[str, Any]
    ) -> Dict[str, Any]:
        context = {"index_name": index_name}

        try:
            body = self._client.transport.serializer.dumps(request)
        except SerializationError as exc:
            self._logger.error(str(exc), extra=context)
            raise

        try:
            response = self._client.search(
                index=index_name,
                body=body,
                request_timeout=self._request_timeout,
            )
        except ConnectionTimeout as exc:
            self._logger.error(str(exc), extra=context)
            raise RepositoryTimeoutError(
                f"search on {index_name} timed out after {self._request_timeout}s"
            ) from exc
        except TransportError as exc:
            status_code = engine_status_code(exc)
            if status_code is not None and status_code > 200:
                self._logger.error(
                    "invalid query", extra={**context, "status_code": status_code}
                )
                raise InvalidQueryError(status_code) from exc

            self._logger.error(str(exc), extra=context)
            raise

        if not isinstance(response, Mapping):
            self._logger.error("search response is not a JSON object", extra=context)
            raise MalformedResponseError("search response is not a JSON object")

        return dict(response)
