from .dtos import BulkItem, BulkItemFailure, BulkOutcome, PaginationMetadata, Suggestion
from .exceptions import (
    BulkIndexerClosedError,
    BulkIndexerError,
    BulkIndexerFullError,
    InvalidQueryError,
    MalformedResponseError,
    OpenSearchRepositoryError,
    OperationFailedError,
    RepositoryTimeoutError,
)
from .global_config import GlobalConfig, global_config
from .logging_setup import setup_logging
from .opensearch import BulkIndexer, BulkIndexerStats, OpenSearchClient
from .opensearch.abstract_classes import ABCClient, OpenSearchDocumentAble
from .query_utils import build_suggest_query, compute_metadata, extract_suggestions
from .services import OpenSearchRepository

__all__ = [
    "ABCClient",
    "BulkIndexer",
    "BulkIndexerClosedError",
    "BulkIndexerError",
    "BulkIndexerFullError",
    "BulkIndexerStats",
    "BulkItem",
    "BulkItemFailure",
    "BulkOutcome",
    "GlobalConfig",
    "InvalidQueryError",
    "MalformedResponseError",
    "OpenSearchClient",
    "OpenSearchDocumentAble",
    "OpenSearchRepository",
    "OpenSearchRepositoryError",
    "OperationFailedError",
    "PaginationMetadata",
    "RepositoryTimeoutError",
    "Suggestion",
    "build_suggest_query",
    "compute_metadata",
    "extract_suggestions",
    "global_config",
    "setup_logging",
]
