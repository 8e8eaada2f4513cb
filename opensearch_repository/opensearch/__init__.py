from .bulk_indexer import BulkIndexer, BulkIndexerStats
from .open_search_client import OpenSearchClient

__all__ = [
    "BulkIndexer",
    "BulkIndexerStats",
    "OpenSearchClient",
]
