from .bulk_insertion import BulkInsertion, BulkOutcomeTracker
from .open_search_repository import OpenSearchRepository
from .search_executor import SearchExecutor

__all__ = [
    "BulkInsertion",
    "BulkOutcomeTracker",
    "OpenSearchRepository",
    "SearchExecutor",
]
