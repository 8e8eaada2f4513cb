from .bulk_item import BulkItem
from .bulk_outcome import BulkItemFailure, BulkOutcome
from .pagination_metadata import PaginationMetadata
from .suggestion import Suggestion

__all__ = [
    "BulkItem",
    "BulkItemFailure",
    "BulkOutcome",
    "PaginationMetadata",
    "Suggestion",
]
