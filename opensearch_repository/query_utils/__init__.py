from .pagination import compute_metadata
from .suggest_query import build_suggest_query, extract_suggestions

__all__ = [
    "build_suggest_query",
    "compute_metadata",
    "extract_suggestions",
]
