from collections.abc import Mapping
from typing import Any

from ..dtos.pagination_metadata import PaginationMetadata
from ..exceptions import MalformedResponseError


def _read_hits(result: Mapping[str, Any]) -> tuple[int, list]:
    """Return ``(hits.total.value, hits.hits)`` or raise MalformedResponseError."""
    hits = result.get("hits") if isinstance(result, Mapping) else None
    if not isinstance(hits, Mapping):
        raise MalformedResponseError("search response has no 'hits' object")

    total = hits.get("total")
    if not isinstance(total, Mapping):
        raise MalformedResponseError("search response has no 'hits.total' object")

    total_value = total.get("value")
    # bool is an int subclass but never a valid count
    if not isinstance(total_value, int) or isinstance(total_value, bool):
        raise MalformedResponseError("search response has no integer 'hits.total.value'")

    page_hits = hits.get("hits")
    if not isinstance(page_hits, list):
        raise MalformedResponseError("search response has no 'hits.hits' list")

    return total_value, page_hits


def compute_metadata(
    meta: PaginationMetadata, result: Mapping[str, Any]
) -> PaginationMetadata:
    """Fill the derived pagination counts of ``meta`` from a search response.

    ``total_item`` comes from ``hits.total.value`` and ``item_count`` is the
    number of entries in ``hits.hits``, whatever ``items_per_page`` says.
    ``total_page`` is the ceiling of ``total_item / items_per_page``.
    The response is only read.

    Args:
        meta (PaginationMetadata): Metadata carrying ``items_per_page``; updated in place.
        result (Mapping): Decoded search response envelope.

    Returns:
        PaginationMetadata: ``meta``, for chaining.

    Raises:
        MalformedResponseError: The envelope lacks one of the keys above.
        ValueError: ``items_per_page`` is not positive.
    """
    if meta.items_per_page <= 0:
        raise ValueError("items_per_page must be positive")

    total_item, page_hits = _read_hits(result)

    total_page = total_item // meta.items_per_page
    # Add one page for the remainder
    if total_item % meta.items_per_page != 0:
        total_page += 1

    meta.total_item = total_item
    meta.total_page = total_page
    meta.item_count = len(page_hits)
    return meta
