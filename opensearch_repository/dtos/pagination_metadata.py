from pydantic import BaseModel, ConfigDict, Field


class PaginationMetadata(BaseModel):
    """Pagination request and the counts derived from a search response.

    ``items_per_page`` and ``current_page`` are supplied by the caller;
    ``total_item``, ``total_page`` and ``item_count`` are filled in place
    once the search returns.
    """

    model_config = ConfigDict(validate_assignment=True)

    items_per_page: int = Field(10, gt=0)
    current_page: int = Field(1, ge=1)

    total_item: int = 0
    total_page: int = 0
    item_count: int = 0

    @property
    def offset(self) -> int:
        """Index of the first hit of the current page."""
        return (self.current_page - 1) * self.items_per_page
