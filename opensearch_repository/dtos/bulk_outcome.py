from typing import List, Optional
from pydantic import BaseModel, Field


class BulkItemFailure(BaseModel):
    """A DTO describing why a single bulk item was not indexed."""

    document_id: str
    error_type: str = "unknown"
    reason: Optional[str] = None


class BulkOutcome(BaseModel):
    """A DTO summarizing one bulk insertion."""

    index_name: str
    num_flushed: int = 0
    num_failed: int = 0
    # items that never reached the engine; not part of num_failed
    num_dropped: int = 0
    failures: List[BulkItemFailure] = Field(default_factory=list)
