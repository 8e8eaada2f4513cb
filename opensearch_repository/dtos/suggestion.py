from typing import List
from pydantic import BaseModel, Field


class Suggestion(BaseModel):
    """A DTO for completion-suggester fields stored on a document."""

    input: List[str] = Field(default_factory=list)
    weight: int = 0
