from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

SuccessCallback = Callable[["BulkItem", Dict[str, Any]], None]
FailureCallback = Callable[["BulkItem", Dict[str, Any], Optional[BaseException]], None]


@dataclass
class BulkItem:
    """One document write submitted through a bulk indexer."""

    index: str
    document_id: str
    body: str
    action: str = "index"
    on_success: Optional[SuccessCallback] = None
    on_failure: Optional[FailureCallback] = None

    def to_action(self) -> Dict[str, Any]:
        """Return the opensearch-py bulk helper action for this item."""
        return {
            "_op_type": self.action,
            "_index": self.index,
            "_id": self.document_id,
            "_source": self.body,
        }

    def size(self) -> int:
        return len(self.body.encode("utf-8"))
