import json
import threading
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from opensearchpy.serializer import JSONSerializer
from pydantic import BaseModel

from opensearch_repository.global_config import GlobalConfig


def _decode(body: Any) -> Any:
    if isinstance(body, bytes):
        body = body.decode("utf-8")
    if isinstance(body, str):
        return json.loads(body)
    return body


class FakeIndices:
    def __init__(self, owner: "FakeOpenSearch"):
        self._owner = owner

    def create(self, index: str, body: Any = None, **params: Any) -> Dict[str, Any]:
        self._owner.record("indices.create", index=index, body=body, params=params)
        return {"acknowledged": True, "index": index}


class FakeOpenSearch:
    """In-memory stand-in for ``opensearchpy.OpenSearch``.

    ``errors`` maps a method name to the exception it raises; ``failing_ids``
    lists document ids the bulk endpoint rejects.
    """

    def __init__(self) -> None:
        self.transport = SimpleNamespace(serializer=JSONSerializer())
        self.indices = FakeIndices(self)
        self.calls: List[Dict[str, Any]] = []
        self.errors: Dict[str, Exception] = {}
        self.failing_ids: set = set()
        self.bulk_requests: List[List[str]] = []
        self.search_response: Dict[str, Any] = {
            "took": 3,
            "timed_out": False,
            "hits": {
                "total": {"value": 25, "relation": "eq"},
                "max_score": 1.0,
                "hits": [{"_id": str(i), "_source": {"n": i}} for i in range(10)],
            },
        }
        self._lock = threading.Lock()

    def record(self, method: str, **kwargs: Any) -> None:
        with self._lock:
            self.calls.append({"method": method, **kwargs})
        error = self.errors.get(method)
        if error is not None:
            raise error

    def calls_to(self, method: str) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["method"] == method]

    def index(self, index: str, body: Any, id: Optional[str] = None, **params: Any):
        self.record("index", index=index, id=id, body=body, params=params)
        return {"_index": index, "_id": id, "result": "created"}

    def update(self, index: str, id: str, body: Any, **params: Any):
        self.record("update", index=index, id=id, body=body, params=params)
        return {"_index": index, "_id": id, "result": "updated"}

    def delete(self, index: str, id: str, **params: Any):
        self.record("delete", index=index, id=id, params=params)
        return {"_index": index, "_id": id, "result": "deleted"}

    def search(self, body: Any = None, index: Optional[str] = None, **params: Any):
        self.record("search", index=index, body=_decode(body), params=params)
        return self.search_response

    def bulk(self, *args: Any, body: Any = None, **params: Any):
        if body is None and args:
            body = args[0]
        if isinstance(body, (list, tuple)):
            body = "\n".join(
                line.decode("utf-8") if isinstance(line, bytes) else line
                for line in body
            )
        if isinstance(body, bytes):
            body = body.decode("utf-8")

        lines = [json.loads(line) for line in body.splitlines() if line.strip()]
        ids = []
        items = []
        for action, _source in zip(lines[0::2], lines[1::2]):
            op_type, meta = next(iter(action.items()))
            doc_id = meta["_id"]
            ids.append(doc_id)
            if doc_id in self.failing_ids:
                items.append(
                    {
                        op_type: {
                            "_index": meta.get("_index"),
                            "_id": doc_id,
                            "status": 400,
                            "error": {
                                "type": "mapper_parsing_exception",
                                "reason": "failed to parse field [year]",
                            },
                        }
                    }
                )
            else:
                items.append(
                    {
                        op_type: {
                            "_index": meta.get("_index"),
                            "_id": doc_id,
                            "status": 201,
                            "result": "created",
                        }
                    }
                )

        with self._lock:
            self.bulk_requests.append(ids)
        self.record("bulk", ids=ids, params=params)

        return {
            "took": 1,
            "errors": any("error" in next(iter(i.values())) for i in items),
            "items": items,
        }


class Article(BaseModel):
    article_id: str
    title: str
    year: int = 2024

    def to_doc(self):
        return {"title": self.title, "year": self.year}

    def get_id(self) -> str:
        return self.article_id


class Note:
    """A document type that shares no base class with the others."""

    def __init__(self, note_id: str, text: str):
        self.note_id = note_id
        self.text = text

    def to_doc(self):
        return {"text": self.text}

    def get_id(self) -> str:
        return self.note_id


@pytest.fixture
def fake_client() -> FakeOpenSearch:
    return FakeOpenSearch()


@pytest.fixture
def config() -> GlobalConfig:
    return GlobalConfig(
        _env_file=None,
        request_timeout=5.0,
        bulk_num_workers=2,
        bulk_flush_bytes=5_000_000,
        bulk_flush_interval=30.0,
        bulk_add_timeout=5.0,
    )


@pytest.fixture
def articles() -> List[Article]:
    return [Article(article_id=f"a-{i}", title=f"Article {i}") for i in range(5)]
