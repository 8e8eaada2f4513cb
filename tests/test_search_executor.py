import logging

import pytest
from opensearchpy.exceptions import (
    ConnectionError as OpenSearchConnectionError,
    ConnectionTimeout,
    RequestError,
)

from opensearch_repository.dtos.pagination_metadata import PaginationMetadata
from opensearch_repository.exceptions import (
    InvalidQueryError,
    MalformedResponseError,
    OperationFailedError,
    RepositoryTimeoutError,
)
from opensearch_repository.services.search_executor import SearchExecutor


@pytest.fixture
def executor(fake_client) -> SearchExecutor:
    return SearchExecutor(fake_client, request_timeout=5.0)


def test_search_injects_from_and_size(executor, fake_client) -> None:
    request = {"query": {"match": {"title": "water"}}, "sort": ["_score"]}
    meta = PaginationMetadata(items_per_page=10, current_page=2)

    executor.search("articles", request, meta)

    sent = fake_client.calls_to("search")[0]
    assert sent["index"] == "articles"
    assert sent["body"] == {
        "query": {"match": {"title": "water"}},
        "sort": ["_score"],
        "from": 10,
        "size": 10,
    }
    assert request["from"] == 10
    assert request["size"] == 10


def test_search_uses_five_second_budget(executor, fake_client) -> None:
    executor.search("articles", {}, PaginationMetadata(items_per_page=10))

    assert fake_client.calls_to("search")[0]["params"]["request_timeout"] == 5.0


def test_search_fills_pagination_metadata(executor) -> None:
    meta = PaginationMetadata(items_per_page=10, current_page=1)

    result = executor.search("articles", {"query": {"match_all": {}}}, meta)

    assert result["hits"]["total"]["value"] == 25
    assert meta.total_item == 25
    assert meta.total_page == 3
    assert meta.item_count == 10


def test_search_last_page_counts_returned_hits(executor, fake_client) -> None:
    fake_client.search_response = {
        "hits": {"total": {"value": 25}, "hits": [{"_id": "21"}, {"_id": "22"}]}
    }
    meta = PaginationMetadata(items_per_page=10, current_page=3)

    executor.search("articles", {}, meta)

    assert meta.item_count == 2
    assert meta.total_page == 3


def test_search_with_malformed_envelope_raises(executor, fake_client, caplog) -> None:
    fake_client.search_response = {"hits": {"hits": []}}

    with caplog.at_level(logging.ERROR):
        with pytest.raises(MalformedResponseError):
            executor.search("articles", {}, PaginationMetadata(items_per_page=10))

    assert any(getattr(r, "index_name", None) == "articles" for r in caplog.records)


def test_search_engine_error_is_invalid_query(executor, fake_client, caplog) -> None:
    fake_client.errors["search"] = RequestError(400, "parsing_exception", {"error": "bad"})

    with caplog.at_level(logging.ERROR):
        with pytest.raises(InvalidQueryError) as excinfo:
            executor.search("articles", {"query": {"bogus": {}}}, PaginationMetadata())

    assert str(excinfo.value) == "invalid query"
    assert excinfo.value.status_code == 400
    assert isinstance(excinfo.value, OperationFailedError)
    assert [getattr(r, "status_code", None) for r in caplog.records] == [400]


def test_search_network_error_propagates_unchanged(executor, fake_client) -> None:
    error = OpenSearchConnectionError("N/A", "connection refused", Exception("refused"))
    fake_client.errors["search"] = error

    with pytest.raises(OpenSearchConnectionError) as excinfo:
        executor.search("articles", {}, PaginationMetadata())

    assert excinfo.value is error


def test_search_timeout(executor, fake_client) -> None:
    fake_client.errors["search"] = ConnectionTimeout("TIMEOUT", "read timed out", Exception())

    with pytest.raises(RepositoryTimeoutError):
        executor.search("articles", {}, PaginationMetadata())


def test_suggest_overrides_caller_size(executor, fake_client) -> None:
    request = {"size": 500, "suggest": {"s": {"prefix": "wat", "completion": {"field": "suggest"}}}}

    executor.suggest("articles", request)

    sent = fake_client.calls_to("search")[0]["body"]
    assert sent["size"] == 10
    assert sent["suggest"] == request["suggest"]
    assert request["size"] == 10


def test_suggest_does_not_need_hits(executor, fake_client) -> None:
    fake_client.search_response = {"suggest": {"s": [{"text": "wat", "options": []}]}}

    result = executor.suggest("articles", {})

    assert result == {"suggest": {"s": [{"text": "wat", "options": []}]}}


def test_suggest_engine_error_is_invalid_query(executor, fake_client) -> None:
    fake_client.errors["search"] = RequestError(400, "search_phase_execution_exception", {})

    with pytest.raises(InvalidQueryError):
        executor.suggest("articles", {})


def test_non_mapping_response_is_malformed(executor, fake_client) -> None:
    fake_client.search_response = "<html>gateway</html>"

    with pytest.raises(MalformedResponseError):
        executor.suggest("articles", {})
