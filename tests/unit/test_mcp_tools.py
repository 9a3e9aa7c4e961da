"""Tests for MCP tool core functions."""

import asyncio

import pytest

from model_search.core.session import SearchSession
from model_search.mcp.server import (
    SUPERSEDED,
    ServerContext,
    model_search,
    model_search_details,
    model_search_facets,
    run_query,
    search_facets,
    search_models,
)
from model_search.models.item import Item
from tests.unit.fakes import FakeBackend, make_item


@pytest.fixture
def session(raw_items: list[Item]) -> SearchSession:
    backend = FakeBackend()
    backend.add_response("llama", raw_items)
    s = SearchSession()
    asyncio.run(run_query(s, backend, "llama"))
    return s


def test_model_search_returns_grouped_view(session: SearchSession) -> None:
    result = model_search(session)

    assert result["query"] == "llama"
    assert result["total"] == 5
    assert [g["base_name"] for g in result["groups"]] == [
        "meta-llama/Llama",
        "bert",
        "openai/whisper",
    ]


def test_model_search_filters_are_not_sticky(session: SearchSession) -> None:
    narrowed = model_search(session, tags=["fill-mask"])
    widened = model_search(session)

    assert narrowed["shown"] == 1
    assert widened["shown"] == 5


def test_model_search_caps_limit(session: SearchSession) -> None:
    result = model_search(session, limit=1000)
    assert result["filters"]["limit"] == 100


def test_model_search_reports_error() -> None:
    backend = FakeBackend()
    backend.add_failure("q", "boom")
    session = SearchSession()

    applied = asyncio.run(run_query(session, backend, "q"))

    assert applied is True
    assert model_search(session)["error"] == "boom"
    assert model_search_facets(session)["error"] == "boom"


def test_model_search_facets(session: SearchSession) -> None:
    result = model_search_facets(session)
    assert result["max_downloads"] == 90000
    assert "pytorch" in result["available_tags"]
    assert result["count"] == 5


def test_model_search_details(session: SearchSession) -> None:
    result = model_search_details(session, model_id="openai/whisper")
    assert result["url"] == "https://huggingface.co/openai/whisper"
    assert result["tags"] == ["automatic-speech-recognition"]

    missing = model_search_details(session, model_id="nope")
    assert "error" in missing


def test_search_models_fetches_then_reuses_results(raw_items: list[Item]) -> None:
    backend = FakeBackend()
    backend.add_response("llama", raw_items)
    server = ServerContext(backend=backend)

    first = asyncio.run(search_models(server, "llama", tags=["fill-mask"]))
    second = asyncio.run(search_models(server, "llama"))

    assert first["shown"] == 1
    assert second["shown"] == 5
    assert backend.calls == [("llama", 100)]


def test_zero_hit_query_is_not_sent_again() -> None:
    backend = FakeBackend()
    server = ServerContext(backend=backend)

    first = asyncio.run(search_models(server, "nothing"))
    second = asyncio.run(search_models(server, "nothing"))
    facets = asyncio.run(search_facets(server, "nothing"))

    assert first["total"] == second["total"] == 0
    assert facets["available_tags"] == []
    assert len(backend.calls) == 1


def test_failed_query_is_retried() -> None:
    backend = FakeBackend()
    backend.add_failure("q", "boom")
    server = ServerContext(backend=backend)

    asyncio.run(search_models(server, "q"))
    result = asyncio.run(search_models(server, "q"))

    assert result["error"] == "boom"
    assert len(backend.calls) == 2


def _slow_backend() -> FakeBackend:
    backend = FakeBackend()
    backend.add_response("a", [make_item("org/aaa", downloads=1)])
    backend.add_response("b", [make_item("org/bbb", downloads=2)])
    backend.delays["a"] = 0.2
    return backend


def test_concurrent_search_reports_superseded_instead_of_other_results() -> None:
    server = ServerContext(backend=_slow_backend())

    async def both() -> list[dict]:
        return await asyncio.gather(search_models(server, "a"), search_models(server, "b"))

    slow, fast = asyncio.run(both())

    assert slow["error"] == SUPERSEDED
    assert slow["query"] == "a"
    assert slow["groups"] == []
    assert fast["query"] == "b"
    assert [g["base_name"] for g in fast["groups"]] == ["org/bbb"]


def test_concurrent_facets_report_superseded() -> None:
    server = ServerContext(backend=_slow_backend())

    async def both() -> list[dict]:
        return await asyncio.gather(search_facets(server, "a"), search_facets(server, "b"))

    slow, fast = asyncio.run(both())

    assert slow["error"] == SUPERSEDED
    assert fast["available_tags"] == []
    assert fast["query"] == "b"
    assert fast["count"] == 1
