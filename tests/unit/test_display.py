"""Tests for display formatting helpers."""

import json

import pytest

from model_search.core.display import (
    format_download_count,
    format_download_span,
    format_relevance,
    item_details,
    profile_url,
    view_to_dict,
)
from model_search.core.grouping import build_groups
from model_search.core.pipeline import build_view
from model_search.models.item import FilterState, Item
from tests.unit.fakes import make_item


@pytest.mark.parametrize(
    ("count", "expected"),
    [(0, "0"), (999, "999"), (1000, "1.0K"), (15300, "15.3K"), (2_500_000, "2.5M"), (None, "n/a")],
)
def test_format_download_count(count: int | None, expected: str) -> None:
    assert format_download_count(count) == expected


def test_format_relevance_inverts_distance() -> None:
    assert format_relevance(0.25) == "75.0%"


def test_profile_url() -> None:
    assert profile_url("org/model-7b") == "https://huggingface.co/org/model-7b"


def test_download_span_for_group() -> None:
    (group,) = build_groups(
        [make_item("org/m-1", downloads=1500), make_item("org/m-2", downloads=2_000_000)]
    )
    assert format_download_span(group) == "1.5K - 2.0M"


def test_item_details_hides_noise_tags(raw_items: list[Item]) -> None:
    details = item_details(raw_items[0])

    assert details["model_id"] == "meta-llama/Llama-2-7b-hf"
    assert details["tags"] == ["text-generation", "pytorch"]
    assert details["downloads_display"] == "5.0K"
    assert details["description"] == "A **7B** chat model."
    assert details["url"] == "https://huggingface.co/meta-llama/Llama-2-7b-hf"


def test_view_to_dict_is_json_serializable(raw_items: list[Item]) -> None:
    view = build_view(raw_items, FilterState.defaults(90000))

    data = json.loads(json.dumps(view_to_dict(view)))

    assert data["total"] == 5
    assert data["shown"] == 5
    assert data["filters"]["sort"] == "relevance"
    assert data["facets"]["max_downloads"] == 90000
    assert data["groups"][0]["base_name"] == "meta-llama/Llama"
    assert [i["model_id"] for i in data["groups"][0]["items"]] == [
        "meta-llama/Llama-2-13b-hf",
        "meta-llama/Llama-2-7b-hf",
        "meta-llama/Llama-2-70b-hf",
    ]
