"""Formatting helpers for presenting search results."""

from typing import Any

from model_search.config import PROFILE_HOST
from model_search.core.tags import displayable_tags
from model_search.models.item import Item, ResultGroup, SearchView


def format_download_count(count: int | None) -> str:
    if count is None:
        return "n/a"
    if count >= 1_000_000:
        return f"{count / 1_000_000:.1f}M"
    if count >= 1000:
        return f"{count / 1000:.1f}K"
    return str(count)


def relevance(distance: float) -> float:
    """Heuristic relevance shown to users; not bounded to [0, 1]."""
    return 1 - distance


def format_relevance(distance: float) -> str:
    return f"{relevance(distance) * 100:.1f}%"


def profile_url(identifier: str) -> str:
    return f"{PROFILE_HOST}/{identifier}"


def format_download_span(group: ResultGroup) -> str:
    """Render a group's download bounds, e.g. ``1.2K - 3.4M``."""
    low = group.stats.min_downloads
    high = group.stats.max_downloads
    if low == high:
        return format_download_count(low)
    return f"{format_download_count(low)} - {format_download_count(high)}"


def item_details(item: Item) -> dict[str, Any]:
    """Everything the detail view shows for a selected item."""
    return {
        "model_id": item.identifier,
        "tags": list(displayable_tags(item.tags)),
        "downloads": item.downloads,
        "downloads_display": format_download_count(item.downloads),
        "distance": item.distance,
        "relevance": format_relevance(item.distance),
        "description": item.description,
        "url": profile_url(item.identifier),
    }


def _item_summary(item: Item) -> dict[str, Any]:
    return {
        "model_id": item.identifier,
        "downloads": item.downloads,
        "distance": item.distance,
        "tags": list(displayable_tags(item.tags)),
    }


def view_to_dict(view: SearchView) -> dict[str, Any]:
    """Serialize a view to plain JSON-compatible data."""
    return {
        "total": view.total,
        "shown": view.shown,
        "filters": {
            "selected_tags": list(view.filters.selected_tags),
            "download_range": list(view.filters.download_range),
            "sort": str(getattr(view.filters.sort_mode, "value", view.filters.sort_mode)),
            "limit": view.filters.result_limit,
        },
        "facets": {
            "available_tags": list(view.facets.available_tags),
            "max_downloads": view.facets.max_downloads,
        },
        "groups": [
            {
                "base_name": group.base_name,
                "min_downloads": group.stats.min_downloads,
                "max_downloads": group.stats.max_downloads,
                "best_distance": group.stats.best_distance,
                "tags": list(displayable_tags(group.stats.representative_tags)),
                "items": [_item_summary(item) for item in group.items],
            }
            for group in view.groups
        ],
    }
