"""Domain models for model search results."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from model_search.config import DEFAULT_RESULT_LIMIT


class SortMode(str, Enum):
    """Recognized result orderings."""

    RELEVANCE = "relevance"
    DOWNLOADS_DESC = "downloads-desc"
    DOWNLOADS_ASC = "downloads-asc"


@dataclass(frozen=True)
class Item:
    """A single search hit returned by the backend."""

    identifier: str
    distance: float
    tags: tuple[str, ...] = ()
    downloads: int | None = None
    description: str | None = None


@dataclass(frozen=True)
class GroupStats:
    """Summary of a group of items sharing a base name."""

    min_downloads: int | None
    max_downloads: int | None
    best_distance: float
    representative_tags: tuple[str, ...]


@dataclass(frozen=True)
class ResultGroup:
    """Items sharing a base name, with their statistics."""

    base_name: str
    items: tuple[Item, ...]
    stats: GroupStats

    @property
    def is_single(self) -> bool:
        return len(self.items) == 1


@dataclass(frozen=True)
class Facets:
    """Filter-control inputs derived from the unfiltered result set."""

    available_tags: tuple[str, ...] = ()
    max_downloads: int = 0


@dataclass(frozen=True)
class FilterState:
    """Snapshot of the user's filter controls."""

    selected_tags: tuple[str, ...] = ()
    download_range: tuple[int, int] = (0, 0)
    sort_mode: SortMode | str = SortMode.RELEVANCE
    result_limit: int = DEFAULT_RESULT_LIMIT

    @classmethod
    def defaults(cls, max_downloads: int = 0) -> "FilterState":
        return cls(download_range=(0, max_downloads))


@dataclass(frozen=True)
class SearchView:
    """Display-ready result set for one state snapshot."""

    items: tuple[Item, ...]
    groups: tuple[ResultGroup, ...]
    facets: Facets
    filters: FilterState
    total: int = 0

    @property
    def shown(self) -> int:
        return len(self.items)


def _parse_downloads(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and math.isfinite(value) and value >= 0:
        return int(value)
    return None


def parse_item(raw: dict[str, Any]) -> Item:
    """Build an Item from one backend result object.

    Missing or malformed tags and downloads are tolerated. A missing
    identifier or a non-numeric distance raises ValueError.
    """
    identifier = raw.get("model_id")
    if not isinstance(identifier, str) or not identifier:
        msg = f"Result has no model_id: {raw!r}"
        raise ValueError(msg)

    distance = raw.get("distance")
    if isinstance(distance, bool) or not isinstance(distance, (int, float)):
        msg = f"Result {identifier!r} has invalid distance: {distance!r}"
        raise ValueError(msg)

    raw_tags = raw.get("tags")
    if not isinstance(raw_tags, (list, tuple)):
        raw_tags = ()
    tags = tuple(t for t in raw_tags if isinstance(t, str))

    description = raw.get("model_explanation_gemini")
    return Item(
        identifier=identifier,
        distance=float(distance),
        tags=tags,
        downloads=_parse_downloads(raw.get("downloads")),
        description=description if isinstance(description, str) else None,
    )
