"""Filter, sort and cap the raw results into the displayed view."""

from collections.abc import Sequence

from loguru import logger

from model_search.core.facets import extract_facets
from model_search.core.grouping import build_groups
from model_search.models.item import FilterState, Item, SearchView, SortMode

# Sort values used by the original web front-end.
SORT_ALIASES: dict[str, SortMode] = {
    "downloads-high": SortMode.DOWNLOADS_DESC,
    "downloads-low": SortMode.DOWNLOADS_ASC,
}


def resolve_sort_mode(value: SortMode | str) -> SortMode | None:
    """Map a sort value to a SortMode, or None if it is not recognized."""
    if isinstance(value, SortMode):
        return value
    if value in SORT_ALIASES:
        return SORT_ALIASES[value]
    try:
        return SortMode(value)
    except ValueError:
        return None


def _matches_tags(item: Item, selected: frozenset[str]) -> bool:
    return not selected.isdisjoint(item.tags)


def _in_range(item: Item, low: int, high: int) -> bool:
    return item.downloads is not None and low <= item.downloads <= high


def _sort(items: list[Item], sort_mode: SortMode | str) -> list[Item]:
    mode = resolve_sort_mode(sort_mode)
    if mode is SortMode.RELEVANCE:
        return sorted(items, key=lambda item: item.distance)
    # reverse=True keeps equal keys in input order.
    if mode is SortMode.DOWNLOADS_DESC:
        return sorted(items, key=lambda item: item.downloads or 0, reverse=True)
    if mode is SortMode.DOWNLOADS_ASC:
        return sorted(items, key=lambda item: item.downloads or 0)

    logger.debug("Unrecognized sort mode {!r}, keeping backend order", sort_mode)
    return items


def apply_pipeline(raw_items: Sequence[Item], state: FilterState) -> tuple[Item, ...]:
    """Apply tag filter, download range, sort and limit, in that order.

    Selected tags are ORed: an item passes if it carries any of them.
    The download range is inclusive on both ends. All sorts are stable.
    """
    filtered = list(raw_items)

    if state.selected_tags:
        selected = frozenset(state.selected_tags)
        filtered = [item for item in filtered if _matches_tags(item, selected)]

    low, high = state.download_range
    filtered = [item for item in filtered if _in_range(item, low, high)]

    filtered = _sort(filtered, state.sort_mode)

    limited = filtered[: max(state.result_limit, 0)]
    logger.debug(
        "Applying results limit: {}, filtered results: {}", state.result_limit, len(limited)
    )
    return tuple(limited)


def build_view(raw_items: Sequence[Item], state: FilterState) -> SearchView:
    """Run the pipeline and group its output for display.

    Groups are built after truncation, so a group may show fewer members
    than the raw results hold.
    """
    items = apply_pipeline(raw_items, state)
    return SearchView(
        items=items,
        groups=build_groups(items),
        facets=extract_facets(raw_items),
        filters=state,
        total=len(raw_items),
    )
