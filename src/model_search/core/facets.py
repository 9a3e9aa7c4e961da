"""Derive filter-control inputs from the raw result set."""

from collections.abc import Iterable

from model_search.core.tags import is_displayable
from model_search.models.item import Facets, Item


def extract_facets(raw_items: Iterable[Item]) -> Facets:
    """Collect the displayable tag universe and the download upper bound.

    Must be given the unfiltered results: computing facets from the
    filtered view would hide tags the user can still reach.
    """
    tags: set[str] = set()
    max_downloads = 0

    for item in raw_items:
        tags.update(tag for tag in item.tags if is_displayable(tag))
        if item.downloads is not None and item.downloads > max_downloads:
            max_downloads = item.downloads

    return Facets(available_tags=tuple(sorted(tags)), max_downloads=max_downloads)
