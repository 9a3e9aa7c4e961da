"""Group size and version variants of the same model together."""

from collections.abc import Iterable, Sequence

from model_search.models.item import GroupStats, Item, ResultGroup


def base_name(identifier: str) -> str:
    """Derive the grouping key for an identifier.

    ``org/model-7b`` -> ``org/model``, ``model-v2`` -> ``model``.
    Identifiers without a hyphen are returned unchanged.
    """
    parts = identifier.split("/")
    if len(parts) == 2:
        namespace, name = parts
    else:
        namespace, name = None, identifier

    base = name.split("-", 1)[0]
    if namespace is not None:
        return f"{namespace}/{base}"
    return base


def group_by_base_name(items: Iterable[Item]) -> dict[str, tuple[Item, ...]]:
    """Partition items by base name.

    Groups iterate in order of first occurrence; items keep their input
    order within a group.
    """
    groups: dict[str, list[Item]] = {}
    for item in items:
        groups.setdefault(base_name(item.identifier), []).append(item)
    return {key: tuple(members) for key, members in groups.items()}


def compute_group_stats(group: Sequence[Item]) -> GroupStats:
    """Summarize a non-empty group.

    The representative item is the first one after a stable sort by
    ascending distance. Items with unknown downloads do not contribute
    to the download bounds.
    """
    assert group, "compute_group_stats called with an empty group"

    best = sorted(group, key=lambda item: item.distance)[0]
    known = [item.downloads for item in group if item.downloads is not None]

    return GroupStats(
        min_downloads=min(known) if known else None,
        max_downloads=max(known) if known else None,
        best_distance=best.distance,
        representative_tags=best.tags,
    )


def build_groups(items: Iterable[Item]) -> tuple[ResultGroup, ...]:
    """Group items and attach statistics to each group."""
    return tuple(
        ResultGroup(base_name=key, items=members, stats=compute_group_stats(members))
        for key, members in group_by_base_name(items).items()
    )
