"""Decide which tags are worth showing to the user."""

from collections.abc import Iterable

# Compared against the lowercased tag.
EXCLUDED_TAGS: frozenset[str] = frozenset({"transformers"})

EXCLUDED_TAG_PREFIXES: tuple[str, ...] = (
    "arxiv:",
    "base_model:",
    "dataset:",
    "diffusers:",
    "license:",
)


def is_displayable(tag: object) -> bool:
    """Return True if the tag is informative enough to display.

    Rejects non-strings, tags of three characters or fewer, generic
    framework tags and namespaced metadata tags (``license:mit`` etc.).
    """
    if not isinstance(tag, str) or not tag:
        return False
    if len(tag) <= 3:
        return False
    lower_tag = tag.lower()
    if lower_tag in EXCLUDED_TAGS:
        return False
    return not lower_tag.startswith(EXCLUDED_TAG_PREFIXES)


def displayable_tags(tags: Iterable[object]) -> tuple[str, ...]:
    """Filter tags for display, keeping source order."""
    return tuple(t for t in tags if is_displayable(t))  # type: ignore[misc]
