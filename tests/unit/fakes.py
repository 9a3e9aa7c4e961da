"""Fake implementations for testing."""

import time

from model_search.errors import SearchRequestError
from model_search.models.item import Item


def make_item(
    identifier: str,
    *,
    distance: float = 0.5,
    downloads: int | None = 0,
    tags: tuple[str, ...] = (),
    description: str | None = None,
) -> Item:
    """Build an Item with defaults for the fields a test does not care about."""
    return Item(
        identifier=identifier,
        distance=distance,
        tags=tags,
        downloads=downloads,
        description=description,
    )


class FakeBackend:
    """In-memory fake for SearchApi.

    Stores predefined responses per query and records all calls.
    """

    def __init__(self) -> None:
        self.responses: dict[str, list[Item]] = {}
        self.failures: dict[str, str] = {}
        self.delays: dict[str, float] = {}
        self.calls: list[tuple[str, int]] = []

    def add_response(self, query: str, items: list[Item]) -> None:
        """Register the items returned for a query."""
        self.responses[query] = items

    def add_failure(self, query: str, message: str) -> None:
        """Make a query fail with SearchRequestError."""
        self.failures[query] = message

    def search(self, query: str, *, top_k: int) -> list[Item]:
        """Return the predefined response and record the call."""
        self.calls.append((query, top_k))
        if query in self.delays:
            time.sleep(self.delays[query])
        if query in self.failures:
            raise SearchRequestError(self.failures[query])
        return list(self.responses.get(query, []))[:top_k]
