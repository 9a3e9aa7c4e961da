"""Protocols for dependency injection."""

from typing import Protocol, runtime_checkable

from model_search.models.item import Item


@runtime_checkable
class SearchBackendProtocol(Protocol):
    """Protocol for semantic search backends."""

    def search(self, query: str, *, top_k: int) -> list[Item]:
        """Return up to top_k items ordered by the backend's ranking."""
        ...
