"""Semantic model search: client-side filtering, grouping and ranking of results."""

from model_search.api import SearchApi
from model_search.core.pipeline import apply_pipeline, build_view
from model_search.core.session import SearchSession
from model_search.models.item import FilterState, Item, SortMode
from model_search.protocols import SearchBackendProtocol

__all__ = [
    "FilterState",
    "Item",
    "SearchApi",
    "SearchBackendProtocol",
    "SearchSession",
    "SortMode",
    "apply_pipeline",
    "build_view",
]
