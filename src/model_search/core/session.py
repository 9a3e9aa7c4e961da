"""Search session: owns results and filter state, recomputes the view.

Every user action replaces the FilterState snapshot rather than mutating
it. Search responses are tagged with a sequence number and only the
response to the most recently issued request is applied.
"""

import dataclasses
from collections.abc import Sequence

from loguru import logger

from model_search.api import top_k_for
from model_search.core.facets import extract_facets
from model_search.core.pipeline import build_view
from model_search.errors import SearchRequestError
from model_search.models.item import Facets, FilterState, Item, SearchView, SortMode
from model_search.protocols import SearchBackendProtocol


def _check_limit(result_limit: int) -> None:
    if result_limit < 1:
        msg = f"Result limit must be positive, got {result_limit}"
        raise ValueError(msg)


class SearchSession:
    """State owner for one interactive search UI."""

    def __init__(self) -> None:
        self.query: str = ""
        self.results: tuple[Item, ...] = ()
        self.facets: Facets = Facets()
        self.filters: FilterState = FilterState.defaults()
        self.error: str | None = None
        self.loading: bool = False
        self.selected: Item | None = None
        # Query the current results (or error) belong to; None before the first response.
        self.answered_query: str | None = None

        self._issued_seq = 0
        self._view_key: tuple[tuple[Item, ...], FilterState] | None = None
        self._view: SearchView | None = None

    # --- Search lifecycle ---

    def begin_search(self, query: str, *, result_limit: int | None = None) -> int:
        """Start a new search and return its sequence number.

        Filters go back to their defaults, except for ``result_limit`` when
        given, so the request asks for enough candidates. A newer call
        supersedes any request still in flight.
        """
        filters = FilterState.defaults(self.facets.max_downloads)
        if result_limit is not None:
            _check_limit(result_limit)
            filters = dataclasses.replace(filters, result_limit=result_limit)

        self._issued_seq += 1
        self.query = query
        self.loading = True
        self.error = None
        self.filters = filters
        logger.debug("Search #{} started: {!r}", self._issued_seq, query)
        return self._issued_seq

    def is_current(self, seq: int) -> bool:
        return seq == self._issued_seq

    def complete_search(self, seq: int, items: Sequence[Item]) -> bool:
        """Apply a successful response. Returns False if it was stale."""
        if not self.is_current(seq):
            logger.debug("Discarding stale response #{} (latest #{})", seq, self._issued_seq)
            return False

        self.loading = False
        self.results = tuple(items)
        self.facets = extract_facets(self.results)
        self.filters = dataclasses.replace(
            self.filters, download_range=(0, self.facets.max_downloads)
        )
        self.answered_query = self.query
        self.selected = None
        logger.debug("Search #{} returned {} results", seq, len(self.results))
        return True

    def fail_search(self, seq: int, message: str) -> bool:
        """Record a failed search. Previous results stay in place."""
        if not self.is_current(seq):
            logger.debug("Discarding stale failure #{}: {}", seq, message)
            return False

        self.loading = False
        self.error = message
        self.answered_query = self.query
        logger.warning("Search #{} failed: {}", seq, message)
        return True

    def top_k(self) -> int:
        return top_k_for(self.filters.result_limit)

    def has_answer_for(self, query: str) -> bool:
        """True if ``query`` was answered successfully and nothing newer is pending."""
        return not self.loading and self.error is None and self.answered_query == query

    def run_search(
        self, backend: SearchBackendProtocol, query: str, *, result_limit: int | None = None
    ) -> SearchView:
        """Run a complete search against a backend on the calling thread."""
        seq = self.begin_search(query, result_limit=result_limit)
        try:
            items = backend.search(query, top_k=self.top_k())
        except SearchRequestError as e:
            self.fail_search(seq, str(e))
        else:
            self.complete_search(seq, items)
        return self.view()

    # --- Filter actions ---

    def toggle_tag(self, tag: str) -> FilterState:
        current = self.filters.selected_tags
        if tag in current:
            selected = tuple(t for t in current if t != tag)
        else:
            selected = (*current, tag)
        return self._set_filters(selected_tags=selected)

    def set_download_range(self, low: int, high: int) -> FilterState:
        if low > high:
            low, high = high, low
        return self._set_filters(download_range=(low, high))

    def set_sort(self, sort_mode: SortMode | str) -> FilterState:
        return self._set_filters(sort_mode=sort_mode)

    def set_limit(self, result_limit: int) -> FilterState:
        _check_limit(result_limit)
        return self._set_filters(result_limit=result_limit)

    def clear_filters(self) -> FilterState:
        self.filters = FilterState.defaults(self.facets.max_downloads)
        return self.filters

    def select(self, identifier: str | None) -> Item | None:
        """Select the item shown in the detail view, or clear with None."""
        if identifier is None:
            self.selected = None
            return None
        for item in self.results:
            if item.identifier == identifier:
                self.selected = item
                return item
        msg = f"No result with identifier {identifier!r}"
        raise KeyError(msg)

    def _set_filters(self, **changes: object) -> FilterState:
        self.filters = dataclasses.replace(self.filters, **changes)  # type: ignore[arg-type]
        return self.filters

    # --- Derived state ---

    def view(self) -> SearchView:
        """Return the display-ready view for the current snapshot.

        Memoized: without a change to results or filters the same object
        is returned.
        """
        key = (self.results, self.filters)
        if self._view is None or self._view_key != key:
            self._view = build_view(self.results, self.filters)
            self._view_key = key
        return self._view
