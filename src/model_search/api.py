"""HTTP client for the semantic model search backend."""

from typing import Any

import requests
from loguru import logger

from model_search.config import MIN_TOP_K, REQUEST_TIMEOUT, resolve_backend_url
from model_search.errors import SearchRequestError
from model_search.models.item import Item, parse_item

UNKNOWN_ERROR = "An unknown error occurred"


def top_k_for(result_limit: int) -> int:
    """Number of candidates to request for a given display cap."""
    return max(MIN_TOP_K, result_limit)


class SearchApi:
    """Client for the ``POST /search`` endpoint."""

    def __init__(self, base_url: str | None = None, *, timeout: float = REQUEST_TIMEOUT) -> None:
        # Raises ConfigurationError before any request is attempted.
        self.base_url = resolve_backend_url(base_url)
        self.timeout = timeout
        self.sess = requests.Session()
        logger.debug("Search API ready: base_url {!r}", self.base_url)

    def search(self, query: str, *, top_k: int) -> list[Item]:
        """Run a query and return parsed items in backend order.

        Raises:
            SearchRequestError: on transport failure, non-2xx status, or a
                response that cannot be parsed.
        """
        logger.debug("Making request: {!r} top_k={}", query[:32], top_k)
        try:
            r = self.sess.post(
                f"{self.base_url}/search",
                json={"query": query, "top_k": top_k},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise SearchRequestError(str(e) or UNKNOWN_ERROR) from e

        if not r.ok:
            msg = f"Server responded with {r.status_code}: {r.reason}"
            raise SearchRequestError(msg)

        try:
            body: dict[str, Any] = r.json()
        except ValueError as e:
            msg = f"Invalid JSON from search backend: {e}"
            raise SearchRequestError(msg) from e

        raw_results = body.get("results") if isinstance(body, dict) else None
        if raw_results is None:
            return []
        if not isinstance(raw_results, list):
            msg = f"Unexpected results payload: {type(raw_results).__name__}"
            raise SearchRequestError(msg)

        try:
            items = [parse_item(raw) for raw in raw_results]
        except (ValueError, AttributeError) as e:
            raise SearchRequestError(f"Malformed search result: {e}") from e

        logger.debug("Received {} results", len(items))
        return items
