"""MCP server exposing semantic model search tools."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from model_search.api import SearchApi
from model_search.config import DEFAULT_RESULT_LIMIT, RESULT_LIMIT_CHOICES
from model_search.core.display import item_details, view_to_dict
from model_search.core.session import SearchSession
from model_search.errors import SearchRequestError
from model_search.protocols import SearchBackendProtocol

SUPERSEDED = "Superseded by a newer query while this one was running; call again to retry."

# --- Core functions (testable without MCP context) ---


def model_search(
    session: SearchSession,
    *,
    tags: list[str] | None = None,
    min_downloads: int | None = None,
    max_downloads: int | None = None,
    sort: str = "relevance",
    limit: int = DEFAULT_RESULT_LIMIT,
) -> dict[str, Any]:
    """Apply filters to the session's current results and return the grouped view.

    Args:
        session: Session holding the latest search results.
        tags: Keep models carrying any of these tags.
        min_downloads: Inclusive lower download bound.
        max_downloads: Inclusive upper download bound.
        sort: "relevance", "downloads-desc" or "downloads-asc".
        limit: Max models to return (1-100, default 40).
    """
    if session.error:
        return {"error": session.error, "groups": [], "total": 0, "shown": 0}

    session.clear_filters()
    for tag in tags or []:
        session.toggle_tag(tag)
    if min_downloads is not None or max_downloads is not None:
        session.set_download_range(
            min_downloads if min_downloads is not None else 0,
            max_downloads if max_downloads is not None else session.facets.max_downloads,
        )
    session.set_sort(sort)
    session.set_limit(max(1, min(limit, max(RESULT_LIMIT_CHOICES))))
    result = view_to_dict(session.view())
    result["query"] = session.query
    return result


def model_search_facets(session: SearchSession) -> dict[str, Any]:
    """Return tags and download bound available for the current results."""
    if session.error:
        return {"error": session.error, "available_tags": [], "max_downloads": 0}
    return {
        "query": session.query,
        "available_tags": list(session.facets.available_tags),
        "max_downloads": session.facets.max_downloads,
        "count": len(session.results),
    }


def model_search_details(session: SearchSession, *, model_id: str) -> dict[str, Any]:
    """Return the detail view of one model from the current results."""
    try:
        item = session.select(model_id)
    except KeyError:
        return {"error": f"Model '{model_id}' not found in the current results."}
    return item_details(item)  # type: ignore[arg-type]


async def run_query(
    session: SearchSession, backend: SearchBackendProtocol, query: str
) -> bool:
    """Fetch results without blocking the event loop.

    Returns False if a newer query was issued while this one was in flight.
    """
    seq = session.begin_search(query)
    try:
        items = await asyncio.to_thread(backend.search, query, top_k=session.top_k())
    except SearchRequestError as e:
        return session.fail_search(seq, str(e))
    return session.complete_search(seq, items)


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    backend: SearchBackendProtocol
    session: SearchSession = field(default_factory=SearchSession)


async def _ensure_results(server: ServerContext, query: str) -> bool:
    """Make the session hold the answer to ``query``.

    A query already answered, even with zero hits, is not sent again.
    Returns False if a newer query replaced this one while it was in flight.
    """
    if server.session.has_answer_for(query):
        return True
    return await run_query(server.session, server.backend, query)


async def search_models(
    server: ServerContext,
    query: str,
    *,
    tags: list[str] | None = None,
    min_downloads: int | None = None,
    max_downloads: int | None = None,
    sort: str = "relevance",
    limit: int = DEFAULT_RESULT_LIMIT,
) -> dict[str, Any]:
    """Fetch results for ``query`` if needed, then filter and group them."""
    if not await _ensure_results(server, query):
        return {"error": SUPERSEDED, "query": query, "groups": [], "total": 0, "shown": 0}
    return model_search(
        server.session,
        tags=tags,
        min_downloads=min_downloads,
        max_downloads=max_downloads,
        sort=sort,
        limit=limit,
    )


async def search_facets(server: ServerContext, query: str) -> dict[str, Any]:
    """Fetch results for ``query`` if needed and return their facets."""
    if not await _ensure_results(server, query):
        return {"error": SUPERSEDED, "query": query, "available_tags": [], "max_downloads": 0}
    return model_search_facets(server.session)


# --- MCP Server Setup ---


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Resolve the backend on startup; fails fast if it is not configured."""
    backend = SearchApi()
    logger.info("Model search backend: {}", backend.base_url)
    yield ServerContext(backend=backend)


mcp_server = FastMCP(
    "model-search",
    instructions="""\
Semantic search over machine-learning models. Results are grouped by base
name, so size and version variants (org/model-7b, org/model-13b) appear
together under org/model.

1. Call model_search_tool with a natural-language query.
2. Narrow with tags from model_search_facets_tool; several tags widen the
   match (any tag), the download range and limit narrow it.
3. Call model_search_details_tool for a model's description and URL.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool()
async def model_search_tool(
    ctx: Context,
    query: str,
    tags: list[str] | None = None,
    min_downloads: int | None = None,
    max_downloads: int | None = None,
    sort: str = "relevance",
    limit: int = DEFAULT_RESULT_LIMIT,
) -> dict[str, Any]:
    """Search models by description, then filter, sort and group the hits.

    Args:
        query: Natural-language description of the wanted model.
        tags: Keep models with any of these tags.
        min_downloads: Inclusive lower download bound.
        max_downloads: Inclusive upper download bound.
        sort: "relevance", "downloads-desc" or "downloads-asc".
        limit: Max models to return (1-100, default 40).
    """
    return await search_models(
        _ctx(ctx),
        query,
        tags=tags,
        min_downloads=min_downloads,
        max_downloads=max_downloads,
        sort=sort,
        limit=limit,
    )


@mcp_server.tool()
async def model_search_facets_tool(ctx: Context, query: str) -> dict[str, Any]:
    """List the tags and maximum download count available for a query.

    Args:
        query: Natural-language description of the wanted model.
    """
    return await search_facets(_ctx(ctx), query)


@mcp_server.tool()
async def model_search_details_tool(ctx: Context, model_id: str) -> dict[str, Any]:
    """Show description, tags and URL of a model from the last search.

    Args:
        model_id: Identifier as returned by model_search_tool.
    """
    return model_search_details(_ctx(ctx).session, model_id=model_id)


def run_mcp_server() -> None:
    """Run the MCP server with stdio transport."""
    from model_search.logging_config import configure_logging

    configure_logging(verbose=False)
    mcp_server.run(transport="stdio")
