"""CLI for semantic model search (search, facets, details, MCP server)."""

import json
from typing import Annotated

import typer
from loguru import logger

from model_search.api import SearchApi
from model_search.config import DEFAULT_RESULT_LIMIT
from model_search.core.display import (
    format_download_count,
    format_download_span,
    format_relevance,
    item_details,
    view_to_dict,
)
from model_search.core.session import SearchSession
from model_search.errors import ConfigurationError
from model_search.logging_config import configure_logging
from model_search.models.item import SortMode
from model_search.protocols import SearchBackendProtocol

app = typer.Typer(help="Semantic model search: query, filter and group matching models.")

BackendUrlOption = Annotated[
    str | None,
    typer.Option("--backend-url", "-u", help="Search backend base URL (overrides environment)"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
) -> None:
    configure_logging(verbose=verbose, quiet=quiet)


def _make_backend(backend_url: str | None) -> SearchBackendProtocol:
    """Create the HTTP backend, exiting with status 2 if unconfigured."""
    try:
        return SearchApi(backend_url)
    except ConfigurationError as e:
        logger.error("{}", e)
        raise typer.Exit(2) from e


def _run(
    backend: SearchBackendProtocol, query: str, *, result_limit: int | None = None
) -> SearchSession:
    session = SearchSession()
    session.run_search(backend, query, result_limit=result_limit)
    if session.error:
        typer.echo(f"Error: {session.error}", err=True)
        raise typer.Exit(1)
    return session


@app.command()
def search(
    query: str = typer.Argument(..., help="Free-text description of the model you want"),
    tags: Annotated[
        list[str] | None,
        typer.Option("--tag", "-t", help="Only show models with any of these tags"),
    ] = None,
    min_downloads: Annotated[
        int | None,
        typer.Option("--min-downloads", help="Lower download bound (inclusive)"),
    ] = None,
    max_downloads: Annotated[
        int | None,
        typer.Option("--max-downloads", help="Upper download bound (inclusive)"),
    ] = None,
    sort: SortMode = typer.Option(SortMode.RELEVANCE, "--sort", "-s", help="Result order"),
    limit: int = typer.Option(DEFAULT_RESULT_LIMIT, "--limit", "-n", min=1, help="Max results"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    backend_url: BackendUrlOption = None,
) -> None:
    """Search for models and show them grouped by base name."""
    session = _run(_make_backend(backend_url), query, result_limit=limit)

    for tag in tags or []:
        session.toggle_tag(tag)
    if min_downloads is not None or max_downloads is not None:
        session.set_download_range(
            min_downloads if min_downloads is not None else 0,
            max_downloads if max_downloads is not None else session.facets.max_downloads,
        )
    session.set_sort(sort)
    view = session.view()

    if output_json:
        typer.echo(json.dumps(view_to_dict(view), indent=2))
        return

    typer.echo(f"Found {view.total} results (showing {view.shown}):\n")
    for group in view.groups:
        if group.is_single:
            item = group.items[0]
            typer.echo(
                f"  {item.identifier}  "
                f"[{format_download_count(item.downloads)} downloads, "
                f"relevance {format_relevance(item.distance)}]"
            )
        else:
            typer.echo(
                f"  {group.base_name} ({len(group.items)} variants)  "
                f"[{format_download_span(group)} downloads, "
                f"best relevance {format_relevance(group.stats.best_distance)}]"
            )
            for item in group.items:
                typer.echo(f"    - {item.identifier}  {format_download_count(item.downloads)}")


@app.command(name="tags")
def tags_cmd(
    query: str = typer.Argument(..., help="Search query"),
    backend_url: BackendUrlOption = None,
) -> None:
    """List the tags and download bound available for filtering a query."""
    session = _run(_make_backend(backend_url), query)
    facets = session.facets
    typer.echo(f"Max downloads: {format_download_count(facets.max_downloads)}")
    typer.echo(f"{len(facets.available_tags)} tags:")
    for tag in facets.available_tags:
        typer.echo(f"  {tag}")


@app.command()
def show(
    query: str = typer.Argument(..., help="Search query"),
    model_id: str = typer.Argument(..., help="Model identifier from the results"),
    backend_url: BackendUrlOption = None,
) -> None:
    """Show details for one model from a query's results."""
    session = _run(_make_backend(backend_url), query)
    try:
        item = session.select(model_id)
    except KeyError:
        typer.echo(f"Model '{model_id}' not found in results.")
        raise typer.Exit(1) from None

    details = item_details(item)  # type: ignore[arg-type]
    typer.echo(details["model_id"])
    typer.echo(f"  downloads: {details['downloads_display']}")
    typer.echo(f"  relevance: {details['relevance']}")
    if details["tags"]:
        typer.echo(f"  tags: {', '.join(details['tags'])}")
    if details["description"]:
        typer.echo(f"\n{details['description']}\n")
    typer.echo(f"  {details['url']}")


@app.command()
def mcp() -> None:
    """Run the MCP server on stdio."""
    from model_search.mcp.server import run_mcp_server

    run_mcp_server()
