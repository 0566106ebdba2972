"""Handlers for the ``search`` and ``suggest`` commands."""

from __future__ import annotations

import asyncio
import logging

import typer
from rich.console import Console
from rich.table import Table

from cinesearch.cli.common.context import get_cli_context
from cinesearch.cli.common.error_handler import handle_cli_error
from cinesearch.cli.json_formatter import format_json_output
from cinesearch.containers import container
from cinesearch.core.search import SearchState

logger = logging.getLogger(__name__)

console = Console()


async def run_search(term: str, filter_type: str, pages: int) -> SearchState:
    """Search, then load up to ``pages - 1`` further pages.

    The term is recorded in the history when the search settles with
    results.
    """
    orchestrator = container.search_orchestrator()
    history = container.history_store()
    await orchestrator.initialize()
    history.load()

    state = await orchestrator.search(term, filter_type, 1)
    for _ in range(pages - 1):
        if not state.has_more_pages:
            break
        state = await orchestrator.load_more_results()

    if state.results and state.error is None:
        history.record(term)
    return state


async def run_suggest(text: str) -> list[str]:
    cache = container.result_cache()
    history = container.history_store()
    engine = container.suggestion_engine()
    cache.load()
    history.load()
    await engine.initialize()
    try:
        return engine.compute(text, history.entries)
    finally:
        engine.close()


def search_command(term: str, filter_type: str, pages: int) -> None:
    context = get_cli_context()
    try:
        state = asyncio.run(run_search(term, filter_type, pages))
    except Exception as e:
        exit_code = handle_cli_error(e, "search", json_output=context.json_output)
        raise typer.Exit(exit_code) from e

    if context.json_output:
        typer.echo(
            format_json_output(
                success=state.error is None,
                command="search",
                data=state.to_dict(),
                errors=[state.error.message] if state.error else None,
            ).decode("utf-8")
        )
    else:
        _print_state(state)

    if state.error is not None:
        raise typer.Exit(1)


def suggest_command(text: str) -> None:
    context = get_cli_context()
    try:
        suggestions = asyncio.run(run_suggest(text))
    except Exception as e:
        exit_code = handle_cli_error(e, "suggest", json_output=context.json_output)
        raise typer.Exit(exit_code) from e

    if context.json_output:
        typer.echo(
            format_json_output(
                success=True,
                command="suggest",
                data={"input": text, "suggestions": suggestions},
            ).decode("utf-8")
        )
        return

    if not suggestions:
        console.print("[yellow]No suggestions.[/yellow]")
        return
    for suggestion in suggestions:
        console.print(f"  {suggestion}", markup=False, highlight=False)


def _print_state(state: SearchState) -> None:
    if state.error is not None:
        console.print(f"[red]{state.error.message}[/red]")
        return
    if not state.results:
        console.print("[yellow]No results found.[/yellow]")
        return

    table = Table(title=f"Results for '{state.query}'")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Year")
    table.add_column("Type")
    table.add_column("Genre")
    table.add_column("ID", style="dim")
    for position, item in enumerate(state.results, start=1):
        table.add_row(str(position), item.title, item.year, item.type, item.genre, item.id)
    console.print(table)

    console.print(
        f"{len(state.results)} of {state.total_results} results, "
        f"page {state.current_page}/{max(state.total_pages, 1)}, "
        f"{state.api_call_count} API calls used today",
        highlight=False,
    )
