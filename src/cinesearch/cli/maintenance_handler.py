"""Handlers for the ``history``, ``quota`` and ``cache`` commands."""

from __future__ import annotations

from datetime import datetime, timezone

import typer
from rich.console import Console

from cinesearch.cli.common.context import get_cli_context
from cinesearch.cli.common.error_handler import handle_cli_error
from cinesearch.cli.json_formatter import format_json_output
from cinesearch.containers import container

console = Console()


def _emit(command: str, data: dict) -> None:
    typer.echo(format_json_output(success=True, command=command, data=data).decode("utf-8"))


def history_command(delete: str | None, clear: bool) -> None:
    context = get_cli_context()
    try:
        history = container.history_store()
        history.load()
        if clear:
            history.clear_all()
        elif delete:
            history.delete(delete)
        entries = list(history.entries)
    except Exception as e:
        exit_code = handle_cli_error(e, "history", json_output=context.json_output)
        raise typer.Exit(exit_code) from e

    if context.json_output:
        _emit("history", {"history": entries})
        return
    if not entries:
        console.print("[yellow]Search history is empty.[/yellow]")
        return
    for position, entry in enumerate(entries, start=1):
        console.print(f"{position:>3}. {entry}", markup=False, highlight=False)


def quota_command() -> None:
    context = get_cli_context()
    try:
        limiter = container.rate_limiter()
        state = limiter.load()
    except Exception as e:
        exit_code = handle_cli_error(e, "quota", json_output=context.json_output)
        raise typer.Exit(exit_code) from e

    reset_at = datetime.fromtimestamp(state.reset_at, tz=timezone.utc)
    if context.json_output:
        _emit(
            "quota",
            {
                "calls": state.calls,
                "max_calls": limiter.max_calls,
                "remaining": limiter.remaining(),
                "reset_at": reset_at.isoformat(),
            },
        )
        return
    console.print(
        f"API calls: {state.calls}/{limiter.max_calls}, "
        f"window resets at {reset_at:%Y-%m-%d %H:%M} UTC",
        highlight=False,
    )


def cache_command(clear: bool) -> None:
    context = get_cli_context()
    try:
        cache = container.result_cache()
        cache.load()
        if clear:
            cache.clear()
    except Exception as e:
        exit_code = handle_cli_error(e, "cache", json_output=context.json_output)
        raise typer.Exit(exit_code) from e

    if context.json_output:
        _emit("cache", {"size": len(cache), "max_size": cache.max_size, "cleared": clear})
        return
    if clear:
        console.print("[green]Result cache cleared.[/green]")
    console.print(f"Cached items: {len(cache)}/{cache.max_size}", highlight=False)
