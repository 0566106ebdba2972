"""
CineSearch Typer CLI Application

Command-line surface for exercising the search core by hand: searching,
suggestions, history, quota and cache maintenance.
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer

from cinesearch import __version__
from cinesearch.cli.common.context import CliContext, LogLevel, set_cli_context
from cinesearch.cli.common.error_handler import handle_cli_error
from cinesearch.cli.common.options import (
    filter_type_option,
    json_output_option,
    log_level_option,
    pages_option,
    verbose_option,
    version_option,
)
from cinesearch.cli.maintenance_handler import cache_command, history_command, quota_command
from cinesearch.cli.search_handler import search_command, suggest_command
from cinesearch.containers import container
from cinesearch.shared.constants import FilterType
from cinesearch.shared.logging import setup_structured_logger


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(f"cinesearch {__version__}")
        raise typer.Exit


app = typer.Typer(
    name="cinesearch",
    help="Hybrid local/remote movie and series search.",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
    invoke_without_command=True,
)


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[LogLevel, log_level_option] = LogLevel.WARNING,
    json_output: Annotated[bool, json_output_option] = False,
    version: Annotated[bool, version_option] = False,
) -> None:
    """Process the global options before any command runs."""
    if version:
        version_callback(value=True)

    context = CliContext(verbose=verbose, log_level=log_level, json_output=json_output)
    set_cli_context(context)
    try:
        settings = container.config()
        setup_structured_logger(
            level=context.get_effective_log_level(),
            log_file=settings.logging.file,
        )
    except Exception as e:
        exit_code = handle_cli_error(e, "main-callback", json_output=json_output)
        raise typer.Exit(exit_code) from e


@app.command("search")
def search_command_typer(
    term: Annotated[str, typer.Argument(help="Movie or series title to look for.")],
    filter_type: Annotated[str, filter_type_option] = FilterType.ALL,
    pages: Annotated[int, pages_option] = 1,
) -> None:
    """
    Search cached results first, then the remote catalog.

    Examples:
        cinesearch search inception
        cinesearch search "star wars" --type movie --pages 2
    """
    if filter_type not in FilterType.VALUES:
        raise typer.BadParameter(
            f"must be one of: {', '.join(FilterType.VALUES)}",
            param_hint="--type",
        )
    search_command(term, filter_type, pages)


@app.command("suggest")
def suggest_command_typer(
    text: Annotated[str, typer.Argument(help="Partial input to complete.")] = "",
) -> None:
    """Show ranked suggestions for partial input."""
    suggest_command(text)


@app.command("history")
def history_command_typer(
    delete: Annotated[
        Optional[str],
        typer.Option("--delete", "-d", help="Remove one entry from the history."),
    ] = None,
    clear: Annotated[bool, typer.Option("--clear", help="Remove every entry.")] = False,
) -> None:
    """List or edit the search history."""
    history_command(delete, clear)


@app.command("quota")
def quota_command_typer() -> None:
    """Show remote calls used in the current window."""
    quota_command()


@app.command("cache")
def cache_command_typer(
    clear: Annotated[bool, typer.Option("--clear", help="Wipe the result cache.")] = False,
) -> None:
    """Show the result cache size, optionally wiping it."""
    cache_command(clear)


if __name__ == "__main__":
    app()
