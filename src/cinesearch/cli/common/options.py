"""
Reusable Typer Options Module

Common option definitions shared by the main callback and the commands.
"""

from __future__ import annotations

import typer

from cinesearch.shared.constants import FilterType

verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)

log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: WARNING.",
)

json_output_option = typer.Option(
    "--json",
    help="Enable machine-readable JSON output instead of human-readable format.",
)

version_option = typer.Option(
    "--version",
    "-V",
    help="Show version information and exit.",
    is_eager=True,
)

filter_type_option = typer.Option(
    "--type",
    "-t",
    help=f"Result type filter: {', '.join(FilterType.VALUES)}.",
)

pages_option = typer.Option(
    "--pages",
    "-p",
    min=1,
    help="Number of result pages to load.",
)
