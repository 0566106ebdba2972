"""
CLI Error Handling Utilities

Consistent error output and exit codes for CLI commands.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from cinesearch.cli.json_formatter import format_json_output
from cinesearch.shared.errors import (
    ApplicationError,
    CineSearchError,
    CliError,
    DomainError,
    InfrastructureError,
    create_cli_error,
)

logger = logging.getLogger(__name__)

EXIT_USAGE_ERROR = 2
EXIT_INTERRUPTED = 130


def handle_cli_error(
    error: Exception,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Log and print an error raised by a command.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    cli_error = _map_error_to_cli_error(error, command)
    context: dict[str, Any] = {
        "command": command,
        "error_type": type(error).__name__,
        "error_code": cli_error.code.value,
    }

    if isinstance(error, (KeyboardInterrupt, DomainError)):
        logger.info("Command %s stopped: %s", command, cli_error.message, extra={"context": context})
    else:
        logger.error(
            "CLI error in %s: %s",
            command,
            cli_error.message,
            exc_info=not isinstance(error, CineSearchError),
            extra={"context": context},
        )

    if json_output:
        output = format_json_output(
            success=False,
            command=command,
            errors=[cli_error.message],
            data={
                "error_code": _root_code(error, cli_error),
                "error_type": type(error).__name__,
                "exit_code": cli_error.exit_code,
            },
        )
        sys.stdout.write(output.decode("utf-8") + "\n")
        sys.stdout.flush()
    else:
        sys.stderr.write(f"Error: {cli_error.message}\n")

    return cli_error.exit_code


def _root_code(error: Exception, cli_error: CliError) -> str:
    if isinstance(error, CineSearchError):
        return error.code.value
    return cli_error.code.value


def _map_error_to_cli_error(error: Exception, command: str) -> CliError:
    """Map exception types to CLI errors and exit codes."""
    if isinstance(error, CliError):
        return error

    if isinstance(error, DomainError):
        return create_cli_error(
            message=error.message,
            command=command,
            original_error=error,
            exit_code=EXIT_USAGE_ERROR,
        )

    if isinstance(error, ApplicationError):
        return create_cli_error(
            message=f"Application error: {error.message}",
            command=command,
            original_error=error,
        )

    if isinstance(error, InfrastructureError):
        return create_cli_error(
            message=f"Infrastructure error: {error.message}",
            command=command,
            original_error=error,
        )

    if isinstance(error, KeyboardInterrupt):
        return create_cli_error(
            message="Command interrupted by user",
            command=command,
            original_error=error,
            exit_code=EXIT_INTERRUPTED,
        )

    if isinstance(error, OSError):
        return create_cli_error(
            message=f"File system error: {error}",
            command=command,
            original_error=error,
        )

    return create_cli_error(
        message=f"Unexpected error: {error}",
        command=command,
        original_error=error,
    )
