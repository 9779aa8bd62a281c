"""Error reporting for CLI commands."""

from __future__ import annotations

import traceback

import typer
from pydantic import ValidationError
from rich.console import Console

from dialogsearch.config import get_logger
from dialogsearch.exceptions import DialogSearchError

logger = get_logger(__name__)
console = Console(stderr=True)


def handle_cli_error(
    error: Exception, verbose: bool = False, exit_code: int = 1
) -> None:
    """Report an error raised by a CLI command and exit.

    Args:
        error: The exception that was raised
        verbose: Whether to show details and tracebacks
        exit_code: Exit code to use when exiting
    """
    if isinstance(error, DialogSearchError):
        console.print(f"[red]✗ {error.message}[/red]")
        if error.hint:
            console.print(f"[yellow]→ {error.hint}[/yellow]")
        if verbose and error.details:
            for key, value in error.details.items():
                console.print(f"  [dim]{key}:[/dim] {value}")
        logger.error(
            "Command failed",
            error_type=type(error).__name__,
            message=error.message,
        )

    elif isinstance(error, ValidationError):
        # Bad values from --config files, DIALOGSEARCH_ variables or options
        console.print("[red]✗ Invalid settings[/red]")
        for item in error.errors():
            field = ".".join(str(part) for part in item["loc"])
            console.print(f"  {field}: {item['msg']}")
        console.print(
            "[yellow]→ Check the command options, the config file and "
            "DIALOGSEARCH_ environment variables[/yellow]"
        )
        logger.error("Invalid settings", errors=error.error_count())

    elif isinstance(error, FileNotFoundError):
        console.print(f"[red]✗ File not found: {error}[/red]")
        logger.error("File not found", filename=getattr(error, "filename", None))

    else:
        console.print(f"[red]✗ Unexpected error: {error!s}[/red]")
        if verbose:
            console.print(traceback.format_exc())
        else:
            console.print("[dim]Run with --verbose for full error details[/dim]")
        logger.error(
            "Unexpected error", error_type=type(error).__name__, exc_info=True
        )

    raise typer.Exit(exit_code)
