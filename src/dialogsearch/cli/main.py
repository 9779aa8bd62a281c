"""Main CLI entry point."""

from __future__ import annotations

import json
from typing import Annotated

import typer
from rich.console import Console

from dialogsearch import __version__
from dialogsearch.cli.commands import analyze_command, search_command
from dialogsearch.config import get_logger

logger = get_logger(__name__)
console = Console()

app = typer.Typer(
    name="dialogsearch",
    help="Full-text search that knows what characters say",
    pretty_exceptions_enable=False,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command(name="analyze")(analyze_command)
app.command(name="search")(search_command)


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show dialogsearch version."""
    if json_output:
        print(json.dumps({"name": "dialogsearch", "version": __version__}))
    else:
        console.print(f"dialogsearch v{__version__}")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
