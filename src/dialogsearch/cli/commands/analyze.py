"""Analyze command: show how text is tokenized and tagged."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from dialogsearch.analysis import Token, dialogue_analyzer
from dialogsearch.cli.utils.error_handler import handle_cli_error
from dialogsearch.config import get_settings_for_cli

console = Console()


def _token_row(position: int, token: Token) -> dict[str, object]:
    return {
        "position": position,
        "term": token.text,
        "payload": None if token.payload is None else int(token.payload),
        "start": token.start_offset,
        "end": token.end_offset,
        "increment": token.position_increment,
    }


def analyze_command(
    text: Annotated[str, typer.Argument(help="Text to analyze")],
    stop_words: Annotated[
        bool | None,
        typer.Option("--stop-words/--no-stop-words", help="Drop English stop words"),
    ] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Path to configuration file (YAML, TOML, or JSON)",
        ),
    ] = None,
) -> None:
    """Show the indexed terms of TEXT with their dialogue payloads.

    Payload 1 marks a word inside double quotes, 0 a word in narration.

    Examples:
        dialogsearch analyze 'He said "hello there" to her.'
    """
    try:
        settings = get_settings_for_cli(
            config_file=config,
            cli_overrides={"analysis_stop_words": stop_words},
        )
        rows = []
        position = -1
        for token in dialogue_analyzer(settings).analyze(text):
            position = max(position + token.position_increment, 0)
            rows.append(_token_row(position, token))

        if json_output:
            print(json.dumps(rows, indent=2))
            return

        table = Table(title="Analyzed tokens")
        for column in ("Pos", "Term", "Dialogue", "Offsets", "Inc"):
            table.add_column(column)
        for row in rows:
            table.add_row(
                str(row["position"]),
                str(row["term"]),
                "yes" if row["payload"] == 1 else "no",
                f"{row['start']}-{row['end']}",
                str(row["increment"]),
            )
        console.print(table)

    except typer.Exit:
        raise
    except Exception as e:
        handle_cli_error(e)
