"""Search command: index text files and run a dialogue-aware query."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from dialogsearch.analysis import dialogue_analyzer, standard_analyzer
from dialogsearch.cli.utils.error_handler import handle_cli_error
from dialogsearch.config import get_logger, get_settings_for_cli
from dialogsearch.ingest import DocumentIngestor
from dialogsearch.search import (
    ClassicSimilarity,
    DialogueAwareSimilarity,
    InMemoryIndex,
    IndexSearcher,
    build_query,
    payload_function_for,
)

logger = get_logger(__name__)
console = Console()


def search_command(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Text files, zip archives or directories to index"),
    ],
    query: Annotated[
        str,
        typer.Option("--query", "-q", help="Terms to look for"),
    ],
    aggregation: Annotated[
        str | None,
        typer.Option(
            "--aggregation",
            "-a",
            help="Combine occurrence scores by min, max or average",
        ),
    ] = None,
    anywhere: Annotated[
        bool,
        typer.Option(
            "--anywhere",
            help="Ignore dialogue payloads and match narration too",
        ),
    ] = False,
    require_all: Annotated[
        bool,
        typer.Option("--all", help="Every query term must match"),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-l", help="Maximum number of results to return"),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", "-w", help="Indexing threads"),
    ] = None,
    explain: Annotated[
        bool,
        typer.Option("--explain", help="Show how each score was computed"),
    ] = False,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show detailed error information"),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Path to configuration file (YAML, TOML, or JSON)",
        ),
    ] = None,
) -> None:
    """Index PATHS and rank documents where the query terms are spoken.

    Matches outside double quotes score zero. With the default "min"
    aggregation a document only matches if every occurrence of the term is
    inside dialogue; "average" ranks documents by the share of dialogue
    occurrences; "max" needs a single one.

    Examples:
        dialogsearch search books/ --query hello
        dialogsearch search novel.zip -q "run" --aggregation average --limit 10
    """
    try:
        if aggregation is not None:
            payload_function_for(aggregation)
        settings = get_settings_for_cli(
            config_file=config,
            cli_overrides={
                "search_aggregation": aggregation,
                "search_limit": limit,
                "index_workers": workers,
            },
        )

        index = InMemoryIndex(dialogue_analyzer(settings))
        result = DocumentIngestor(index, settings).ingest(paths)
        if result.failed:
            console.print(
                f"[yellow]Skipped {result.failed} unreadable document(s)[/yellow]"
            )

        parsed = build_query(
            query,
            standard_analyzer(settings),
            aggregation=None if anywhere else settings.search_aggregation,
            include_span_score=settings.search_include_span_score,
            require_all=require_all,
        )
        similarity = ClassicSimilarity() if anywhere else DialogueAwareSimilarity()
        searcher = IndexSearcher(index, similarity)
        top = searcher.search(parsed, limit=settings.search_limit)

        if json_output:
            payload = {
                "query": query,
                "indexed": result.successful,
                "total_hits": top.total_hits,
                "hits": [
                    {"title": hit.title, "score": hit.score} for hit in top.score_docs
                ],
            }
            print(json.dumps(payload, indent=2))
            return

        if not top.score_docs:
            console.print(
                f"[yellow]No results in {result.successful} document(s)[/yellow]"
            )
            return

        table = Table(title=f"Results for '{query}' ({top.total_hits} hits)")
        table.add_column("Title")
        table.add_column("Score", justify="right")
        for hit in top.score_docs:
            table.add_row(hit.title, f"{hit.score:.4f}")
        console.print(table)

        if explain:
            for hit in top.score_docs:
                console.print(f"\n[bold]{hit.title}[/bold]")
                console.print(str(searcher.explain(parsed, hit.doc_id)))

    except typer.Exit:
        raise
    except Exception as e:
        handle_cli_error(e, verbose=verbose)
