"""CLI command implementations."""

from dialogsearch.cli.commands.analyze import analyze_command
from dialogsearch.cli.commands.search import search_command

__all__ = ["analyze_command", "search_command"]
