"""Pytest configuration and fixtures."""

import os

import pytest
from typer.testing import CliRunner

from dialogsearch.analysis import Analyzer, AnalyzerBuilder
from dialogsearch.config import DialogSearchSettings, reset_settings, set_settings
from dialogsearch.search import InMemoryIndex


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep every test independent of the developer's env and config files."""
    for name in list(os.environ):
        if name.startswith("DIALOGSEARCH_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    reset_settings()
    set_settings(DialogSearchSettings())
    yield
    reset_settings()


@pytest.fixture
def settings():
    """Default settings."""
    return DialogSearchSettings()


@pytest.fixture
def pipeline() -> Analyzer:
    """Quotation tokenizer, quotation filter and dialogue payload filter only."""
    return (
        AnalyzerBuilder()
        .with_tokenizer("quotation")
        .add_token_filter("quotation")
        .add_token_filter("dialoguepayload")
        .build()
    )


@pytest.fixture
def dialogue_index() -> InMemoryIndex:
    """Index holding the two example sentences plus pure narration."""
    index = InMemoryIndex()
    index.add_document("said-hello", 'He said "hello there" to her.')
    index.add_document("stop-cried", '"Stop!" she cried, "go back."')
    index.add_document("narration", "Nobody said hello to anyone that day.")
    return index


@pytest.fixture
def cli_runner() -> CliRunner:
    """Typer CLI runner."""
    return CliRunner()
