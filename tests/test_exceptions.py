"""Tests for the exception hierarchy."""

import pytest

from dialogsearch.exceptions import (
    AnalysisError,
    ConfigurationError,
    DialogSearchError,
    IndexingError,
    QueryError,
    RegistryError,
    check_config_keys,
)


class TestDialogSearchError:
    """Test error formatting."""

    def test_message_only(self):
        error = DialogSearchError("Something broke")

        assert str(error) == "Error: Something broke"

    def test_hint_and_details(self):
        error = QueryError(
            "Bad query", hint="Try again", details={"term": "x", "limit": 0}
        )

        assert str(error) == (
            "Error: Bad query\nHint: Try again\nDetails:\n  term: x\n  limit: 0"
        )

    @pytest.mark.parametrize(
        "cls",
        [AnalysisError, ConfigurationError, IndexingError, QueryError, RegistryError],
    )
    def test_hierarchy(self, cls):
        assert issubclass(cls, DialogSearchError)


class TestCheckConfigKeys:
    """Test detection of common configuration typos."""

    def test_valid_keys(self):
        check_config_keys({"search_aggregation": "min", "index_workers": 2})

    @pytest.mark.parametrize(
        ("wrong", "correct"),
        [
            ("workers", "index_workers"),
            ("aggregation", "search_aggregation"),
            ("max_token_length", "analysis_max_token_length"),
            ("stop_words", "analysis_stop_words"),
        ],
    )
    def test_wrong_keys(self, wrong, correct):
        with pytest.raises(ConfigurationError) as exc_info:
            check_config_keys({wrong: 1})

        assert exc_info.value.hint == f"Use '{correct}' instead of '{wrong}'"
        assert exc_info.value.details["correct_key"] == correct
