"""Tests for the character-class tokenizers."""

import io

import pytest

from dialogsearch.analysis import LetterTokenizer, QuotationTokenizer, Token
from dialogsearch.analysis.tokenizer import IO_BUFFER_SIZE
from dialogsearch.exceptions import AnalysisError


def tokenize(tokenizer, source):
    tokenizer.set_reader(source)
    tokenizer.reset()
    return list(tokenizer)


class TestQuotationTokenizer:
    """Test QuotationTokenizer character classification."""

    def test_quotes_stay_attached_to_letters(self):
        tokens = tokenize(QuotationTokenizer(), 'He said "hello there" to her.')

        assert [t.text for t in tokens] == [
            "He",
            "said",
            '"hello',
            'there"',
            "to",
            "her",
        ]

    def test_offsets_cover_source_exactly(self):
        text = 'He said "hello there" to her.'
        tokens = tokenize(QuotationTokenizer(), text)

        for token in tokens:
            assert text[token.start_offset : token.end_offset] == token.text

    def test_punctuation_and_digits_separate_tokens(self):
        tokens = tokenize(QuotationTokenizer(), "Stop!go, 42 times")

        assert [t.text for t in tokens] == ["Stop", "go", "times"]

    def test_lone_quote_is_a_token(self):
        tokens = tokenize(QuotationTokenizer(), 'back." she')

        assert [t.text for t in tokens] == ["back", '"', "she"]
        assert tokens[1] == Token('"', 5, 6)

    def test_unicode_letters(self):
        tokens = tokenize(QuotationTokenizer(), "Ça va, Ärger naïve")

        assert [t.text for t in tokens] == ["Ça", "va", "Ärger", "naïve"]

    def test_every_raw_token_advances_one_position(self):
        tokens = tokenize(QuotationTokenizer(), 'one "two" three')

        assert all(t.position_increment == 1 for t in tokens)

    def test_empty_and_separator_only_input(self):
        assert tokenize(QuotationTokenizer(), "") == []
        assert tokenize(QuotationTokenizer(), " ,.;  123 ") == []


class TestCharTokenizerBuffering:
    """Test chunked reading and token length limits."""

    def test_tokens_spanning_read_chunks(self):
        text = "a" * (IO_BUFFER_SIZE - 2) + " hello world"
        tokens = tokenize(QuotationTokenizer(max_token_length=10_000), text)

        assert [t.text for t in tokens[1:]] == ["hello", "world"]
        assert tokens[1].start_offset == IO_BUFFER_SIZE - 1

    def test_token_crossing_chunk_boundary(self):
        text = " " * (IO_BUFFER_SIZE - 3) + "boundary"
        tokens = tokenize(QuotationTokenizer(), text)

        assert tokens == [Token("boundary", IO_BUFFER_SIZE - 3, IO_BUFFER_SIZE + 5)]

    def test_long_runs_are_cut(self):
        tokens = tokenize(QuotationTokenizer(max_token_length=4), "abcdefghij")

        assert [t.text for t in tokens] == ["abcd", "efgh", "ij"]
        assert [t.start_offset for t in tokens] == [0, 4, 8]

    def test_reads_file_objects_lazily(self):
        source = io.StringIO("read from a stream")
        tokens = tokenize(LetterTokenizer(), source)

        assert [t.text for t in tokens] == ["read", "from", "a", "stream"]

    def test_invalid_max_token_length(self):
        with pytest.raises(ValueError, match="max_token_length"):
            QuotationTokenizer(max_token_length=0)


class TestTokenizerLifecycle:
    """Test reset, close and error propagation."""

    def test_next_token_without_input(self):
        with pytest.raises(AnalysisError, match="no input"):
            QuotationTokenizer().next_token()

    def test_reset_restarts_seekable_input(self):
        tokenizer = QuotationTokenizer()
        tokenizer.set_reader("first second")
        tokenizer.reset()
        assert tokenizer.next_token().text == "first"

        tokenizer.reset()

        assert [t.text for t in tokenizer] == ["first", "second"]

    def test_final_offset(self):
        tokenizer = QuotationTokenizer()
        tokens = tokenize(tokenizer, "end here. ")

        assert tokens[-1].end_offset == 8
        assert tokenizer.final_offset == 10

    def test_close_releases_reader(self):
        tokenizer = QuotationTokenizer()
        tokenizer.set_reader("text")
        tokenizer.close()

        with pytest.raises(AnalysisError):
            tokenizer.next_token()

    def test_io_errors_propagate(self):
        class BrokenReader(io.StringIO):
            def read(self, size=-1):
                raise OSError("disk went away")

        tokenizer = QuotationTokenizer()
        tokenizer.set_reader(BrokenReader("ignored"))
        tokenizer.reset()

        with pytest.raises(OSError, match="disk went away"):
            tokenizer.next_token()


class TestLetterTokenizer:
    """Test LetterTokenizer."""

    def test_quotes_are_separators(self):
        tokens = tokenize(LetterTokenizer(), '"hello" there')

        assert [t.text for t in tokens] == ["hello", "there"]
        assert tokens[0].start_offset == 1
