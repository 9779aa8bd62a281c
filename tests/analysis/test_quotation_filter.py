"""Tests for splitting and classifying quote marks."""

import pytest

from dialogsearch.analysis import (
    QuotationFilter,
    QuotationTokenizer,
    Token,
    TokenType,
    split_quotes,
)

START = TokenType.START_QUOTE
END = TokenType.END_QUOTE
WORD = TokenType.WORD


def quotation_stream(text):
    tokenizer = QuotationTokenizer()
    tokenizer.set_reader(text)
    stream = QuotationFilter(tokenizer)
    stream.reset()
    return stream


def run(text):
    return list(quotation_stream(text))


class TestSplitRules:
    """Test the four splitting rules."""

    def test_leading_quote_splits_into_start_marker_and_word(self):
        assert run('"hello') == [
            Token('"', 0, 1, START, 0),
            Token("hello", 1, 6, WORD, 1),
        ]

    def test_trailing_quote_splits_into_word_and_end_marker(self):
        assert run('there"') == [
            Token("there", 0, 5, WORD, 1),
            Token('"', 5, 6, END, 0),
        ]

    def test_lone_quote_defaults_to_end_marker(self):
        assert run('"') == [Token('"', 0, 1, END, 0)]

    def test_plain_word_passes_through(self):
        assert run("narration") == [Token("narration", 0, 9, WORD, 1)]

    def test_split_queues_second_token(self):
        stream = quotation_stream('"hello')

        first = stream.next_token()

        assert first.type is START
        assert stream.pending == 1
        assert stream.next_token().text == "hello"
        assert stream.pending == 0
        assert stream.next_token() is None


class TestEdgeCases:
    """Test quote placements the basic rules leave open."""

    def test_single_quoted_word(self):
        assert run('"Hi"') == [
            Token('"', 0, 1, START, 0),
            Token("Hi", 1, 3, WORD, 1),
            Token('"', 3, 4, END, 0),
        ]

    def test_back_to_back_quotes_open_then_close(self):
        assert run('""') == [
            Token('"', 0, 1, START, 0),
            Token('"', 1, 2, END, 0),
        ]

    def test_three_quotes(self):
        assert [t.type for t in run('"""')] == [START, START, END]

    def test_interior_quote_starts_new_letter_run(self):
        assert run('said"hello') == [
            Token("said", 0, 4, WORD, 1),
            Token('"', 4, 5, START, 0),
            Token("hello", 5, 10, WORD, 1),
        ]

    def test_interior_and_trailing_quote(self):
        tokens = run('a"b"')

        assert [(t.text, t.type) for t in tokens] == [
            ("a", WORD),
            ('"', START),
            ("b", WORD),
            ('"', END),
        ]

    @pytest.mark.parametrize("text", ['"', '""', '"Hi"', 'x"', '"x', 'a"b"c'])
    def test_no_zero_length_tokens(self, text):
        assert all(t.end_offset > t.start_offset for t in run(text))


class TestOffsetsAndPositions:
    """Test offset round trips and position increments."""

    @pytest.mark.parametrize(
        "text",
        [
            'He said "hello there" to her.',
            '"Stop!" she cried, "go back."',
            '""Odd"" said"she"',
        ],
    )
    def test_pieces_reassemble_source(self, text):
        tokens = run(text)
        raw = QuotationTokenizer()
        raw.set_reader(text)
        raw.reset()

        for original in raw:
            pieces = [
                t
                for t in tokens
                if original.start_offset <= t.start_offset < original.end_offset
            ]
            rebuilt = "".join(text[t.start_offset : t.end_offset] for t in pieces)
            assert rebuilt == original.text
            assert pieces[0].start_offset == original.start_offset
            assert pieces[-1].end_offset == original.end_offset

    def test_word_keeps_increment_of_split_token(self):
        token = Token('"hello', 10, 16, WORD, 3)

        pieces = split_quotes(token)

        assert [t.position_increment for t in pieces] == [0, 3]

    def test_markers_are_zero_width(self):
        tokens = run('"a" b"c "d" " ""')

        assert all(t.position_increment == 0 for t in tokens if t.is_marker)
        assert all(t.position_increment == 1 for t in tokens if not t.is_marker)

    def test_quotes_only_token_keeps_preceding_gap(self):
        pieces = split_quotes(Token('""', 4, 6, WORD, 3))

        assert [(t.type, t.position_increment) for t in pieces] == [
            (START, 2),
            (END, 0),
        ]

    def test_split_quotes_without_quote_returns_token(self):
        token = Token("plain", 0, 5)

        assert split_quotes(token) == [token]


class TestReset:
    """Test QuotationFilter.reset."""

    def test_reset_clears_pending_queue(self):
        stream = quotation_stream('"hello world')
        stream.next_token()
        assert stream.pending == 1

        stream.reset()

        assert stream.pending == 0
        assert [t.text for t in stream] == ['"', "hello", "world"]
