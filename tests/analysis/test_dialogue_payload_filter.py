"""Tests for dialogue state tracking and payload stamping."""

import pytest

from dialogsearch.analysis import (
    DialoguePayload,
    DialoguePayloadFilter,
    QuotationFilter,
    QuotationTokenizer,
    Token,
    TokenStream,
    TokenType,
    dialogue_analyzer,
)


def pairs(tokens):
    return [(t.text, int(t.payload)) for t in tokens]


class ListStream(TokenStream):
    """Replays a fixed list of tokens."""

    def __init__(self, tokens):
        self.tokens = list(tokens)
        self.index = 0

    def reset(self):
        self.index = 0

    def next_token(self):
        if self.index >= len(self.tokens):
            return None
        self.index += 1
        return self.tokens[self.index - 1]


class TestDialoguePayloads:
    """Test payloads stamped on emitted words."""

    def test_no_quotes_means_no_dialogue(self, pipeline):
        tokens = pipeline.analyze("The night was quiet and nobody spoke.")

        assert {t.payload for t in tokens} == {DialoguePayload.OUTSIDE_DIALOGUE}

    def test_quoted_phrase_between_words(self, pipeline):
        tokens = pipeline.analyze('before "phrase words" after')

        assert pairs(tokens) == [
            ("before", 0),
            ("phrase", 1),
            ("words", 1),
            ("after", 0),
        ]

    def test_said_hello_example(self, settings):
        tokens = dialogue_analyzer(settings).analyze('He said "hello there" to her.')

        assert pairs(tokens) == [
            ("he", 0),
            ("said", 0),
            ("hello", 1),
            ("there", 1),
            ("to", 0),
            ("her", 0),
        ]

    def test_state_survives_punctuation_between_markers(self, settings):
        tokens = dialogue_analyzer(settings).analyze('"Stop!" she cried, "go back."')

        assert pairs(tokens) == [
            ("stop", 1),
            ("she", 0),
            ("cried", 0),
            ("go", 1),
            ("back", 1),
        ]

    def test_unterminated_quote_runs_to_end(self, pipeline):
        tokens = pipeline.analyze('Then "it never ends')

        assert pairs(tokens) == [("Then", 0), ("it", 1), ("never", 1), ("ends", 1)]

    def test_empty_quotation_leaves_dialogue_closed(self, pipeline):
        tokens = pipeline.analyze('"Wait "" here" she said')

        assert pairs(tokens) == [
            ("Wait", 1),
            ("here", 0),
            ("she", 0),
            ("said", 0),
        ]

    def test_every_word_carries_exactly_one_payload_byte(self, pipeline):
        tokens = pipeline.analyze('a "b c" d "e')

        assert all(len(t.payload.to_bytes()) == 1 for t in tokens)


class TestMarkerHandling:
    """Test that markers are consumed, never emitted."""

    @pytest.mark.parametrize(
        "text",
        ['"', '""', '" "', 'word "', '"Hi" "there" "', 'a"b"c"d'],
    )
    def test_markers_never_leave_filter(self, pipeline, text):
        tokens = pipeline.analyze(text)

        assert all(t.type is TokenType.WORD for t in tokens)
        assert all('"' not in t.text for t in tokens)

    def test_only_markers_yields_nothing(self, pipeline):
        assert pipeline.analyze('" "" """') == []


class TestPositions:
    """Test that swallowed markers leave no position gap."""

    @pytest.mark.parametrize(
        "text",
        [
            'He said "hello there" to her.',
            '"Stop!" she cried, "go back."',
            'back." Then',
            'said"hello "Hi" again',
        ],
    )
    def test_every_word_advances_exactly_one_position(self, pipeline, text):
        tokens = pipeline.analyze(text)

        assert [t.position_increment for t in tokens] == [1] * len(tokens)

    def test_marker_increments_add_to_next_word(self):
        stream = DialoguePayloadFilter(
            ListStream(
                [
                    Token("word", 0, 4),
                    Token('"', 5, 6, TokenType.START_QUOTE, 2),
                    Token('"', 6, 7, TokenType.END_QUOTE, 1),
                    Token("next", 8, 12, TokenType.WORD, 1),
                    Token('"', 13, 14, TokenType.START_QUOTE, 0),
                    Token("last", 14, 18, TokenType.WORD, 1),
                ]
            )
        )
        stream.reset()

        assert [(t.text, t.position_increment) for t in stream] == [
            ("word", 1),
            ("next", 4),
            ("last", 1),
        ]

    def test_offsets_survive(self, pipeline):
        text = 'He said "hello there" to her.'

        for token in pipeline.analyze(text):
            assert text[token.start_offset : token.end_offset] == token.text


class TestReset:
    """Test DialoguePayloadFilter.reset."""

    def test_reset_clears_dialogue_state(self):
        tokenizer = QuotationTokenizer()
        tokenizer.set_reader('"inside words')
        stream = DialoguePayloadFilter(QuotationFilter(tokenizer))
        stream.reset()
        stream.next_token()
        assert stream.inside_dialogue is True

        stream.reset()

        assert stream.inside_dialogue is False
        assert pairs(stream) == [("inside", 1), ("words", 1)]

    def test_initial_state(self):
        tokenizer = QuotationTokenizer()
        stream = DialoguePayloadFilter(QuotationFilter(tokenizer))

        assert stream.inside_dialogue is False
