"""General purpose token filters used around the dialogue pipeline."""

from __future__ import annotations

from collections.abc import Iterable

from dialogsearch.analysis.stream import TokenFilter, TokenStream
from dialogsearch.analysis.token import Token
from dialogsearch.config import get_logger

logger = get_logger(__name__)

ENGLISH_STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "but", "by", "for", "if",
        "in", "into", "is", "it", "no", "not", "of", "on", "or", "such",
        "that", "the", "their", "then", "there", "these", "they", "this",
        "to", "was", "will", "with",
    }
)  # fmt: skip


class LowerCaseFilter(TokenFilter):
    """Lowercase every word; markers pass through untouched."""

    def next_token(self) -> Token | None:
        token = self.upstream.next_token()
        if token is None or token.is_marker:
            return token
        lowered = token.text.lower()
        if lowered == token.text:
            return token
        return token.with_changes(text=lowered)


class StopFilter(TokenFilter):
    """Drop stop words, keeping the positions they occupied.

    The increments of dropped words are added to the next token that
    survives, so phrase distances over the gap stay intact.
    """

    def __init__(
        self,
        upstream: TokenStream,
        stop_words: Iterable[str] = ENGLISH_STOP_WORDS,
    ) -> None:
        """Initialize stop filter.

        Args:
            upstream: Stream to filter
            stop_words: Terms to drop (compared exactly, so lowercase first)
        """
        super().__init__(upstream)
        self.stop_words = frozenset(stop_words)

    def next_token(self) -> Token | None:
        skipped = 0
        while (token := self.upstream.next_token()) is not None:
            if token.is_marker or token.text not in self.stop_words:
                if skipped:
                    return token.with_changes(
                        position_increment=token.position_increment + skipped
                    )
                return token
            skipped += token.position_increment
        return None


class DebugTokenFilter(TokenFilter):
    """Log every token that passes through, unchanged.

    Can sit anywhere in a chain. Output is verbose; meant for analysing a
    sentence or two, not whole books.
    """

    def __init__(self, upstream: TokenStream, name: str = "debug") -> None:
        super().__init__(upstream)
        self.name = name

    def next_token(self) -> Token | None:
        token = self.upstream.next_token()
        if token is not None:
            logger.debug(
                "Token",
                stage=self.name,
                term=token.text,
                type=token.type.value,
                payload=None if token.payload is None else int(token.payload),
                offset=token.start_offset,
                length=token.length,
                increment=token.position_increment,
            )
        return token
