"""Separation of quote marks fused to words.

The quotation tokenizer cannot tell ``"hello`` (an opening quote followed by
a word) from an ordinary word, so this filter splits such tokens into a quote
marker plus the word, and decides whether each marker opens or closes a
dialogue span.
"""

from __future__ import annotations

from collections import deque

from dialogsearch.analysis.stream import TokenFilter, TokenStream
from dialogsearch.analysis.token import QUOTE, Token, TokenType


def _marker(start: int, token_type: TokenType) -> Token:
    return Token(QUOTE, start, start + 1, token_type, 0)


def _classify(text: str, start: int, increment: int, out: list[Token]) -> None:
    """Append the tokens making up ``text`` (source offset ``start``) to ``out``.

    Markers are zero-width: they always carry increment 0. The first word
    appended carries ``increment``. Rules, in order: a leading quote opens a
    span, a trailing quote closes one, a lone quote closes one, and a quote
    inside a word starts a new letter-run that is classified from scratch.
    """
    while text:
        if text == QUOTE:
            out.append(_marker(start, TokenType.END_QUOTE))
            return
        if text[0] == QUOTE:
            out.append(_marker(start, TokenType.START_QUOTE))
            text, start = text[1:], start + 1
            continue
        if text[-1] == QUOTE:
            _classify(text[:-1], start, increment, out)
            out.append(_marker(start + len(text) - 1, TokenType.END_QUOTE))
            return

        interior = text.find(QUOTE)
        if interior == -1:
            out.append(Token(text, start, start + len(text), TokenType.WORD, increment))
            return
        # said"hello reads as said "hello: the tail is a separate letter-run
        _classify(text[:interior], start, increment, out)
        text, start, increment = text[interior:], start + interior, 1


def split_quotes(token: Token) -> list[Token]:
    """Split a raw token into quote markers and words.

    Args:
        token: Token straight from the quotation tokenizer

    Returns:
        One or more tokens covering exactly the source span of ``token``.
        Zero-length pieces are never produced. A token made only of quotes
        gives up its own position; any gap before it stays on the first
        marker so downstream filters can pass it on.
    """
    if QUOTE not in token.text:
        return [token]
    out: list[Token] = []
    _classify(token.text, token.start_offset, token.position_increment, out)
    if all(piece.is_marker for piece in out) and token.position_increment > 1:
        out[0] = out[0].with_changes(position_increment=token.position_increment - 1)
    return out


class QuotationFilter(TokenFilter):
    """Split fused quote/word tokens and classify quote markers.

    One upstream token can become several output tokens. The extras wait in
    an explicit queue and are handed out on the following calls. Markers
    take no position of their own, so the word keeps the position the
    unsplit token had.
    """

    def __init__(self, upstream: TokenStream) -> None:
        super().__init__(upstream)
        self._pending: deque[Token] = deque()

    @property
    def pending(self) -> int:
        """Number of split tokens still waiting to be emitted."""
        return len(self._pending)

    def reset(self) -> None:
        self._pending.clear()
        super().reset()

    def next_token(self) -> Token | None:
        if self._pending:
            return self._pending.popleft()

        token = self.upstream.next_token()
        if token is None:
            return None

        self._pending.extend(split_quotes(token))
        return self._pending.popleft()
