"""Token stream contract shared by tokenizers and filters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from types import TracebackType

from dialogsearch.analysis.token import Token


class TokenStream(ABC):
    """Single-pass, forward-only producer of tokens.

    A stream serves one consumer for one pass over one input. ``reset`` must
    be called before the first ``next_token`` and restores every piece of
    internal state to its initial value.
    """

    @abstractmethod
    def next_token(self) -> Token | None:
        """Return the next token, or None once the stream is exhausted."""

    def reset(self) -> None:
        """Clear internal state ahead of a new pass."""

    def close(self) -> None:
        """Release the underlying input."""

    def __iter__(self) -> Iterator[Token]:
        while (token := self.next_token()) is not None:
            yield token

    def __enter__(self) -> TokenStream:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


class TokenFilter(TokenStream):
    """A token stream that transforms the output of another stream."""

    def __init__(self, upstream: TokenStream) -> None:
        """Wrap an upstream stream.

        Args:
            upstream: Stream whose tokens this filter consumes
        """
        self.upstream = upstream

    def reset(self) -> None:
        self.upstream.reset()

    def close(self) -> None:
        self.upstream.close()
