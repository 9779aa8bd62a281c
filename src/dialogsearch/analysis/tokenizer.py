"""Character-class tokenizers.

A tokenizer turns raw characters into candidate tokens: maximal runs of
characters accepted by ``is_token_char``. Everything else is a separator and
is dropped. Offsets are character offsets into the source.
"""

from __future__ import annotations

import io
from abc import abstractmethod
from typing import TextIO

from dialogsearch.analysis.stream import TokenStream
from dialogsearch.analysis.token import QUOTE, Token
from dialogsearch.exceptions import AnalysisError

IO_BUFFER_SIZE = 4096
DEFAULT_MAX_TOKEN_LENGTH = 255


class CharTokenizer(TokenStream):
    """Base class for tokenizers that split on a per-character predicate."""

    def __init__(self, max_token_length: int = DEFAULT_MAX_TOKEN_LENGTH) -> None:
        """Initialize tokenizer.

        Args:
            max_token_length: Longest token emitted; longer runs are cut
        """
        if max_token_length < 1:
            raise ValueError(f"max_token_length must be >= 1, got {max_token_length}")
        self.max_token_length = max_token_length
        self._reader: TextIO | None = None
        self._origin: int | None = None
        self._clear()

    @abstractmethod
    def is_token_char(self, ch: str) -> bool:
        """Return True if ``ch`` belongs to a token."""

    def set_reader(self, source: str | TextIO) -> None:
        """Bind the input for the next pass.

        Args:
            source: Text, or a text file object read lazily in chunks
        """
        reader = io.StringIO(source) if isinstance(source, str) else source
        self._reader = reader
        self._origin = reader.tell() if reader.seekable() else None
        self._clear()

    def reset(self) -> None:
        """Rewind to the start of the bound input (when seekable)."""
        if self._reader is not None and self._origin is not None:
            self._reader.seek(self._origin)
        self._clear()

    def close(self) -> None:
        if self._reader is not None:
            self._reader.close()
        self._reader = None
        self._origin = None
        self._clear()

    @property
    def final_offset(self) -> int:
        """Number of characters consumed so far."""
        return self._offset + self._buffer_index

    def _clear(self) -> None:
        self._buffer = ""
        self._buffer_index = 0
        self._offset = 0
        self._exhausted = False

    def _fill(self) -> bool:
        if self._exhausted or self._reader is None:
            return False
        self._offset += len(self._buffer)
        self._buffer = self._reader.read(IO_BUFFER_SIZE)
        self._buffer_index = 0
        if not self._buffer:
            self._exhausted = True
            return False
        return True

    def next_token(self) -> Token | None:
        if self._reader is None:
            raise AnalysisError(
                "Token stream has no input",
                hint="Call set_reader() (or Analyzer.token_stream()) before reading",
                details={"stream": type(self).__name__},
            )

        chars: list[str] = []
        start = -1
        while True:
            if self._buffer_index >= len(self._buffer) and not self._fill():
                break
            ch = self._buffer[self._buffer_index]
            self._buffer_index += 1
            if self.is_token_char(ch):
                if not chars:
                    start = self._offset + self._buffer_index - 1
                chars.append(ch)
                if len(chars) >= self.max_token_length:
                    break
            elif chars:
                break

        if not chars:
            return None
        return Token("".join(chars), start, start + len(chars))


class QuotationTokenizer(CharTokenizer):
    """Tokenizer keeping letters and double quotes together.

    ``He said "hello`` yields ``He``, ``said`` and ``"hello``; the fused
    quote is separated later by the quotation filter.
    """

    def is_token_char(self, ch: str) -> bool:
        return ch.isalpha() or ch == QUOTE


class LetterTokenizer(CharTokenizer):
    """Tokenizer emitting runs of letters only."""

    def is_token_char(self, ch: str) -> bool:
        return ch.isalpha()
