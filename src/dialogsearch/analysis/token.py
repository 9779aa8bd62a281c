"""Token data model shared by every analysis stage."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, IntEnum

QUOTE = '"'


class TokenType(str, Enum):
    """Kinds of token flowing between analysis stages."""

    WORD = "word"
    START_QUOTE = "start_quote"
    END_QUOTE = "end_quote"


class DialoguePayload(IntEnum):
    """Payload byte stored with every indexed occurrence."""

    OUTSIDE_DIALOGUE = 0
    INSIDE_DIALOGUE = 1

    def to_bytes(self) -> bytes:
        """Return the single payload byte for this marker."""
        return bytes((self.value,))

    @classmethod
    def from_bytes(cls, payload: bytes | None) -> DialoguePayload:
        """Decode a stored payload from its first byte.

        Absent or empty payloads decode to ``OUTSIDE_DIALOGUE`` so scoring
        stays total over postings written without payloads. Any non-zero
        first byte counts as inside dialogue.
        """
        if payload and payload[0] != cls.OUTSIDE_DIALOGUE:
            return cls.INSIDE_DIALOGUE
        return cls.OUTSIDE_DIALOGUE


@dataclass(frozen=True, slots=True)
class Token:
    """One unit of analysed text.

    Attributes:
        text: Term characters
        start_offset: Offset of the first character in the source text
        end_offset: Offset one past the last character in the source text
        type: Word or quote marker
        position_increment: Positions advanced relative to the previous token
        payload: Dialogue payload, set once the token leaves the dialogue filter
    """

    text: str
    start_offset: int
    end_offset: int
    type: TokenType = TokenType.WORD
    position_increment: int = 1
    payload: DialoguePayload | None = None

    def __post_init__(self) -> None:
        if self.start_offset < 0 or self.end_offset < self.start_offset:
            raise ValueError(
                f"Invalid offsets [{self.start_offset}, {self.end_offset})"
            )
        if self.position_increment < 0:
            raise ValueError(
                f"Position increment must be >= 0, got {self.position_increment}"
            )

    @property
    def is_marker(self) -> bool:
        """Whether this token is a quote marker rather than a word."""
        return self.type is not TokenType.WORD

    @property
    def length(self) -> int:
        return self.end_offset - self.start_offset

    def with_changes(self, **changes: object) -> Token:
        """Return a copy of this token with the given fields replaced."""
        return replace(self, **changes)  # type: ignore[arg-type]
