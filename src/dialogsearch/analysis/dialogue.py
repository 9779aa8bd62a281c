"""Dialogue state tracking and payload stamping."""

from __future__ import annotations

from dialogsearch.analysis.stream import TokenFilter, TokenStream
from dialogsearch.analysis.token import DialoguePayload, Token, TokenType


class DialoguePayloadFilter(TokenFilter):
    """Turn a marker/word stream into payload-annotated words.

    Start markers enter dialogue, end markers leave it, and neither is ever
    emitted. Every word leaves with a ``DialoguePayload`` for the state in
    effect when it was read.

    Markers are normally zero-width. Any increment one does carry (such as
    the positions of stop words dropped just before it) is added to the next
    word, so removing the quotes from the text never moves a word.
    """

    def __init__(self, upstream: TokenStream) -> None:
        super().__init__(upstream)
        self.inside_dialogue = False

    def reset(self) -> None:
        self.inside_dialogue = False
        super().reset()

    def next_token(self) -> Token | None:
        carried = 0
        while (token := self.upstream.next_token()) is not None:
            if token.type is TokenType.START_QUOTE:
                self.inside_dialogue = True
            elif token.type is TokenType.END_QUOTE:
                self.inside_dialogue = False
            else:
                if not carried:
                    return token.with_changes(payload=self._payload())
                return token.with_changes(
                    payload=self._payload(),
                    position_increment=token.position_increment + carried,
                )
            carried += token.position_increment
        return None

    def _payload(self) -> DialoguePayload:
        if self.inside_dialogue:
            return DialoguePayload.INSIDE_DIALOGUE
        return DialoguePayload.OUTSIDE_DIALOGUE
