"""Relevance scoring functions.

``ClassicSimilarity`` is the TF-IDF baseline. ``DialogueAwareSimilarity``
adds one rule on top: occurrences indexed outside dialogue contribute
nothing to a payload-scored query.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

from dialogsearch.analysis.token import DialoguePayload


class Similarity(ABC):
    """Pluggable per-occurrence and per-document scoring formulas.

    Implementations must be stateless: one instance is shared by every
    query-scoring thread.
    """

    @abstractmethod
    def tf(self, freq: float) -> float:
        """Score factor for a term occurring ``freq`` times in a document."""

    @abstractmethod
    def idf(self, doc_freq: int, num_docs: int) -> float:
        """Score factor for a term found in ``doc_freq`` of ``num_docs`` documents."""

    @abstractmethod
    def length_norm(self, num_terms: int) -> float:
        """Normalization factor for a field holding ``num_terms`` terms."""

    @abstractmethod
    def query_norm(self, sum_of_squared_weights: float) -> float:
        """Normalization factor making scores comparable across queries."""

    @abstractmethod
    def score_payload(
        self, doc_id: int, start: int, end: int, payload: bytes | None
    ) -> float:
        """Score one occurrence from its payload.

        Args:
            doc_id: Document holding the occurrence
            start: Position of the occurrence
            end: Position one past the occurrence
            payload: Payload stored with the occurrence, if any

        Returns:
            Score contribution of this occurrence
        """


class ClassicSimilarity(Similarity):
    """TF-IDF scoring with square-root tf and length normalization."""

    def tf(self, freq: float) -> float:
        return math.sqrt(freq)

    def idf(self, doc_freq: int, num_docs: int) -> float:
        return math.log(num_docs / (doc_freq + 1)) + 1.0

    def length_norm(self, num_terms: int) -> float:
        if num_terms <= 0:
            return 1.0
        return 1.0 / math.sqrt(num_terms)

    def query_norm(self, sum_of_squared_weights: float) -> float:
        if sum_of_squared_weights <= 0.0:
            return 1.0
        return 1.0 / math.sqrt(sum_of_squared_weights)

    def score_payload(
        self,
        doc_id: int,  # noqa: ARG002
        start: int,  # noqa: ARG002
        end: int,  # noqa: ARG002
        payload: bytes | None,  # noqa: ARG002
    ) -> float:
        return 1.0


class DialogueAwareSimilarity(ClassicSimilarity):
    """Zero out occurrences that were indexed outside dialogue.

    A payload whose first byte is 0 scores exactly 0.0. Absent or empty
    payloads are treated the same way, so postings written without the
    dialogue filter never raise. Anything else defers to the baseline.
    """

    def score_payload(
        self, doc_id: int, start: int, end: int, payload: bytes | None
    ) -> float:
        if DialoguePayload.from_bytes(payload) is DialoguePayload.OUTSIDE_DIALOGUE:
            return 0.0
        return super().score_payload(doc_id, start, end, payload)
