"""Term queries, payload aggregation and score explanations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field

from dialogsearch.analysis.analyzer import Analyzer
from dialogsearch.exceptions import QueryError
from dialogsearch.search.index import InMemoryIndex
from dialogsearch.search.similarity import Similarity


@dataclass
class Explanation:
    """Tree describing how a score was computed."""

    value: float
    description: str
    details: list[Explanation] = field(default_factory=list)

    def render(self, depth: int = 0) -> str:
        lines = [f"{'  ' * depth}{self.value:.6g} = {self.description}"]
        lines.extend(detail.render(depth + 1) for detail in self.details)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()


class PayloadFunction(ABC):
    """Fold per-occurrence payload scores into one score per document."""

    name: str

    @abstractmethod
    def current_score(
        self, doc_id: int, num_seen: int, current: float, payload_score: float
    ) -> float:
        """Combine the running score with the next occurrence's payload score.

        Args:
            doc_id: Document being scored
            num_seen: Occurrences folded in before this one
            current: Running score so far
            payload_score: Score of the current occurrence

        Returns:
            New running score
        """

    @abstractmethod
    def doc_score(self, doc_id: int, num_seen: int, payload_score: float) -> float:
        """Turn the folded running score into the document's payload score."""


class MinPayloadFunction(PayloadFunction):
    """Lowest occurrence score; one narration hit sinks the document."""

    name = "min"

    def current_score(
        self,
        doc_id: int,  # noqa: ARG002
        num_seen: int,
        current: float,
        payload_score: float,
    ) -> float:
        return payload_score if num_seen == 0 else min(current, payload_score)

    def doc_score(
        self,
        doc_id: int,  # noqa: ARG002
        num_seen: int,
        payload_score: float,
    ) -> float:
        return payload_score if num_seen > 0 else 1.0


class MaxPayloadFunction(PayloadFunction):
    """Highest occurrence score; one dialogue hit is enough."""

    name = "max"

    def current_score(
        self,
        doc_id: int,  # noqa: ARG002
        num_seen: int,
        current: float,
        payload_score: float,
    ) -> float:
        return payload_score if num_seen == 0 else max(current, payload_score)

    def doc_score(
        self,
        doc_id: int,  # noqa: ARG002
        num_seen: int,
        payload_score: float,
    ) -> float:
        return payload_score if num_seen > 0 else 1.0


class AveragePayloadFunction(PayloadFunction):
    """Mean occurrence score; rewards documents where dialogue hits dominate."""

    name = "average"

    def current_score(
        self,
        doc_id: int,  # noqa: ARG002
        num_seen: int,  # noqa: ARG002
        current: float,
        payload_score: float,
    ) -> float:
        return current + payload_score

    def doc_score(
        self,
        doc_id: int,  # noqa: ARG002
        num_seen: int,
        payload_score: float,
    ) -> float:
        return payload_score / num_seen if num_seen > 0 else 1.0


PAYLOAD_FUNCTIONS: dict[str, type[PayloadFunction]] = {
    "min": MinPayloadFunction,
    "max": MaxPayloadFunction,
    "average": AveragePayloadFunction,
}


def payload_function_for(name: str) -> PayloadFunction:
    """Return the payload function registered under ``name``.

    Raises:
        QueryError: If the name is unknown
    """
    try:
        return PAYLOAD_FUNCTIONS[name.lower()]()
    except KeyError:
        raise QueryError(
            f"Unknown payload aggregation '{name}'",
            hint=f"Use one of: {', '.join(PAYLOAD_FUNCTIONS)}",
        ) from None


class Query(ABC):
    """A scoring rule evaluated one document at a time."""

    @abstractmethod
    def candidates(self, index: InMemoryIndex) -> set[int]:
        """Documents that may score above zero."""

    @abstractmethod
    def explain(
        self, index: InMemoryIndex, doc_id: int, similarity: Similarity
    ) -> Explanation:
        """Score ``doc_id`` and describe how the score came about."""

    def score(self, index: InMemoryIndex, doc_id: int, similarity: Similarity) -> float:
        return self.explain(index, doc_id, similarity).value


class TermQuery(Query):
    """Match a single term with TF-IDF scoring; payloads are ignored."""

    def __init__(self, term: str, boost: float = 1.0) -> None:
        if not term:
            raise QueryError("Query term must not be empty")
        self.term = term
        self.boost = boost

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.term!r})"

    def candidates(self, index: InMemoryIndex) -> set[int]:
        return set(index.postings(self.term))

    def span_score(
        self, index: InMemoryIndex, doc_id: int, similarity: Similarity
    ) -> Explanation:
        """TF-IDF score of the term in ``doc_id``."""
        freq = len(index.postings(self.term).get(doc_id, ()))
        if freq == 0:
            return Explanation(0.0, f"no matching term '{self.term}'")

        doc_freq = index.doc_freq(self.term)
        idf = similarity.idf(doc_freq, index.num_docs)
        query_weight = idf * self.boost
        query_norm = similarity.query_norm(query_weight * query_weight)
        tf = similarity.tf(freq)
        norm = similarity.length_norm(index.field_length(doc_id))
        return Explanation(
            tf * idf * query_weight * query_norm * norm,
            f"weight({self.term} in {doc_id})",
            [
                Explanation(tf, f"tf(freq={freq})"),
                Explanation(idf, f"idf(docFreq={doc_freq}, numDocs={index.num_docs})"),
                Explanation(query_weight * query_norm, "queryWeight"),
                Explanation(norm, "fieldNorm"),
            ],
        )

    def explain(
        self, index: InMemoryIndex, doc_id: int, similarity: Similarity
    ) -> Explanation:
        return self.span_score(index, doc_id, similarity)


class PayloadScoreQuery(TermQuery):
    """Term query whose score also depends on the payload of every occurrence.

    Each occurrence is scored by ``Similarity.score_payload``; the payload
    function folds those into one document payload score. With
    ``include_span_score`` the result is multiplied by the TF-IDF score.
    """

    def __init__(
        self,
        term: str,
        function: PayloadFunction | None = None,
        include_span_score: bool = True,
        boost: float = 1.0,
    ) -> None:
        super().__init__(term, boost=boost)
        self.function = function or MinPayloadFunction()
        self.include_span_score = include_span_score

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.term!r}, function={self.function.name!r})"

    def payload_score(
        self, index: InMemoryIndex, doc_id: int, similarity: Similarity
    ) -> Explanation:
        """Fold the payload scores of every occurrence in ``doc_id``."""
        current = 0.0
        num_seen = 0
        for posting in index.postings(self.term).get(doc_id, ()):
            occurrence = similarity.score_payload(
                doc_id, posting.position, posting.position + 1, posting.payload
            )
            current = self.function.current_score(doc_id, num_seen, current, occurrence)
            num_seen += 1
        value = self.function.doc_score(doc_id, num_seen, current)
        return Explanation(
            value, f"{self.function.name}(payload scores of {num_seen} occurrences)"
        )

    def explain(
        self, index: InMemoryIndex, doc_id: int, similarity: Similarity
    ) -> Explanation:
        span = self.span_score(index, doc_id, similarity)
        if span.value == 0.0:
            return span
        payload = self.payload_score(index, doc_id, similarity)
        if not self.include_span_score:
            return Explanation(payload.value, "payload score only", [payload])
        return Explanation(
            span.value * payload.value, "span score * payload score", [span, payload]
        )


class BooleanQuery(Query):
    """Combine clauses by summing their scores, scaled by clause overlap.

    With ``require_all`` every clause must score above zero.
    """

    def __init__(self, clauses: Sequence[Query], require_all: bool = False) -> None:
        if not clauses:
            raise QueryError("Boolean query needs at least one clause")
        self.clauses = list(clauses)
        self.require_all = require_all

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.clauses!r}, require_all={self.require_all})"
        )

    def candidates(self, index: InMemoryIndex) -> set[int]:
        docs = [clause.candidates(index) for clause in self.clauses]
        if self.require_all:
            return set.intersection(*docs)
        return set.union(*docs)

    def explain(
        self, index: InMemoryIndex, doc_id: int, similarity: Similarity
    ) -> Explanation:
        details = [clause.explain(index, doc_id, similarity) for clause in self.clauses]
        matched = sum(1 for detail in details if detail.value > 0.0)
        if matched == 0 or (self.require_all and matched < len(details)):
            return Explanation(0.0, "not all required clauses matched", details)
        coord = matched / len(details)
        total = sum(detail.value for detail in details)
        return Explanation(
            total * coord,
            f"sum of clauses * coord({matched}/{len(details)})",
            details,
        )


def build_query(
    text: str,
    analyzer: Analyzer,
    aggregation: str | None = "min",
    include_span_score: bool = True,
    require_all: bool = False,
) -> Query:
    """Turn free text into a query over the analysed terms.

    Args:
        text: Query text, e.g. ``hello there``
        analyzer: Query-time analyzer, normally ``standard_analyzer()``
        aggregation: Payload function name, or None for plain term queries
        include_span_score: Multiply payload scores by the TF-IDF score
        require_all: Every term must match

    Returns:
        A single term query, or a boolean query over several terms

    Raises:
        QueryError: If the text contains no searchable terms
    """
    terms = list(dict.fromkeys(token.text for token in analyzer.analyze(text)))
    if not terms:
        raise QueryError(
            f"Query '{text}' contains no searchable terms",
            hint="Queries match letters only; stop words may also be removed",
        )

    clauses: list[Query]
    if aggregation is None:
        clauses = [TermQuery(term) for term in terms]
    else:
        clauses = [
            PayloadScoreQuery(
                term,
                payload_function_for(aggregation),
                include_span_score=include_span_score,
            )
            for term in terms
        ]
    if len(clauses) == 1:
        return clauses[0]
    return BooleanQuery(clauses, require_all=require_all)
