"""Run queries against an in-memory index."""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field

from dialogsearch.config import get_logger
from dialogsearch.exceptions import QueryError
from dialogsearch.search.index import InMemoryIndex
from dialogsearch.search.query import Explanation, Query
from dialogsearch.search.similarity import DialogueAwareSimilarity, Similarity

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ScoreDoc:
    """A single hit."""

    doc_id: int
    title: str
    score: float


@dataclass
class TopDocs:
    """Best hits of a query, highest score first."""

    total_hits: int
    score_docs: list[ScoreDoc] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.score_docs)

    @property
    def titles(self) -> list[str]:
        return [hit.title for hit in self.score_docs]


class IndexSearcher:
    """Score candidate documents and keep the best ones.

    Documents scoring exactly zero are not hits: with the dialogue-aware
    similarity that is how a match outside dialogue drops out.
    """

    def __init__(
        self, index: InMemoryIndex, similarity: Similarity | None = None
    ) -> None:
        """Initialize searcher.

        Args:
            index: Index to search
            similarity: Scoring formulas; defaults to DialogueAwareSimilarity
        """
        self.index = index
        self.similarity = similarity or DialogueAwareSimilarity()

    def search(self, query: Query, limit: int = 5) -> TopDocs:
        """Return the ``limit`` best hits of ``query``.

        Ties are broken by document id, lowest first.

        Raises:
            QueryError: If ``limit`` is not positive
        """
        if limit < 1:
            raise QueryError(
                f"Search limit must be positive, got {limit}",
                hint="Pass --limit 1 or higher",
            )

        hits: list[ScoreDoc] = []
        for doc_id in query.candidates(self.index):
            score = query.score(self.index, doc_id, self.similarity)
            if score > 0.0:
                title = self.index.document(doc_id).title
                hits.append(ScoreDoc(doc_id, title, score))

        best = heapq.nsmallest(limit, hits, key=lambda hit: (-hit.score, hit.doc_id))
        logger.debug(
            "Search completed",
            query=repr(query),
            total_hits=len(hits),
            returned=len(best),
        )
        return TopDocs(total_hits=len(hits), score_docs=best)

    def explain(self, query: Query, doc_id: int) -> Explanation:
        """Explain the score ``query`` gives ``doc_id``."""
        self.index.document(doc_id)
        return query.explain(self.index, doc_id, self.similarity)
