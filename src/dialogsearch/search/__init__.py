"""Dialogue-aware scoring and the in-memory search components around it."""

from dialogsearch.search.index import (
    AnalyzedDocument,
    InMemoryIndex,
    Posting,
    StoredDocument,
)
from dialogsearch.search.query import (
    AveragePayloadFunction,
    BooleanQuery,
    Explanation,
    MaxPayloadFunction,
    MinPayloadFunction,
    PayloadFunction,
    PayloadScoreQuery,
    Query,
    TermQuery,
    build_query,
    payload_function_for,
)
from dialogsearch.search.searcher import IndexSearcher, ScoreDoc, TopDocs
from dialogsearch.search.similarity import (
    ClassicSimilarity,
    DialogueAwareSimilarity,
    Similarity,
)

__all__ = [
    "AnalyzedDocument",
    "AveragePayloadFunction",
    "BooleanQuery",
    "ClassicSimilarity",
    "DialogueAwareSimilarity",
    "Explanation",
    "InMemoryIndex",
    "IndexSearcher",
    "MaxPayloadFunction",
    "MinPayloadFunction",
    "PayloadFunction",
    "PayloadScoreQuery",
    "Posting",
    "Query",
    "ScoreDoc",
    "Similarity",
    "StoredDocument",
    "TermQuery",
    "TopDocs",
    "build_query",
    "payload_function_for",
]
