"""In-memory inverted index holding payload-bearing postings."""

from __future__ import annotations

import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import TextIO

from dialogsearch.analysis.analyzer import Analyzer, dialogue_analyzer
from dialogsearch.analysis.token import DialoguePayload
from dialogsearch.config import get_logger
from dialogsearch.exceptions import IndexingError

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Posting:
    """One occurrence of a term in a document."""

    doc_id: int
    position: int
    start_offset: int
    end_offset: int
    payload: bytes | None

    @property
    def dialogue(self) -> DialoguePayload:
        return DialoguePayload.from_bytes(self.payload)


@dataclass(frozen=True, slots=True)
class StoredDocument:
    """Stored fields and statistics of an indexed document."""

    doc_id: int
    title: str
    length: int


@dataclass(frozen=True, slots=True)
class AnalyzedDocument:
    """Terms of one document, analysed and ready to merge into an index."""

    title: str
    length: int
    occurrences: dict[str, list[tuple[int, int, int, bytes | None]]]


class InMemoryIndex:
    """Term to postings map for a single text field.

    Analysis of each document runs outside the lock so several threads can
    tokenize in parallel; merging the results into the index is serialized.
    Document ids follow merge order.
    """

    def __init__(self, analyzer: Analyzer | None = None) -> None:
        """Initialize an empty index.

        Args:
            analyzer: Index-time analyzer; defaults to the dialogue analyzer
        """
        self.analyzer = analyzer or dialogue_analyzer()
        self._lock = threading.Lock()
        self._documents: list[StoredDocument] = []
        self._postings: dict[str, dict[int, list[Posting]]] = defaultdict(dict)

    def analyze_document(self, title: str, source: str | TextIO) -> AnalyzedDocument:
        """Analyze one document without touching the index.

        Safe to call from several threads at once.

        Raises:
            IndexingError: If the title is empty
            OSError: If reading ``source`` fails
        """
        if not title:
            raise IndexingError(
                "Document title must not be empty",
                hint="Use the file name or another stable label as the title",
            )

        occurrences: dict[str, list[tuple[int, int, int, bytes | None]]] = {}
        position = -1
        length = 0
        for token in self.analyzer.analyze(source):
            position += token.position_increment
            position = max(position, 0)
            if token.position_increment > 0:
                length += 1
            payload = None if token.payload is None else token.payload.to_bytes()
            occurrences.setdefault(token.text, []).append(
                (position, token.start_offset, token.end_offset, payload)
            )
        return AnalyzedDocument(title, length, occurrences)

    def add_analyzed(self, document: AnalyzedDocument) -> int:
        """Merge an analysed document and return its new id."""
        with self._lock:
            doc_id = len(self._documents)
            self._documents.append(
                StoredDocument(doc_id, document.title, document.length)
            )
            for term, hits in document.occurrences.items():
                self._postings[term][doc_id] = [
                    Posting(doc_id, pos, start, end, payload)
                    for pos, start, end, payload in hits
                ]

        logger.debug(
            "Indexed document",
            doc_id=doc_id,
            title=document.title,
            length=document.length,
            unique_terms=len(document.occurrences),
        )
        return doc_id

    def add_document(self, title: str, source: str | TextIO) -> int:
        """Analyze and index one document.

        Args:
            title: Stored title used when reporting hits
            source: Document body

        Returns:
            The new document's id

        Raises:
            IndexingError: If the title is empty
            OSError: If reading ``source`` fails; nothing is indexed then
        """
        return self.add_analyzed(self.analyze_document(title, source))

    @property
    def num_docs(self) -> int:
        return len(self._documents)

    def document(self, doc_id: int) -> StoredDocument:
        """Return the stored document for ``doc_id``.

        Raises:
            IndexingError: If no such document exists
        """
        if not 0 <= doc_id < len(self._documents):
            raise IndexingError(
                f"No document with id {doc_id}",
                details={"num_docs": len(self._documents)},
            )
        return self._documents[doc_id]

    def field_length(self, doc_id: int) -> int:
        return self.document(doc_id).length

    def postings(self, term: str) -> dict[int, list[Posting]]:
        """Return the postings of ``term`` grouped by document id."""
        return self._postings.get(term, {})

    def doc_freq(self, term: str) -> int:
        return len(self.postings(term))

    def terms(self) -> list[str]:
        return sorted(self._postings)
