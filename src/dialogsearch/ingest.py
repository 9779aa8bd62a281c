"""Index plain-text files and zip archives of them.

Each file is analysed by a worker thread with its own analysis chain. The
results are merged into the index on the calling thread in discovery order.
A document that cannot be read is logged and counted as a failure, and the
rest of the batch carries on.
"""

from __future__ import annotations

import io
import time
import zipfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from dialogsearch.config import DialogSearchSettings, get_logger, get_settings
from dialogsearch.search.index import AnalyzedDocument, InMemoryIndex

logger = get_logger(__name__)


class IngestResult:
    """Outcome of an ingestion run."""

    def __init__(self) -> None:
        """Initialize empty counters."""
        self.indexed: dict[str, int] = {}  # title -> doc_id
        self.errors: dict[str, str] = {}  # path -> message
        self.skipped: list[str] = []
        self.start_time = time.time()
        self.end_time: float | None = None

    @property
    def successful(self) -> int:
        return len(self.indexed)

    @property
    def failed(self) -> int:
        return len(self.errors)

    @property
    def duration(self) -> float:
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time


class DocumentIngestor:
    """Walk files and directories, feeding text documents to an index."""

    def __init__(
        self,
        index: InMemoryIndex,
        settings: DialogSearchSettings | None = None,
    ) -> None:
        """Initialize ingestor.

        Args:
            index: Index receiving the documents
            settings: Worker count and indexed extensions
        """
        self.index = index
        self.settings = settings or get_settings()
        self.extensions = tuple(self.settings.index_extensions)

    def discover(self, paths: list[Path]) -> list[Path]:
        """Expand directories into the indexable files below them, sorted."""
        found: list[Path] = []
        for path in paths:
            if path.is_dir():
                found.extend(
                    p
                    for p in sorted(path.rglob("*"))
                    if p.is_file() and self._wanted(p)
                )
            elif path.is_file():
                found.append(path)
            else:
                raise FileNotFoundError(f"No such file or directory: {path}")
        return found

    def ingest(self, paths: list[Path]) -> IngestResult:
        """Index every text file and archive under ``paths``.

        Files are analysed in parallel but merged in discovery order, so
        document ids do not depend on thread scheduling.

        Raises:
            FileNotFoundError: If one of ``paths`` does not exist
        """
        result = IngestResult()
        files = self.discover(paths)
        logger.info(
            "Starting ingestion", files=len(files), workers=self.settings.index_workers
        )

        with ThreadPoolExecutor(max_workers=self.settings.index_workers) as executor:
            futures = [executor.submit(self._analyze_path, path) for path in files]
            for path, future in zip(files, futures, strict=True):
                try:
                    documents = future.result()
                except (OSError, UnicodeDecodeError, zipfile.BadZipFile) as e:
                    logger.error("Error indexing", path=str(path), error=str(e))
                    result.errors[str(path)] = str(e)
                    continue
                if not documents:
                    result.skipped.append(str(path))
                for document in documents:
                    result.indexed[document.title] = self.index.add_analyzed(document)

        result.end_time = time.time()
        logger.info(
            "Ingestion finished",
            indexed=result.successful,
            failed=result.failed,
            skipped=len(result.skipped),
            duration=round(result.duration, 3),
        )
        return result

    def _wanted(self, path: Path) -> bool:
        suffix = path.suffix.lower()
        return suffix == ".zip" or suffix in self.extensions

    def _analyze_path(self, path: Path) -> list[AnalyzedDocument]:
        if path.suffix.lower() == ".zip":
            return self._analyze_archive(path)
        if path.suffix.lower() not in self.extensions:
            return []
        with path.open(encoding="utf-8") as f:
            logger.info("Indexing", title=path.name)
            return [self.index.analyze_document(path.name, f)]

    def _analyze_archive(self, path: Path) -> list[AnalyzedDocument]:
        documents: list[AnalyzedDocument] = []
        with zipfile.ZipFile(path) as archive:
            for info in archive.infolist():
                if info.is_dir() or not info.filename.lower().endswith(self.extensions):
                    continue
                title = f"{path.name}:{info.filename}"
                with archive.open(info) as raw:
                    text = io.TextIOWrapper(raw, encoding="utf-8")
                    logger.info("Indexing", title=title)
                    documents.append(self.index.analyze_document(title, text))
        return documents
