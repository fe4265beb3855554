"""Ingest pipeline: extract, chunk, embed and persist a class document."""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable

from course_mentor.core.config import Settings
from course_mentor.core.errors import EmbeddingServiceError
from course_mentor.core.logging import get_logger, log_context
from course_mentor.core.metrics import EMBEDDING_FAILURES, INGESTED_CHUNKS
from course_mentor.ingest.chunker import build_chunks
from course_mentor.ingest.embeddings import Embedded, Embedder
from course_mentor.ingest.loaders import extract_pdf_text
from course_mentor.ingest.types import Chunk, IngestResult, IngestStats
from course_mentor.store.base import DocumentStore
from course_mentor.utils.hashing import document_id_for

logger = get_logger(__name__)


class IngestPipeline:
    """Coordinate extraction, chunking, embeddings and persistence."""

    def __init__(
        self,
        store: DocumentStore,
        settings: Settings,
        embedder: Embedder | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.store = store
        self.settings = settings
        self.embedder = embedder
        self.sleep = sleep

    def ingest_pdf(self, class_id: str, path: Path, document_id: str | None = None) -> IngestResult:
        path = path.expanduser()
        if not path.is_file():
            raise FileNotFoundError(path)
        document_id = document_id or document_id_for(path)
        if self.store.is_processed(class_id, document_id):
            return self._already_processed(class_id, document_id, str(path))
        extracted = extract_pdf_text(path)
        logger.info(
            "Extracted %s characters from %s",
            len(extracted.text),
            path.name,
            extra=log_context(class_id=class_id, pages=extracted.page_count),
        )
        return self.ingest_text(
            class_id,
            extracted.text,
            source=str(path),
            document_id=document_id,
            page_count=extracted.page_count,
        )

    def ingest_text(
        self,
        class_id: str,
        text: str,
        source: str,
        document_id: str,
        page_count: int | None = None,
    ) -> IngestResult:
        """Chunk ``text`` and append every chunk; blank text raises ``NoExtractableTextError``.

        A document already marked processed for the class is left untouched.
        """
        if self.store.is_processed(class_id, document_id):
            return self._already_processed(class_id, document_id, source)
        chunks = build_chunks(
            text,
            source_id=source,
            document_id=document_id,
            size=self.settings.chunk_size,
            overlap=self.settings.chunk_overlap,
            page_count=page_count,
        )
        stats = IngestStats(chunks=len(chunks))
        for index, chunk in enumerate(chunks):
            if self.embedder is not None:
                if index > 0 and self.settings.embed_batch_delay_ms > 0:
                    self.sleep(self.settings.embed_batch_delay_ms / 1000)
                if self._embed(chunk):
                    stats.embedded += 1
                else:
                    stats.failed_embeddings += 1

        self.store.extend(class_id, chunks)
        INGESTED_CHUNKS.inc(len(chunks))
        self.store.mark_processed(class_id, document_id)
        logger.info(
            "Ingested %s chunks (%s embedded)",
            stats.chunks,
            stats.embedded,
            extra=log_context(class_id=class_id, document_id=document_id),
        )
        return IngestResult(
            class_id=class_id,
            document_id=document_id,
            source=source,
            status="processed",
            stats=stats,
        )

    def _already_processed(self, class_id: str, document_id: str, source: str) -> IngestResult:
        logger.info(
            "Document already processed, skipping",
            extra=log_context(class_id=class_id, document_id=document_id),
        )
        return IngestResult(
            class_id=class_id,
            document_id=document_id,
            source=source,
            status="already_processed",
        )

    def _embed(self, chunk: Chunk) -> bool:
        try:
            result = self.embedder.embed(chunk.content)
        except EmbeddingServiceError as exc:
            EMBEDDING_FAILURES.labels(stage="ingest").inc()
            logger.warning(
                "Skipping embedding for chunk %s: %s",
                chunk.ordinal,
                exc,
                extra=log_context(document_id=chunk.document_id),
            )
            return False
        if not isinstance(result, Embedded):
            return False
        chunk.attach_embedding(result.vector, result.space)
        return True


__all__ = ["IngestPipeline"]
