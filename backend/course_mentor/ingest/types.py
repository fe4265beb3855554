"""Common ingestion data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class Chunk:
    """A bounded slice of a source document, the unit of retrieval.

    ``content`` is never modified after creation. ``embedding`` is attached
    lazily and is only meaningful together with ``embedding_space``.
    """

    content: str
    source_id: str
    page_hint: int | None = None
    document_id: str | None = None
    ordinal: int = 0
    embedding: list[float] | None = None
    embedding_space: str | None = None

    def cached_embedding(self, space: str) -> list[float] | None:
        if self.embedding is not None and self.embedding_space == space:
            return self.embedding
        return None

    def attach_embedding(self, vector: list[float], space: str) -> None:
        self.embedding = vector
        self.embedding_space = space

    @property
    def metadata(self) -> dict[str, Any]:
        """Metadata in the persisted artifact shape ``{source, page}``."""
        return {"source": self.source_id, "page": self.page_hint}

    @property
    def word_count(self) -> int:
        return len(self.content.split())


@dataclass(slots=True)
class ExtractedText:
    """Text pulled from a PDF together with its page count."""

    path: Path
    text: str
    page_count: int
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class IngestStats:
    """Aggregated ingest statistics for one document."""

    chunks: int = 0
    embedded: int = 0
    failed_embeddings: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "chunks": self.chunks,
            "embedded": self.embedded,
            "failed_embeddings": self.failed_embeddings,
        }


@dataclass(slots=True)
class IngestResult:
    """Outcome for a single processed document."""

    class_id: str
    document_id: str
    source: str
    status: str
    stats: IngestStats = field(default_factory=IngestStats)
    detail: str | None = None


__all__ = ["Chunk", "ExtractedText", "IngestStats", "IngestResult"]
