"""Document store capability used by ingestion and answering."""

from __future__ import annotations

from typing import Protocol, Sequence

from course_mentor.ingest.types import Chunk


class DocumentStore(Protocol):
    def find(self, class_id: str) -> list[Chunk]:
        """All chunks of a class in insertion order."""
        ...

    def append(self, class_id: str, chunk: Chunk) -> None: ...

    def extend(self, class_id: str, chunks: Sequence[Chunk]) -> None:
        """Append several chunks in one write."""
        ...

    def mark_processed(self, class_id: str, document_id: str) -> None: ...

    def is_processed(self, class_id: str, document_id: str) -> bool: ...

    def save_embeddings(self, class_id: str, chunks: Sequence[Chunk]) -> None:
        """Persist the embeddings currently attached to ``chunks``.

        Chunks are matched by ``(document_id, ordinal)``; chunks without an
        embedding are ignored.
        """
        ...


__all__ = ["DocumentStore"]
