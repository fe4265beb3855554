"""Chunking utilities.

Fixed-size sliding window over raw extracted text::

    text = "ABCDEFGHIJ", size = 5, overlap = 2
    -> "ABCDE", "DEFGH", "GHIJ", "J"

The window advances by ``size - overlap`` and stops once the start offset
reaches the end of the text, so the last chunk always ends at ``len(text)``.
"""

from __future__ import annotations

from course_mentor.core.errors import ConfigError, NoExtractableTextError
from course_mentor.ingest.types import Chunk


def validate_window(size: int, overlap: int) -> None:
    if size <= 0:
        raise ConfigError(f"chunk size must be positive, got {size}")
    if overlap < 0:
        raise ConfigError(f"chunk overlap must not be negative, got {overlap}")
    if overlap >= size:
        raise ConfigError(f"chunk overlap ({overlap}) must be smaller than chunk size ({size})")


def split_text(text: str, size: int = 500, overlap: int = 100) -> list[str]:
    """Split ``text`` into overlapping substrings of at most ``size`` characters.

    Empty or whitespace-only text yields no chunks.
    """
    validate_window(size, overlap)
    if not text.strip():
        return []
    step = size - overlap
    chunks: list[str] = []
    start = 0
    while start < len(text):
        chunks.append(text[start : start + size])
        start += step
    return chunks


def page_hint(index: int, total_chunks: int, page_count: int | None) -> int | None:
    """Approximate 1-based page of chunk ``index`` assuming text is spread evenly."""
    if not page_count or total_chunks <= 0:
        return None
    return min(page_count, index * page_count // total_chunks + 1)


def build_chunks(
    text: str,
    source_id: str,
    document_id: str | None = None,
    size: int = 500,
    overlap: int = 100,
    page_count: int | None = None,
) -> list[Chunk]:
    """Chunk a document's text; blank text is an error, not an empty corpus."""
    validate_window(size, overlap)
    if not text.strip():
        raise NoExtractableTextError(source_id)
    pieces = split_text(text, size=size, overlap=overlap)
    return [
        Chunk(
            content=piece,
            source_id=source_id,
            page_hint=page_hint(ordinal, len(pieces), page_count),
            document_id=document_id,
            ordinal=ordinal,
        )
        for ordinal, piece in enumerate(pieces)
    ]


def estimate_chunks(text_length: int, size: int = 500, overlap: int = 100) -> int:
    """Number of chunks ``split_text`` yields for text of ``text_length`` chars."""
    validate_window(size, overlap)
    if text_length <= 0:
        return 0
    step = size - overlap
    return (text_length + step - 1) // step


__all__ = ["split_text", "build_chunks", "page_hint", "estimate_chunks", "validate_window"]
