"""Rank chunks against a query by cosine similarity, or lexically as a fallback."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Sequence

from course_mentor.core.config import LexicalScoring
from course_mentor.core.errors import EmbeddingServiceError, ProviderRateLimitError
from course_mentor.core.logging import get_logger
from course_mentor.core.metrics import EMBEDDING_FAILURES
from course_mentor.ingest.embeddings import Embedded, Embedder
from course_mentor.ingest.types import Chunk
from course_mentor.retrieval.lexical import LexicalScorer

logger = get_logger(__name__)

EmbeddedCallback = Callable[[list[Chunk]], None]


@dataclass(slots=True)
class RankedResult:
    chunk: Chunk
    score: float


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """``dot(a, b) / (|a| |b|)``; 0 for mismatched or zero-length vectors."""
    if len(a) != len(b) or not a:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class SimilarityRanker:
    """Order chunks by relevance to a query.

    Chunks without an embedding in the query's space are embedded on demand;
    ``on_embedded`` receives those chunks once per ranking so a store can
    persist them.
    """

    def __init__(self, embedder: Embedder, lexical: LexicalScoring | None = None) -> None:
        self.embedder = embedder
        self.lexical = LexicalScorer(lexical or LexicalScoring())

    def rank(
        self,
        query: str,
        chunks: Sequence[Chunk],
        top_k: int = 5,
        on_embedded: EmbeddedCallback | None = None,
    ) -> list[RankedResult]:
        if top_k <= 0 or not chunks:
            return []
        try:
            query_result = self.embedder.embed(query)
        except ProviderRateLimitError:
            raise
        except EmbeddingServiceError as exc:
            logger.warning("Query embedding failed, using keyword ranking: %s", exc)
            return self.rank_lexical(query, chunks, top_k)

        if isinstance(query_result, Embedded):
            return self.rank_vectors(query_result, chunks, top_k, on_embedded)
        logger.debug("Query not embeddable (%s); using keyword ranking", query_result.reason)
        return self.rank_lexical(query, chunks, top_k)

    def rank_vectors(
        self,
        query: Embedded,
        chunks: Sequence[Chunk],
        top_k: int,
        on_embedded: EmbeddedCallback | None = None,
    ) -> list[RankedResult]:
        fresh: list[Chunk] = []
        scored = [
            RankedResult(chunk=chunk, score=self._similarity(query, chunk, fresh))
            for chunk in chunks
        ]
        if fresh and on_embedded is not None:
            on_embedded(fresh)
        scored.sort(key=lambda item: item.score, reverse=True)
        return scored[:top_k]

    def rank_lexical(self, query: str, chunks: Sequence[Chunk], top_k: int) -> list[RankedResult]:
        terms = self.lexical.query_terms(query)
        scored: list[RankedResult] = []
        for chunk in chunks:
            score = self.lexical.score(terms, chunk.content)
            if score > 0:
                scored.append(RankedResult(chunk=chunk, score=score))
        scored.sort(key=lambda item: item.score, reverse=True)
        return scored[:top_k]

    def _similarity(self, query: Embedded, chunk: Chunk, fresh: list[Chunk]) -> float:
        vector = chunk.cached_embedding(query.space)
        if vector is None:
            vector = self._embed_chunk(chunk)
            if vector is not None:
                fresh.append(chunk)
        if vector is None:
            return 0.0
        return cosine_similarity(query.vector, vector)

    def _embed_chunk(self, chunk: Chunk) -> list[float] | None:
        try:
            result = self.embedder.embed(chunk.content)
        except EmbeddingServiceError as exc:
            EMBEDDING_FAILURES.labels(stage="rank").inc()
            logger.warning("Chunk %s of %s could not be embedded: %s", chunk.ordinal, chunk.source_id, exc)
            return None
        if not isinstance(result, Embedded):
            return None
        chunk.attach_embedding(result.vector, result.space)
        return result.vector


__all__ = ["SimilarityRanker", "RankedResult", "cosine_similarity"]
