"""Tests for similarity and keyword ranking."""

import math

import pytest

from course_mentor.core.config import LexicalScoring
from course_mentor.core.errors import EmbeddingRateLimitError, EmbeddingServiceError, ProviderRateLimitError
from course_mentor.ingest.types import Chunk
from course_mentor.retrieval import LexicalScorer, SimilarityRanker, cosine_similarity

from fakes import KeywordEmbedder

VOCABULARY = ["mercado", "química", "marca"]


def _chunks() -> list[Chunk]:
    return [
        Chunk(content="El mercado objetivo del plan", source_id="plan.pdf", ordinal=0),
        Chunk(content="La química del laboratorio", source_id="quimica.pdf", ordinal=0),
        Chunk(content="La marca y el mercado", source_id="marketing.pdf", ordinal=0),
    ]


def test_cosine_similarity_basics() -> None:
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)
    assert cosine_similarity([1.0, 1.0], [1.0, 0.0]) == pytest.approx(1 / math.sqrt(2))


@pytest.mark.parametrize(
    "a, b",
    [([1.0, 2.0], [1.0]), ([], []), ([0.0, 0.0], [1.0, 1.0])],
)
def test_cosine_similarity_degenerate(a: list[float], b: list[float]) -> None:
    assert cosine_similarity(a, b) == 0.0


def test_rank_orders_by_similarity() -> None:
    ranker = SimilarityRanker(KeywordEmbedder(VOCABULARY))
    results = ranker.rank("mercado", _chunks(), top_k=2)
    assert [item.chunk.source_id for item in results] == ["plan.pdf", "marketing.pdf"]
    assert results[0].score == pytest.approx(1.0)
    assert results[1].score == pytest.approx(1 / math.sqrt(2))


def test_rank_respects_top_k_and_is_monotonic() -> None:
    ranker = SimilarityRanker(KeywordEmbedder(VOCABULARY))
    chunks = _chunks()
    for top_k in (0, 1, 2, 3, 10):
        results = ranker.rank("mercado y marca", chunks, top_k=top_k)
        assert len(results) == min(top_k, len(chunks))
        scores = [item.score for item in results]
        assert scores == sorted(scores, reverse=True)


def test_rank_empty_corpus() -> None:
    assert SimilarityRanker(KeywordEmbedder(VOCABULARY)).rank("mercado", [], top_k=5) == []


def test_rank_attaches_lazy_embeddings_and_reuses_them() -> None:
    embedder = KeywordEmbedder(VOCABULARY)
    ranker = SimilarityRanker(embedder)
    chunks = _chunks()
    ranker.rank("mercado", chunks, top_k=3)
    assert chunks[0].embedding == [1.0, 0.0, 0.0]
    assert chunks[0].embedding_space == embedder.space

    embedder.calls.clear()
    ranker.rank("marca", chunks, top_k=3)
    assert embedder.calls == ["marca"]


def test_chunk_embedding_failure_scores_zero() -> None:
    chunks = _chunks()
    embedder = KeywordEmbedder(
        VOCABULARY,
        fail_on={chunks[0].content},
        error=EmbeddingServiceError("boom", status_code=500),
    )
    results = SimilarityRanker(embedder).rank("mercado", chunks, top_k=3)
    by_source = {item.chunk.source_id: item.score for item in results}
    assert by_source["plan.pdf"] == 0.0
    assert by_source["marketing.pdf"] > 0
    assert results[0].chunk.source_id == "marketing.pdf"


def test_query_rate_limit_propagates() -> None:
    embedder = KeywordEmbedder(VOCABULARY, error=EmbeddingRateLimitError("quota", status_code=429))
    with pytest.raises(ProviderRateLimitError):
        SimilarityRanker(embedder).rank("mercado", _chunks(), top_k=3)


def test_unembeddable_query_uses_keyword_ranking() -> None:
    chunks = [
        Chunk(content="La misión de la empresa define su propósito.", source_id="cultura.pdf"),
        Chunk(content="La reacción química libera energía.", source_id="quimica.pdf"),
    ]
    results = SimilarityRanker(KeywordEmbedder(VOCABULARY)).rank("misión de la empresa", chunks, top_k=5)
    assert [item.chunk.source_id for item in results] == ["cultura.pdf"]
    assert results[0].score > 0


def test_query_service_error_uses_keyword_ranking() -> None:
    query = "misión de la empresa"
    embedder = KeywordEmbedder(VOCABULARY, fail_on={query}, error=EmbeddingServiceError("down"))
    chunks = [Chunk(content="La misión de la empresa define su propósito.", source_id="cultura.pdf")]
    results = SimilarityRanker(embedder).rank(query, chunks, top_k=5)
    assert len(results) == 1


def test_lexical_scorer_prefers_dense_matches() -> None:
    scorer = LexicalScorer(LexicalScoring())
    terms = scorer.query_terms("plan de negocio")
    assert terms == ["plan", "negocio"]
    focused = scorer.score(terms, "El plan de negocio resume el negocio.")
    diluted = scorer.score(terms, "El plan " + "texto de relleno " * 40 + "y el negocio.")
    assert focused > diluted > 0
    assert scorer.score(terms, "Nada relevante aquí.") == 0.0
    assert scorer.score([], "El plan de negocio") == 0.0


def test_equal_similarity_keeps_corpus_order() -> None:
    chunks = [Chunk(content="El mercado del plan", source_id=f"copia{i}.pdf") for i in range(4)]
    results = SimilarityRanker(KeywordEmbedder(VOCABULARY)).rank("mercado", chunks, top_k=4)
    assert [item.chunk.source_id for item in results] == ["copia0.pdf", "copia1.pdf", "copia2.pdf", "copia3.pdf"]
    assert len({item.score for item in results}) == 1


def test_equal_keyword_scores_keep_corpus_order() -> None:
    chunks = [Chunk(content="La misión de la empresa", source_id=f"copia{i}.pdf") for i in range(3)]
    results = SimilarityRanker(KeywordEmbedder(VOCABULARY)).rank("misión empresa", chunks, top_k=3)
    assert [item.chunk.source_id for item in results] == ["copia0.pdf", "copia1.pdf", "copia2.pdf"]


@pytest.mark.parametrize(
    "distance, bonus",
    [(30, 8.0), (49, 8.0), (50, 4.0), (60, 4.0), (150, 2.0), (199, 2.0), (200, 0.0), (250, 0.0)],
)
def test_lexical_proximity_tiers(distance: int, bonus: float) -> None:
    weights = LexicalScoring(exact_weight=0, partial_weight=0, coverage_bonus=0, scale=1)
    content = "alfa" + " " * (distance - 4) + "beta"
    score = LexicalScorer(weights).score(["alfa", "beta"], content)
    assert score == pytest.approx(bonus / math.log(10))


def test_rank_reports_newly_embedded_chunks_once() -> None:
    embedder = KeywordEmbedder(VOCABULARY)
    ranker = SimilarityRanker(embedder)
    chunks = _chunks()
    chunks[1].attach_embedding([0.0, 1.0, 0.0], embedder.space)
    reported: list[list[Chunk]] = []

    ranker.rank("mercado", chunks, top_k=3, on_embedded=reported.append)
    assert [[chunk.source_id for chunk in batch] for batch in reported] == [["plan.pdf", "marketing.pdf"]]

    ranker.rank("marca", chunks, top_k=3, on_embedded=reported.append)
    assert len(reported) == 1
