"""Retrieval components."""

from .lexical import LexicalScorer
from .ranker import RankedResult, SimilarityRanker, cosine_similarity

__all__ = [
    "LexicalScorer",
    "RankedResult",
    "SimilarityRanker",
    "cosine_similarity",
]
