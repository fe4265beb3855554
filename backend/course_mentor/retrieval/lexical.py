"""Keyword scoring used when the query cannot be embedded."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Sequence

from course_mentor.core.config import LexicalScoring
from course_mentor.utils.text import tokenize


@dataclass(slots=True)
class LexicalScorer:
    """Exact/partial match counts, proximity and coverage, length-normalised."""

    weights: LexicalScoring

    def query_terms(self, query: str) -> list[str]:
        return tokenize(query, min_length=3)

    def score(self, terms: Sequence[str], content: str) -> float:
        if not terms:
            return 0.0
        text = content.lower()
        w = self.weights
        raw = 0.0

        for term in terms:
            raw += len(re.findall(rf"\b{re.escape(term)}\b", text)) * w.exact_weight

        for term in terms:
            if len(term) >= w.partial_min_length:
                raw += text.count(term) * w.partial_weight

        for first, second in zip(terms, terms[1:]):
            raw += self._proximity_bonus(text, first, second)

        distinct = list(dict.fromkeys(terms))
        if len(distinct) > 1:
            found = sum(1 for term in distinct if term in text)
            raw += w.coverage_bonus * found / len(distinct)

        word_count = len(text.split())
        return raw / math.log(max(word_count, w.length_floor)) * w.scale

    def _proximity_bonus(self, text: str, first: str, second: str) -> float:
        pos_a = text.find(first)
        pos_b = text.find(second)
        if pos_a == -1 or pos_b == -1:
            return 0.0
        distance = abs(pos_a - pos_b)
        for limit, bonus in self.weights.proximity_tiers:
            if distance < limit:
                return bonus
        return 0.0


__all__ = ["LexicalScorer"]
