"""Subject-matter theme detection over a class corpus.

Each theme carries three tiers of terms. A corpus scores
``weight(tier) * occurrences(term)`` summed over every term, using literal
substring counts on the lowercased text, so ``"ion"`` also matches inside
``"reacción"``. Confidence rewards a clear winner over the runner-up.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from course_mentor.core.config import ThemeScoring
from course_mentor.ingest.types import Chunk


@dataclass(frozen=True, slots=True)
class ThemeProfile:
    name: str
    high_terms: tuple[str, ...]
    medium_terms: tuple[str, ...]
    low_terms: tuple[str, ...]


THEME_TAXONOMY: tuple[ThemeProfile, ...] = (
    ThemeProfile(
        "Plan de Negocio",
        ("plan de negocio", "business plan", "modelo de negocio", "business model canvas"),
        ("canvas", "estrategia empresarial", "propuesta de valor", "segmento cliente"),
        ("mercado objetivo", "competencia", "ventaja competitiva"),
    ),
    ThemeProfile(
        "Marketing",
        ("marketing", "publicidad", "branding", "estrategia marketing"),
        ("marca", "segmentación", "posicionamiento", "target", "audiencia"),
        ("promoción", "comunicación", "redes sociales", "campaña"),
    ),
    ThemeProfile(
        "Finanzas",
        ("finanzas", "análisis financiero", "inversión", "presupuesto"),
        ("roi", "flujo de caja", "rentabilidad", "capital", "financiamiento"),
        ("costos", "ingresos", "gastos", "precio", "valor"),
    ),
    ThemeProfile(
        "Innovación",
        ("innovación", "design thinking", "creatividad", "disrupción"),
        ("prototipo", "mvp", "producto mínimo viable", "transformación"),
        ("tecnología", "digital", "cambio", "desarrollo"),
    ),
    ThemeProfile(
        "Liderazgo",
        ("liderazgo", "gestión equipos", "dirección", "management"),
        ("equipo", "recursos humanos", "motivación", "coordinación"),
        ("comunicación", "delegación", "toma decisiones"),
    ),
    ThemeProfile(
        "Emprendimiento",
        ("emprendimiento", "startup", "emprendedor", "entrepreneur"),
        ("empresa", "negocio", "oportunidad", "riesgo empresarial"),
        ("iniciativa", "proyecto", "idea negocio"),
    ),
    ThemeProfile(
        "Cultura Empresarial",
        ("cultura empresarial", "valores organizacionales", "clima laboral"),
        ("cultura", "valores", "misión", "visión", "objetivos"),
        ("ética", "responsabilidad", "compromiso"),
    ),
    ThemeProfile(
        "Metodologías",
        ("scamper", "design thinking", "lean startup", "metodología"),
        ("foda", "swot", "agile", "canvas", "framework"),
        ("herramientas", "técnicas", "proceso", "método"),
    ),
    ThemeProfile(
        "Química",
        ("química", "reacción química", "elemento químico", "compuesto químico"),
        ("átomo", "molécula", "ion", "enlace", "valencia", "ph"),
        ("laboratorio", "experimento", "fórmula", "tabla periódica"),
    ),
    ThemeProfile(
        "Ciencias",
        ("biología", "física", "matemáticas", "ciencias naturales"),
        ("investigación", "experimento", "hipótesis", "teoría"),
        ("análisis", "observación", "método científico", "datos"),
    ),
    ThemeProfile(
        "Tecnología",
        ("programación", "software", "desarrollo", "código"),
        ("algoritmo", "base de datos", "aplicación", "sistema"),
        ("tecnología", "digital", "informática", "computación"),
    ),
    ThemeProfile(
        "Educación",
        ("pedagogía", "didáctica", "enseñanza", "aprendizaje"),
        ("estudiante", "alumno", "profesor", "clase", "curso"),
        ("educación", "formación", "conocimiento", "capacitación"),
    ),
)


@dataclass(slots=True)
class ThemeAnalysis:
    ranked_themes: list[str] = field(default_factory=list)
    matched_keywords: list[str] = field(default_factory=list)
    confidence: float = 0.5
    scores: dict[str, float] = field(default_factory=dict)

    @property
    def primary_theme(self) -> str | None:
        return self.ranked_themes[0] if self.ranked_themes else None

    def to_dict(self) -> dict[str, object]:
        return {
            "ranked_themes": list(self.ranked_themes),
            "matched_keywords": list(self.matched_keywords),
            "confidence": self.confidence,
            "scores": dict(self.scores),
        }


class ThemeAnalyzer:
    """Score a corpus against ``THEME_TAXONOMY``."""

    def __init__(
        self,
        weights: ThemeScoring | None = None,
        taxonomy: Sequence[ThemeProfile] = THEME_TAXONOMY,
    ) -> None:
        self.weights = weights or ThemeScoring()
        self.taxonomy = taxonomy

    def analyze(self, chunks: Iterable[Chunk]) -> ThemeAnalysis:
        text = " ".join(chunk.content for chunk in chunks).lower()
        return self.analyze_text(text)

    def analyze_text(self, text: str) -> ThemeAnalysis:
        text = text.lower()
        w = self.weights
        scores: dict[str, float] = {}
        keywords: dict[str, None] = {}

        for profile in self.taxonomy:
            score = 0.0
            for terms, weight in (
                (profile.high_terms, w.high_weight),
                (profile.medium_terms, w.medium_weight),
                (profile.low_terms, w.low_weight),
            ):
                for term in terms:
                    occurrences = text.count(term)
                    if occurrences:
                        score += weight * occurrences
                        keywords.setdefault(term, None)
            if score > 0:
                scores[profile.name] = score

        # sorted() is stable, so equal scores keep taxonomy order.
        ranked = sorted(scores, key=lambda name: scores[name], reverse=True)
        return ThemeAnalysis(
            ranked_themes=ranked,
            matched_keywords=list(keywords),
            confidence=self._confidence([scores[name] for name in ranked]),
            scores=scores,
        )

    def _confidence(self, ordered_scores: Sequence[float]) -> float:
        w = self.weights
        if not ordered_scores:
            return w.default_confidence
        if len(ordered_scores) == 1:
            return w.single_theme_confidence
        first, second = ordered_scores[0], ordered_scores[1]
        spread = (first - second) / first
        return min(w.confidence_cap, w.confidence_base + spread * w.confidence_spread)


__all__ = ["ThemeProfile", "THEME_TAXONOMY", "ThemeAnalysis", "ThemeAnalyzer"]
