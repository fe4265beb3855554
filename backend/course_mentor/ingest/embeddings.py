"""Embedding strategies.

Two strategies share the ``embed(text) -> EmbeddingResult`` capability:

* ``RemoteEmbedder`` calls an OpenAI-compatible embedding endpoint.
* ``LocalEmbedder`` builds a 25-dimension lexical fingerprint without any
  network access. It is approximate: it captures topic keywords and
  structural statistics, not meaning, and its vectors live in their own
  space. Vectors from the two strategies must never be compared.
"""

from __future__ import annotations

import math
import time
from collections import Counter
from dataclasses import dataclass
from typing import Any, Protocol, Union

import requests

from course_mentor.core.config import Settings
from course_mentor.core.errors import EmbeddingRateLimitError, EmbeddingServiceError
from course_mentor.core.logging import get_logger
from course_mentor.core.metrics import PROVIDER_LATENCY
from course_mentor.utils.text import tokenize

logger = get_logger(__name__)

LOCAL_SPACE = "local:v1"
LOCAL_DIM = 25
_TOP_TOKENS = 15

# Order fixes dimensions 0-4.
SEMANTIC_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        "ciencia",
        (
            "química", "física", "biología", "reacción", "elemento", "molécula", "átomo", "ion",
            "enlace", "valencia", "laboratorio", "experimento", "análisis", "compuesto", "fórmula",
            "tabla", "periódica", "ácido", "base", "sal", "óxido",
        ),
    ),
    (
        "negocio",
        (
            "empresa", "marketing", "finanzas", "estrategia", "mercado", "cliente", "producto",
            "servicio", "venta", "plan", "modelo", "canvas", "roi", "inversión", "presupuesto",
            "ganancia", "costo", "precio",
        ),
    ),
    (
        "educacion",
        (
            "estudiante", "aprender", "enseñar", "clase", "curso", "estudio", "conocimiento",
            "educación", "formación", "capacitación", "profesor", "maestro", "alumno", "escuela",
            "universidad",
        ),
    ),
    (
        "innovacion",
        (
            "innovación", "creatividad", "diseño", "tecnología", "digital", "desarrollo", "prototipo",
            "idea", "solución", "mejora", "cambio", "transformación", "disrupción",
        ),
    ),
    (
        "liderazgo",
        (
            "liderazgo", "equipo", "gestión", "dirección", "motivación", "coordinación", "comunicación",
            "colaboración", "objetivo", "meta", "líder", "manager", "jefe",
        ),
    ),
)


@dataclass(frozen=True, slots=True)
class Embedded:
    vector: list[float]
    space: str


@dataclass(frozen=True, slots=True)
class Unavailable:
    reason: str


EmbeddingResult = Union[Embedded, Unavailable]


class Embedder(Protocol):
    @property
    def space(self) -> str: ...

    def embed(self, text: str) -> EmbeddingResult: ...


class LocalEmbedder:
    """Deterministic keyword/statistics embedding used when no service is configured."""

    exact_weight = 3.0
    partial_weight = 1.5

    @property
    def space(self) -> str:
        return LOCAL_SPACE

    @property
    def dim(self) -> int:
        return LOCAL_DIM

    def embed(self, text: str) -> EmbeddingResult:
        tokens = tokenize(text, min_length=3)
        if not tokens:
            return Unavailable("no tokens longer than two characters")
        freq = Counter(tokens)
        vector = [0.0] * LOCAL_DIM

        for index, (_, keywords) in enumerate(SEMANTIC_CATEGORIES):
            vector[index] = self._category_score(freq, keywords)

        vector[5] = float(len(tokens))
        vector[6] = float(len(freq))
        vector[7] = float(sum(1 for token in tokens if len(token) > 6))
        vector[8] = float(max(freq.values()))
        vector[9] = sum(freq.values()) / max(len(freq), 1)

        # Counter.most_common keeps first-seen order among equal counts.
        for offset, (_, count) in enumerate(freq.most_common(_TOP_TOKENS)):
            vector[10 + offset] = float(count)

        return Embedded(vector=_normalize(vector), space=self.space)

    def _category_score(self, freq: Counter, keywords: tuple[str, ...]) -> float:
        score = 0.0
        for keyword in keywords:
            score += freq.get(keyword, 0) * self.exact_weight
            for token, count in freq.items():
                if keyword in token or token in keyword:
                    score += count * self.partial_weight
        return score


class RemoteEmbedder:
    """Client for an embedding endpoint speaking ``{model, input: [text]}``."""

    def __init__(
        self,
        api_url: str,
        api_key: str,
        model: str,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def space(self) -> str:
        return f"remote:{self.model}"

    def embed(self, text: str) -> EmbeddingResult:
        if not text.strip():
            return Unavailable("empty text")
        payload = {"model": self.model, "input": [text]}
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        started = time.perf_counter()
        try:
            resp = self.session.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise EmbeddingServiceError(f"Embedding request failed: {exc}") from exc
        finally:
            PROVIDER_LATENCY.labels(provider="embedding").observe(time.perf_counter() - started)

        if not resp.ok:
            body = _safe_json(resp)
            if is_rate_limited(resp.status_code, body):
                raise EmbeddingRateLimitError("Embedding rate limit reached", status_code=resp.status_code)
            raise EmbeddingServiceError(
                f"Embedding service returned {resp.status_code}", status_code=resp.status_code
            )

        vector = _extract_vector(_safe_json(resp))
        if vector is None:
            raise EmbeddingServiceError("Embedding response is missing data[0].embedding")
        return Embedded(vector=vector, space=self.space)


def build_embedder(settings: Settings, session: requests.Session | None = None) -> Embedder:
    """Remote strategy when an endpoint and key are configured, local otherwise."""
    if settings.remote_embeddings_enabled:
        return RemoteEmbedder(
            api_url=settings.embedding_api_url or "",
            api_key=settings.embedding_api_key or "",
            model=settings.embedding_model,
            session=session,
            timeout=settings.request_timeout_s,
        )
    logger.warning("No embedding service configured; using approximate local embeddings")
    return LocalEmbedder()


def is_rate_limited(status_code: int, body: Any) -> bool:
    """HTTP 429 whose error body names a rate limit in its code, type or message.

    A bare 429 without that indicator is an ordinary provider error.
    """
    if status_code != 429:
        return False
    if not isinstance(body, dict) or not isinstance(body.get("error"), dict):
        return False
    error = body["error"]
    marker = " ".join(str(error.get(key) or "") for key in ("code", "type", "message"))
    return "rate_limit" in marker


def _safe_json(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _extract_vector(body: Any) -> list[float] | None:
    if not isinstance(body, dict):
        return None
    data = body.get("data")
    if not isinstance(data, list) or not data or not isinstance(data[0], dict):
        return None
    vector = data[0].get("embedding")
    if not isinstance(vector, list) or not vector:
        return None
    try:
        return [float(value) for value in vector]
    except (TypeError, ValueError):
        return None


def _normalize(vector: list[float]) -> list[float]:
    norm = math.sqrt(sum(value * value for value in vector))
    if norm == 0:
        return vector
    inv = 1.0 / norm
    return [value * inv for value in vector]


__all__ = [
    "Embedded",
    "Unavailable",
    "EmbeddingResult",
    "Embedder",
    "LocalEmbedder",
    "RemoteEmbedder",
    "build_embedder",
    "is_rate_limited",
    "LOCAL_SPACE",
    "LOCAL_DIM",
]
