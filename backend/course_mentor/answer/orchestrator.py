"""Answer a student question from the class corpus.

Provider failures never escape :meth:`AnswerOrchestrator.answer`; each one is
translated into a fixed, explanatory answer and tagged with an ``outcome``
so callers can log it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Any, Protocol, Sequence

from course_mentor.analysis.persona import PersonaSynthesizer
from course_mentor.analysis.themes import ThemeAnalyzer
from course_mentor.answer.prompts import build_prompt, document_names
from course_mentor.core.errors import EmbeddingServiceError, ProviderError, ProviderRateLimitError
from course_mentor.core.logging import get_logger, log_context
from course_mentor.core.metrics import ANSWER_COUNT
from course_mentor.ingest.types import Chunk
from course_mentor.retrieval.ranker import SimilarityRanker
from course_mentor.store.base import DocumentStore
from course_mentor.utils.text import preview

logger = get_logger(__name__)

OUTCOME_ANSWERED = "answered"
OUTCOME_NO_DOCUMENTS = "no_documents"
OUTCOME_RATE_LIMITED = "rate_limited"
OUTCOME_UNAVAILABLE = "unavailable"

NO_DOCUMENTS_ANSWER = (
    "Lo siento, no encontré documentos procesados para esta clase.\n\n"
    "**Para que pueda ayudarte mejor:**\n"
    "• Tu profesor debe subir documentos PDF a la clase\n"
    "• Los documentos deben procesarse automáticamente\n"
    "• Una vez procesados, podré responder preguntas específicas sobre su contenido\n\n"
    "¿En qué tema específico te gustaría que te ayude?"
)

DAILY_LIMIT_ANSWER = (
    "🚫 **Límite de consultas diario alcanzado**\n\n"
    "Hemos alcanzado el límite de consultas por hoy. El servicio estará disponible nuevamente mañana.\n\n"
    "**Mientras tanto puedes:**\n"
    "• Revisar los documentos de clase descargados\n"
    "• Consultar tus apuntes\n"
    "• Preparar preguntas para mañana\n\n"
    "¡Gracias por tu comprensión! 😊"
)

UNAVAILABLE_ANSWER = (
    "🚫 **Servicio temporalmente no disponible**\n\n"
    "El servicio de IA está experimentando problemas temporales.\n\n"
    "**Mientras tanto puedes:**\n"
    "• Revisar los fragmentos de los documentos que te mostramos\n"
    "• Consultar tus apuntes\n"
    "• Intentar nuevamente en unos minutos\n\n"
    "¡Disculpas por las molestias! 😊"
)

EMPTY_COMPLETION_ANSWER = "No pude generar una respuesta"


class Completer(Protocol):
    def complete(self, prompt: str) -> str: ...


@dataclass(slots=True)
class SourcePreview:
    content: str
    metadata: dict[str, Any]

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> "SourcePreview":
        return cls(content=preview(chunk.content), metadata=chunk.metadata)

    def to_dict(self) -> dict[str, Any]:
        return {"content": self.content, "metadata": dict(self.metadata)}


@dataclass(slots=True)
class AnswerResult:
    answer: str
    sources: list[SourcePreview] = field(default_factory=list)
    outcome: str = OUTCOME_ANSWERED


class AnswerOrchestrator:
    def __init__(
        self,
        store: DocumentStore,
        ranker: SimilarityRanker,
        completer: Completer,
        analyzer: ThemeAnalyzer | None = None,
        persona: PersonaSynthesizer | None = None,
        top_k: int = 5,
    ) -> None:
        self.store = store
        self.ranker = ranker
        self.completer = completer
        self.analyzer = analyzer or ThemeAnalyzer()
        self.persona = persona or PersonaSynthesizer()
        self.top_k = top_k

    def answer(self, class_id: str, query: str, class_name: str | None = None) -> AnswerResult:
        corpus = self.store.find(class_id)
        if not corpus:
            return self._finish(class_id, AnswerResult(NO_DOCUMENTS_ANSWER, [], OUTCOME_NO_DOCUMENTS))

        try:
            relevant = [
                item.chunk
                for item in self.ranker.rank(
                    query, corpus, self.top_k, on_embedded=partial(self.store.save_embeddings, class_id)
                )
            ]
        except ProviderRateLimitError:
            logger.warning("Embedding quota exhausted", extra=log_context(class_id=class_id))
            return self._finish(class_id, AnswerResult(DAILY_LIMIT_ANSWER, [], OUTCOME_RATE_LIMITED))

        # Persona is derived from the whole corpus so it stays stable across questions.
        analysis = self.analyzer.analyze(corpus)
        prompt = build_prompt(
            persona=self.persona.synthesize(analysis, class_name),
            question=query,
            relevant=relevant,
            documents=document_names(corpus),
            class_name=class_name,
        )
        sources = _previews(relevant)

        try:
            text = self.completer.complete(prompt)
        except ProviderRateLimitError:
            logger.warning("Completion quota exhausted", extra=log_context(class_id=class_id))
            return self._finish(class_id, AnswerResult(DAILY_LIMIT_ANSWER, [], OUTCOME_RATE_LIMITED))
        except (ProviderError, EmbeddingServiceError) as exc:
            logger.error("Completion failed: %s", exc, extra=log_context(class_id=class_id))
            return self._finish(class_id, AnswerResult(UNAVAILABLE_ANSWER, sources, OUTCOME_UNAVAILABLE))

        return self._finish(
            class_id,
            AnswerResult(text.strip() or EMPTY_COMPLETION_ANSWER, sources, OUTCOME_ANSWERED),
        )

    def _finish(self, class_id: str, result: AnswerResult) -> AnswerResult:
        ANSWER_COUNT.labels(outcome=result.outcome).inc()
        logger.info(
            "Answer produced",
            extra=log_context(class_id=class_id, outcome=result.outcome, sources=len(result.sources)),
        )
        return result


def _previews(chunks: Sequence[Chunk]) -> list[SourcePreview]:
    return [SourcePreview.from_chunk(chunk) for chunk in chunks]


__all__ = [
    "AnswerOrchestrator",
    "AnswerResult",
    "SourcePreview",
    "NO_DOCUMENTS_ANSWER",
    "DAILY_LIMIT_ANSWER",
    "UNAVAILABLE_ANSWER",
    "EMPTY_COMPLETION_ANSWER",
]
