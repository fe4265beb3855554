"""Prompt assembly for the class mentor."""

from __future__ import annotations

from pathlib import PurePath
from typing import Sequence

from course_mentor.ingest.types import Chunk

DEFAULT_CLASS_NAME = "Clase empresarial"

NO_FRAGMENTS_NOTICE = (
    "No se encontraron fragmentos específicamente relevantes, pero puedo ayudarte "
    "con el contenido general de la clase."
)

OFF_TOPIC_REPLY = (
    "Ese tema no pertenece a esta clase. Mi especialidad es ayudarte con los temas de los "
    "documentos del curso. ¿En qué tema de la clase puedo ayudarte?"
)

UNCLEAR_REPLY = (
    "Disculpa, no logro entender bien tu pregunta. ¿Podrías reformularla o ser más "
    "específico sobre qué tema de la clase te interesa?"
)

BEHAVIOUR_RULES = f"""\
INSTRUCCIONES DE RESPUESTA:
1. Responde basándote PRINCIPALMENTE en el contenido de los documentos de la clase.
2. Para DEFINICIONES y conceptos teóricos usa SOLO el contexto de los documentos.
3. REGLA DE BREVEDAD: para preguntas "¿Qué es...?" responde en máximo 2 párrafos cortos: definición, elementos clave en viñetas y un ejemplo breve.
4. Para solicitudes de ayuda o escritura usa un título en **negrita**, una lista numerada de elementos, herramientas en viñetas y una plantilla paso a paso.
5. Puedes mencionar ejemplos de empresas conocidas aunque no estén en los documentos, conectándolos con los conceptos de la clase.
6. Si la pregunta es ajena al tema de la clase, RESPONDE: "{OFF_TOPIC_REPLY}"
7. Si la pregunta es confusa, incomprensible o demasiado vaga, RESPONDE: "{UNCLEAR_REPLY}"
8. Usa títulos en **negrita**, listas numeradas para pasos y viñetas (•) para elementos.
9. Sé claro, conciso, motivador y siempre educativo."""


def source_label(source: str) -> str:
    """File name of a chunk source, as shown to the model and the student."""
    return PurePath(source).name or source


def document_names(chunks: Sequence[Chunk]) -> list[str]:
    """Distinct source labels in corpus order."""
    return list(dict.fromkeys(source_label(chunk.source_id) for chunk in chunks))


def format_context(chunks: Sequence[Chunk]) -> str:
    if not chunks:
        return NO_FRAGMENTS_NOTICE
    return "\n\n---\n\n".join(
        f"[Fragmento {index} - Fuente: {source_label(chunk.source_id)}]\n{chunk.content}"
        for index, chunk in enumerate(chunks, start=1)
    )


def build_prompt(
    persona: str,
    question: str,
    relevant: Sequence[Chunk],
    documents: Sequence[str] = (),
    class_name: str | None = None,
) -> str:
    sections = [
        persona,
        f'CONTEXTO DE LA CLASE: "{class_name or DEFAULT_CLASS_NAME}"',
    ]
    if documents:
        sections.append(f"Documentos disponibles en esta clase: {', '.join(documents)}")
    sections.extend(
        [
            f"CONTENIDO RELEVANTE DE LOS DOCUMENTOS:\n{format_context(relevant)}",
            f"PREGUNTA DEL ESTUDIANTE: {question}",
            BEHAVIOUR_RULES,
            "Tu respuesta como mentor experto:",
        ]
    )
    return "\n\n".join(sections)


__all__ = ["build_prompt", "format_context", "document_names", "source_label"]
