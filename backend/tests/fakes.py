"""Hand-written fakes for providers and transports."""

from __future__ import annotations

from typing import Any

import requests

from course_mentor.core.errors import DeliveryError
from course_mentor.ingest.embeddings import Embedded, EmbeddingResult, Unavailable
from course_mentor.ingest.types import Chunk
from course_mentor.notify.transport import MailMessage


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None) -> None:
        self.status_code = status_code
        self._body = body

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body


class FakeSession:
    """Replays queued responses (or raises queued exceptions) for ``post``."""

    def __init__(self, *responses: Any) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []

    def post(self, url: str, json: Any = None, headers: Any = None, timeout: Any = None) -> Any:
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def embedding_body(vector: list[float]) -> dict[str, Any]:
    return {"data": [{"embedding": vector}]}


def completion_body(text: str) -> dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


class KeywordEmbedder:
    """Deterministic embedder: one dimension per vocabulary word."""

    space = "test:keywords"

    def __init__(self, vocabulary: list[str], fail_on: set[str] | None = None, error: Exception | None = None) -> None:
        self.vocabulary = vocabulary
        self.fail_on = fail_on or set()
        self.error = error
        self.calls: list[str] = []

    def embed(self, text: str) -> EmbeddingResult:
        self.calls.append(text)
        if self.error is not None and (not self.fail_on or text in self.fail_on):
            raise self.error
        lowered = text.lower()
        vector = [float(lowered.count(word)) for word in self.vocabulary]
        if not any(vector):
            return Unavailable("no vocabulary words")
        return Embedded(vector=vector, space=self.space)


class FakeCompleter:
    def __init__(self, reply: str = "Respuesta", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeTransport:
    """Fails with the queued errors first, then succeeds."""

    def __init__(self, *errors: DeliveryError) -> None:
        self.errors = list(errors)
        self.sent: list[MailMessage] = []

    def send(self, message: MailMessage) -> str:
        self.sent.append(message)
        if self.errors:
            raise self.errors.pop(0)
        return f"<msg-{len(self.sent)}@test>"


def connection_error() -> requests.ConnectionError:
    return requests.ConnectionError("connection refused")


class MemoryStore:
    def __init__(self, chunks: dict[str, list[Chunk]] | None = None) -> None:
        self.chunks = chunks or {}
        self.processed: list[tuple[str, str]] = []
        self.saved: list[tuple[str, int]] = []

    def find(self, class_id: str) -> list[Chunk]:
        return list(self.chunks.get(class_id, []))

    def append(self, class_id: str, chunk: Chunk) -> None:
        self.chunks.setdefault(class_id, []).append(chunk)

    def mark_processed(self, class_id: str, document_id: str) -> None:
        self.processed.append((class_id, document_id))

    def extend(self, class_id: str, chunks: list[Chunk]) -> None:
        self.chunks.setdefault(class_id, []).extend(chunks)

    def is_processed(self, class_id: str, document_id: str) -> bool:
        return (class_id, document_id) in self.processed

    def save_embeddings(self, class_id: str, chunks: list[Chunk]) -> None:
        self.saved.append((class_id, len(chunks)))
