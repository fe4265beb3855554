"""File-backed store: one JSON artifact per source document.

Layout under ``root``::

    <class_id>/<document>.json               [{"content": ..., "metadata": {"source": ..., "page": ...}}, ...]
    <class_id>/_processed.json               ["<document_id>", ...]
    <class_id>/_embeddings/<document>.json   {"<ordinal>": {"space": ..., "vector": [...]}, ...}

The artifact shape is read by other tooling, so embeddings live in a
sidecar file next to it instead of inside it.

Directory and file names are the ids themselves when they are already
filesystem safe; otherwise the sanitized id gets a short digest suffix so
that distinct ids never share a file.
"""

from __future__ import annotations

import re
import threading
from pathlib import Path
from typing import Any, Sequence

import orjson

from course_mentor.core.logging import get_logger
from course_mentor.ingest.types import Chunk
from course_mentor.utils.hashing import sha256_text

logger = get_logger(__name__)

MANIFEST_NAME = "_processed.json"
EMBEDDINGS_DIR = "_embeddings"
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9._-]+")


class JsonArtifactStore:
    def __init__(self, root: Path) -> None:
        self.root = root.expanduser()
        self._lock = threading.Lock()

    def find(self, class_id: str) -> list[Chunk]:
        class_dir = self._class_dir(class_id)
        if not class_dir.is_dir():
            return []
        chunks: list[Chunk] = []
        for path in sorted(class_dir.glob("*.json")):
            if path.name == MANIFEST_NAME:
                continue
            document_id = path.stem
            embeddings = self._read_embeddings(class_dir / EMBEDDINGS_DIR / path.name)
            for ordinal, item in enumerate(self._read(path)):
                metadata = item.get("metadata") or {}
                chunk = Chunk(
                    content=item.get("content", ""),
                    source_id=metadata.get("source") or document_id,
                    page_hint=metadata.get("page"),
                    document_id=document_id,
                    ordinal=ordinal,
                )
                stored = embeddings.get(str(ordinal))
                if stored:
                    chunk.attach_embedding(stored["vector"], stored["space"])
                chunks.append(chunk)
        return chunks

    def append(self, class_id: str, chunk: Chunk) -> None:
        self.extend(class_id, [chunk])

    def extend(self, class_id: str, chunks: Sequence[Chunk]) -> None:
        """Append chunks with one artifact write per document."""
        with self._lock:
            for name, group in _group_by_document(chunks).items():
                path = self._class_dir(class_id) / f"{name}.json"
                items = self._read(path)
                offset = len(items)
                items.extend({"content": chunk.content, "metadata": chunk.metadata} for chunk in group)
                self._write(path, items)
                embedded = {
                    offset + index: chunk for index, chunk in enumerate(group) if chunk.embedding is not None
                }
                if embedded:
                    self._merge_embeddings(path.parent / EMBEDDINGS_DIR / path.name, embedded)

    def mark_processed(self, class_id: str, document_id: str) -> None:
        path = self._class_dir(class_id) / MANIFEST_NAME
        with self._lock:
            processed = self._read(path)
            if document_id not in processed:
                processed.append(document_id)
                self._write(path, processed)

    def is_processed(self, class_id: str, document_id: str) -> bool:
        return document_id in self._read(self._class_dir(class_id) / MANIFEST_NAME)

    def save_embeddings(self, class_id: str, chunks: Sequence[Chunk]) -> None:
        with self._lock:
            for name, group in _group_by_document(chunks).items():
                embedded = {chunk.ordinal: chunk for chunk in group if chunk.embedding is not None}
                if embedded:
                    path = self._class_dir(class_id) / EMBEDDINGS_DIR / f"{name}.json"
                    self._merge_embeddings(path, embedded)

    def _class_dir(self, class_id: str) -> Path:
        return self.root / _safe_name(class_id)

    def _merge_embeddings(self, path: Path, embedded: dict[int, Chunk]) -> None:
        stored = self._read_embeddings(path)
        for ordinal, chunk in embedded.items():
            stored[str(ordinal)] = {"space": chunk.embedding_space, "vector": chunk.embedding}
        self._write(path, stored)

    @staticmethod
    def _read(path: Path) -> list[Any]:
        if not path.exists():
            return []
        data = orjson.loads(path.read_bytes())
        if not isinstance(data, list):
            logger.warning("Ignoring malformed artifact %s", path)
            return []
        return data

    @staticmethod
    def _read_embeddings(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        data = orjson.loads(path.read_bytes())
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed embeddings file %s", path)
            return {}
        return data

    @staticmethod
    def _write(path: Path, data: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_bytes(orjson.dumps(data, option=orjson.OPT_INDENT_2))
        tmp.replace(path)


def _group_by_document(chunks: Sequence[Chunk]) -> dict[str, list[Chunk]]:
    groups: dict[str, list[Chunk]] = {}
    for chunk in chunks:
        groups.setdefault(_safe_name(chunk.document_id or chunk.source_id), []).append(chunk)
    return groups


def _safe_name(value: str) -> str:
    sanitized = _UNSAFE_RE.sub("_", value).strip("._")
    if sanitized and sanitized == value:
        return value
    return f"{sanitized or 'document'}-{sha256_text(value)[:8]}"


__all__ = ["JsonArtifactStore", "MANIFEST_NAME", "EMBEDDINGS_DIR"]
