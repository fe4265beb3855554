"""Chunk persistence in SQLite, embeddings packed as float32 blobs."""

from __future__ import annotations

import sqlite3
from array import array
from typing import Sequence

from course_mentor.db.sqlite import SQLiteDatabase
from course_mentor.ingest.types import Chunk
from course_mentor.utils.ids import CHUNK_PREFIX, new_id
from course_mentor.utils.time import now_ms


class SQLiteDocumentStore:
    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db

    def find(self, class_id: str) -> list[Chunk]:
        rows = self.db.query(
            """
            SELECT document_id, source, ordinal, page, content, embedding, embedding_space
            FROM chunks
            WHERE class_id = ?
            ORDER BY created_at, rowid
            """,
            [class_id],
        )
        chunks: list[Chunk] = []
        for row in rows:
            chunk = Chunk(
                content=row["content"],
                source_id=row["source"],
                page_hint=row["page"],
                document_id=row["document_id"],
                ordinal=row["ordinal"],
            )
            if row["embedding"] is not None and row["embedding_space"]:
                chunk.attach_embedding(_unpack(row["embedding"]), row["embedding_space"])
            chunks.append(chunk)
        return chunks

    def append(self, class_id: str, chunk: Chunk) -> None:
        self.extend(class_id, [chunk])

    def extend(self, class_id: str, chunks: Sequence[Chunk]) -> None:
        if not chunks:
            return
        now = now_ms()
        with self.db.transaction() as cursor:
            for chunk in chunks:
                self._insert(cursor, class_id, chunk, now)

    def mark_processed(self, class_id: str, document_id: str) -> None:
        now = now_ms()
        with self.db.transaction() as cursor:
            cursor.execute(
                """
                INSERT INTO documents (id, class_id, source, processed, processed_at, created_at)
                VALUES (?, ?, ?, 1, ?, ?)
                ON CONFLICT(class_id, id) DO UPDATE SET processed = 1, processed_at = excluded.processed_at
                """,
                [document_id, class_id, document_id, now, now],
            )

    def is_processed(self, class_id: str, document_id: str) -> bool:
        row = self.db.query_one(
            "SELECT processed FROM documents WHERE id = ? AND class_id = ?",
            [document_id, class_id],
        )
        return bool(row and row["processed"])

    def save_embeddings(self, class_id: str, chunks: Sequence[Chunk]) -> None:
        rows = [
            [_pack(chunk.embedding), chunk.embedding_space, class_id, chunk.document_id, chunk.ordinal]
            for chunk in chunks
            if chunk.embedding is not None and chunk.embedding_space
        ]
        if not rows:
            return
        with self.db.transaction() as cursor:
            cursor.executemany(
                """
                UPDATE chunks SET embedding = ?, embedding_space = ?
                WHERE class_id = ? AND document_id IS ? AND ordinal = ?
                """,
                rows,
            )

    @staticmethod
    def _insert(cursor: sqlite3.Cursor, class_id: str, chunk: Chunk, now: int) -> None:
        if chunk.document_id:
            cursor.execute(
                """
                INSERT OR IGNORE INTO documents (id, class_id, source, processed, created_at)
                VALUES (?, ?, ?, 0, ?)
                """,
                [chunk.document_id, class_id, chunk.source_id, now],
            )
        cursor.execute(
            """
            INSERT INTO chunks
                (id, class_id, document_id, source, ordinal, page, content, embedding, embedding_space, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                new_id(CHUNK_PREFIX),
                class_id,
                chunk.document_id,
                chunk.source_id,
                chunk.ordinal,
                chunk.page_hint,
                chunk.content,
                _pack(chunk.embedding) if chunk.embedding is not None else None,
                chunk.embedding_space if chunk.embedding is not None else None,
                now,
            ],
        )


def _pack(vector: list[float]) -> bytes:
    return array("f", vector).tobytes()


def _unpack(blob: bytes) -> list[float]:
    floats = array("f")
    floats.frombytes(blob)
    return list(floats)


__all__ = ["SQLiteDocumentStore"]
