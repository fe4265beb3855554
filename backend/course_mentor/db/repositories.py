"""Append-only logs stored in SQLite: chat interactions and email audit rows."""

from __future__ import annotations

import sqlite3
from datetime import datetime

from course_mentor.db.sqlite import SQLiteDatabase
from course_mentor.models.entities import EmailAudit, Interaction
from course_mentor.utils.ids import EMAIL_AUDIT_PREFIX, INTERACTION_PREFIX, new_id
from course_mentor.utils.time import from_ms, now_ms, to_ms


class InteractionLog:
    """Chat history; also the source of a student's last activity."""

    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db

    def record(
        self,
        class_id: str,
        student_id: str,
        question: str,
        answer: str,
        outcome: str,
        created_at: datetime | None = None,
    ) -> Interaction:
        interaction_id = new_id(INTERACTION_PREFIX)
        created_ms = to_ms(created_at) if created_at else now_ms()
        self.db.execute(
            """
            INSERT INTO interactions (id, class_id, student_id, question, answer, outcome, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            [interaction_id, class_id, student_id, question, answer, outcome, created_ms],
        )
        return Interaction(
            id=interaction_id,
            class_id=class_id,
            student_id=student_id,
            question=question,
            answer=answer,
            outcome=outcome,
            created_at=from_ms(created_ms),
        )

    def history(self, class_id: str, student_id: str, limit: int = 50) -> list[Interaction]:
        """Most recent interactions first."""
        rows = self.db.query(
            """
            SELECT id, class_id, student_id, question, answer, outcome, created_at
            FROM interactions
            WHERE class_id = ? AND student_id = ?
            ORDER BY created_at DESC, rowid DESC
            LIMIT ?
            """,
            [class_id, student_id, limit],
        )
        return [_row_to_interaction(row) for row in rows]

    def last_interaction(self, class_id: str, student_id: str) -> datetime | None:
        row = self.db.query_one(
            "SELECT MAX(created_at) AS last FROM interactions WHERE class_id = ? AND student_id = ?",
            [class_id, student_id],
        )
        if row is None or row["last"] is None:
            return None
        return from_ms(row["last"])


_AUDIT_COLUMNS = (
    "id, student_id, class_id, email_type, recipient, status, days_inactive, template, "
    "message_id, error, attempts, sent_at"
)


class EmailAuditLog:
    """Motivational email records; any row of a type starts that type's cooldown."""

    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db

    def record(
        self,
        student_id: str,
        class_id: str,
        email_type: str,
        recipient: str,
        status: str,
        days_inactive: int | None = None,
        template: str | None = None,
        message_id: str | None = None,
        error: str | None = None,
        attempts: int = 0,
        sent_at: datetime | None = None,
    ) -> EmailAudit:
        audit_id = new_id(EMAIL_AUDIT_PREFIX)
        sent_ms = to_ms(sent_at) if sent_at else now_ms()
        self.db.execute(
            f"INSERT INTO email_audit ({_AUDIT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            [
                audit_id,
                student_id,
                class_id,
                email_type,
                recipient,
                status,
                days_inactive,
                template,
                message_id,
                error,
                attempts,
                sent_ms,
            ],
        )
        return EmailAudit(
            id=audit_id,
            student_id=student_id,
            class_id=class_id,
            email_type=email_type,
            recipient=recipient,
            status=status,
            days_inactive=days_inactive,
            template=template,
            message_id=message_id,
            error=error,
            attempts=attempts,
            sent_at=from_ms(sent_ms),
        )

    def last_notified(self, student_id: str, class_id: str, email_type: str) -> datetime | None:
        row = self.db.query_one(
            """
            SELECT MAX(sent_at) AS last FROM email_audit
            WHERE student_id = ? AND class_id = ? AND email_type = ?
            """,
            [student_id, class_id, email_type],
        )
        if row is None or row["last"] is None:
            return None
        return from_ms(row["last"])

    def recent(self, class_id: str | None = None, limit: int = 10) -> list[EmailAudit]:
        sql = f"SELECT {_AUDIT_COLUMNS} FROM email_audit"
        params: list[object] = []
        if class_id:
            sql += " WHERE class_id = ?"
            params.append(class_id)
        sql += " ORDER BY sent_at DESC, rowid DESC LIMIT ?"
        params.append(limit)
        return [_row_to_audit(row) for row in self.db.query(sql, params)]

    def stats(self, class_id: str | None = None) -> dict[str, int]:
        """Row counts per status, e.g. ``{"sent": 4, "failed": 1}``."""
        sql = "SELECT status, COUNT(*) AS total FROM email_audit"
        params: list[object] = []
        if class_id:
            sql += " WHERE class_id = ?"
            params.append(class_id)
        sql += " GROUP BY status"
        return {row["status"]: row["total"] for row in self.db.query(sql, params)}


def _row_to_interaction(row: sqlite3.Row) -> Interaction:
    return Interaction(
        id=row["id"],
        class_id=row["class_id"],
        student_id=row["student_id"],
        question=row["question"],
        answer=row["answer"],
        outcome=row["outcome"],
        created_at=from_ms(row["created_at"]),
    )


def _row_to_audit(row: sqlite3.Row) -> EmailAudit:
    return EmailAudit(
        id=row["id"],
        student_id=row["student_id"],
        class_id=row["class_id"],
        email_type=row["email_type"],
        recipient=row["recipient"],
        status=row["status"],
        days_inactive=row["days_inactive"],
        template=row["template"],
        message_id=row["message_id"],
        error=row["error"],
        attempts=row["attempts"],
        sent_at=from_ms(row["sent_at"]),
    )


__all__ = ["InteractionLog", "EmailAuditLog"]
