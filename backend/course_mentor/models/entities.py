"""Internal dataclasses representing persisted records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(slots=True)
class Interaction:
    id: str
    class_id: str
    student_id: str
    question: str
    answer: str
    outcome: str
    created_at: datetime


@dataclass(slots=True)
class EmailAudit:
    id: str
    student_id: str
    class_id: str
    email_type: str
    recipient: str
    status: str
    days_inactive: int | None
    template: str | None
    message_id: str | None
    error: str | None
    attempts: int
    sent_at: datetime
