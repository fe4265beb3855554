"""Tests for the motivational email campaign."""

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from course_mentor.core.errors import DeliveryError
from course_mentor.db.repositories import EmailAuditLog, InteractionLog
from course_mentor.db.sqlite import SQLiteDatabase
from course_mentor.notify.campaign import Candidate, MotivationalCampaign
from course_mentor.notify.dispatcher import NotificationDispatcher
from course_mentor.notify.templates import INACTIVITY_EMAIL_TYPE, MISS_YOU, TemplateRenderer

from fakes import FakeTransport

NOW = datetime(2025, 3, 20, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def db(tmp_path: Path) -> SQLiteDatabase:
    database = SQLiteDatabase(tmp_path / "campaign.db")
    database.ensure_schema()
    yield database
    database.close()


def _candidate(student_id: str = "s1", enrolled_days_ago: int = 30) -> Candidate:
    return Candidate(
        student_id=student_id,
        class_id="c1",
        email=f"{student_id}@test.edu",
        name="Ana <b>",
        class_name="Emprendimiento",
        enrolled_at=NOW - timedelta(days=enrolled_days_ago),
    )


def _campaign(db: SQLiteDatabase, transport: FakeTransport) -> MotivationalCampaign:
    dispatcher = NotificationDispatcher(transport, max_attempts=3, base_backoff_ms=500, sleep=lambda _: None)
    renderer = TemplateRenderer("http://localhost:3000/", selector=lambda templates: templates[0])
    return MotivationalCampaign(
        InteractionLog(db),
        EmailAuditLog(db),
        dispatcher,
        renderer,
        sender="Mentor de IA <mentor@test.edu>",
    )


def test_inactive_student_is_emailed(db: SQLiteDatabase) -> None:
    transport = FakeTransport()
    summary = _campaign(db, transport).run([_candidate()], now=NOW)
    assert summary.to_dict() == {"checked": 1, "sent": 1, "failed": 0, "skipped": 0}

    message = transport.sent[0]
    assert message.to == "s1@test.edu"
    assert message.subject == "¡Te extrañamos en Emprendimiento! 🤖"
    assert "Ana &lt;b&gt;" in message.html
    assert "<strong>30 días</strong>" in message.html
    assert 'href="http://localhost:3000/dashboard/chat"' in message.html

    audit = EmailAuditLog(db).recent()
    assert len(audit) == 1
    row = audit[0]
    assert row.status == "sent"
    assert row.email_type == INACTIVITY_EMAIL_TYPE
    assert row.template == MISS_YOU.name
    assert row.days_inactive == 30
    assert row.message_id == "<msg-1@test>"
    assert row.attempts == 1


def test_recent_interaction_is_skipped(db: SQLiteDatabase) -> None:
    InteractionLog(db).record("c1", "s1", "¿Qué es ROI?", "...", "answered", created_at=NOW - timedelta(days=2))
    transport = FakeTransport()
    summary = _campaign(db, transport).run([_candidate()], now=NOW)
    assert summary.skipped == 1
    assert transport.sent == []


def test_inactivity_counts_from_last_interaction(db: SQLiteDatabase) -> None:
    InteractionLog(db).record("c1", "s1", "hola", "...", "answered", created_at=NOW - timedelta(days=20))
    campaign = _campaign(db, FakeTransport())
    assert campaign.days_inactive(_candidate(enrolled_days_ago=90), NOW) == 20
    assert campaign.days_inactive(_candidate("s2", enrolled_days_ago=90), NOW) == 90


def test_recently_enrolled_student_is_skipped(db: SQLiteDatabase) -> None:
    summary = _campaign(db, FakeTransport()).run([_candidate(enrolled_days_ago=14)], now=NOW)
    assert summary.skipped == 1


def test_cooldown_prevents_second_email(db: SQLiteDatabase) -> None:
    transport = FakeTransport()
    campaign = _campaign(db, transport)
    campaign.run([_candidate()], now=NOW)
    summary = campaign.run([_candidate()], now=NOW + timedelta(days=3))
    assert summary.to_dict() == {"checked": 1, "sent": 0, "failed": 0, "skipped": 1}

    summary = campaign.run([_candidate()], now=NOW + timedelta(days=8))
    assert summary.sent == 1
    assert len(transport.sent) == 2


def test_failed_delivery_is_recorded(db: SQLiteDatabase) -> None:
    transport = FakeTransport(DeliveryError("SMTP credentials are not configured", retryable=False))
    campaign = _campaign(db, transport)
    summary = campaign.run([_candidate(), _candidate("s2", enrolled_days_ago=3)], now=NOW)
    assert summary.to_dict() == {"checked": 2, "sent": 0, "failed": 1, "skipped": 1}

    audit = EmailAuditLog(db)
    assert audit.stats() == {"failed": 1}
    row = audit.recent(class_id="c1")[0]
    assert row.error == "SMTP credentials are not configured"
    assert row.message_id is None

    # A failed attempt still starts the cooldown.
    assert campaign.run([_candidate()], now=NOW + timedelta(days=1)).skipped == 1


def test_naive_now_is_treated_as_utc(db: SQLiteDatabase) -> None:
    summary = _campaign(db, FakeTransport()).run([_candidate()], now=NOW.replace(tzinfo=None))
    assert summary.sent == 1
