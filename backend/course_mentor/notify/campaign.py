"""Motivational emails for students who stopped using the mentor."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable

from course_mentor.core.errors import CourseMentorError
from course_mentor.core.logging import get_logger, log_context
from course_mentor.db.repositories import EmailAuditLog, InteractionLog
from course_mentor.notify.dispatcher import NotificationDispatcher
from course_mentor.notify.templates import INACTIVITY_EMAIL_TYPE, TemplateRenderer
from course_mentor.notify.transport import MailMessage
from course_mentor.utils.time import days_between, utc_now

logger = get_logger(__name__)


@dataclass(slots=True)
class Candidate:
    student_id: str
    class_id: str
    email: str
    name: str
    class_name: str
    enrolled_at: datetime


@dataclass(slots=True)
class CampaignSummary:
    checked: int = 0
    sent: int = 0
    failed: int = 0
    skipped: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"checked": self.checked, "sent": self.sent, "failed": self.failed, "skipped": self.skipped}


class MotivationalCampaign:
    """Eligibility gate in front of the dispatcher.

    A candidate is eligible when their last activity (latest interaction, or
    enrolment if they never asked anything) is at least ``inactivity_days``
    old and no email of the same type was recorded for them in the last
    ``cooldown_days``.
    """

    def __init__(
        self,
        interactions: InteractionLog,
        audit: EmailAuditLog,
        dispatcher: NotificationDispatcher,
        renderer: TemplateRenderer,
        sender: str,
        inactivity_days: int = 15,
        cooldown_days: int = 7,
        email_type: str = INACTIVITY_EMAIL_TYPE,
    ) -> None:
        self.interactions = interactions
        self.audit = audit
        self.dispatcher = dispatcher
        self.renderer = renderer
        self.sender = sender
        self.inactivity_days = inactivity_days
        self.cooldown_days = cooldown_days
        self.email_type = email_type

    def days_inactive(self, candidate: Candidate, now: datetime) -> int:
        last = self.interactions.last_interaction(candidate.class_id, candidate.student_id)
        return days_between(last or candidate.enrolled_at, now)

    def in_cooldown(self, candidate: Candidate, now: datetime) -> bool:
        last = self.audit.last_notified(candidate.student_id, candidate.class_id, self.email_type)
        return last is not None and last >= now - timedelta(days=self.cooldown_days)

    def run(self, candidates: Iterable[Candidate], now: datetime | None = None) -> CampaignSummary:
        now = now or utc_now()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        summary = CampaignSummary()
        for candidate in candidates:
            summary.checked += 1
            ctx = log_context(student_id=candidate.student_id, class_id=candidate.class_id)
            try:
                days = self.days_inactive(candidate, now)
                if days < self.inactivity_days:
                    summary.skipped += 1
                    continue
                if self.in_cooldown(candidate, now):
                    logger.info("Recent email already recorded; skipping", extra=ctx)
                    summary.skipped += 1
                    continue
                if self._notify(candidate, days, now):
                    summary.sent += 1
                else:
                    summary.failed += 1
            except (sqlite3.Error, CourseMentorError) as exc:
                logger.exception("Could not process candidate: %s", exc, extra=ctx)
                summary.failed += 1
        logger.info("Motivational campaign finished", extra=log_context(**summary.to_dict()))
        return summary

    def _notify(self, candidate: Candidate, days: int, now: datetime) -> bool:
        email = self.renderer.render(candidate.name, candidate.class_name, days)
        message = MailMessage(sender=self.sender, to=candidate.email, subject=email.subject, html=email.html)
        result = self.dispatcher.send(candidate.email, message)
        self.audit.record(
            student_id=candidate.student_id,
            class_id=candidate.class_id,
            email_type=self.email_type,
            recipient=candidate.email,
            status="sent" if result.success else "failed",
            days_inactive=days,
            template=email.template,
            message_id=result.message_id,
            error=result.error,
            attempts=result.attempt_count,
            sent_at=now,
        )
        return result.success


__all__ = ["Candidate", "CampaignSummary", "MotivationalCampaign"]
