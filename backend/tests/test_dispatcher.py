"""Tests for notification delivery retries."""

import pytest

from course_mentor.core.errors import DeliveryError
from course_mentor.notify.dispatcher import AttemptOutcome, NotificationDispatcher
from course_mentor.notify.transport import MailMessage

from fakes import FakeTransport

MESSAGE = MailMessage(sender="mentor@test", to="ana@test", subject="Hola", html="<p>Hola</p>")


def _dispatcher(transport: FakeTransport, sleeps: list[float]) -> NotificationDispatcher:
    return NotificationDispatcher(transport, max_attempts=3, base_backoff_ms=500, sleep=sleeps.append)


def test_success_first_attempt() -> None:
    sleeps: list[float] = []
    result = _dispatcher(FakeTransport(), sleeps).send("ana@test", MESSAGE)
    assert result.success
    assert result.message_id == "<msg-1@test>"
    assert result.attempt_count == 1
    assert sleeps == []


def test_retry_then_success() -> None:
    sleeps: list[float] = []
    transport = FakeTransport(DeliveryError("timeout"))
    result = _dispatcher(transport, sleeps).send("ana@test", MESSAGE)
    assert result.success
    assert result.error is None
    assert [a.outcome for a in result.attempts] == [AttemptOutcome.RETRYABLE, AttemptOutcome.SUCCESS]
    assert sleeps == [0.5]
    assert len(transport.sent) == 2


def test_exhausts_attempts_with_exponential_backoff() -> None:
    sleeps: list[float] = []
    transport = FakeTransport(*(DeliveryError("timeout") for _ in range(3)))
    result = _dispatcher(transport, sleeps).send("ana@test", MESSAGE)
    assert not result.success
    assert result.attempt_count == 3
    assert [a.backoff_applied_ms for a in result.attempts] == [500, 1000, 0]
    assert sleeps == [0.5, 1.0]
    assert result.error == "timeout"


def test_fatal_error_stops_immediately() -> None:
    sleeps: list[float] = []
    transport = FakeTransport(DeliveryError("bad credentials", retryable=False))
    result = _dispatcher(transport, sleeps).send("ana@test", MESSAGE)
    assert not result.success
    assert result.attempt_count == 1
    assert result.attempts[0].outcome is AttemptOutcome.FATAL
    assert sleeps == []


def test_backoff_doubles_from_base() -> None:
    sleeps: list[float] = []
    transport = FakeTransport(*(DeliveryError("timeout") for _ in range(5)))
    dispatcher = NotificationDispatcher(transport, max_attempts=5, base_backoff_ms=200, sleep=sleeps.append)
    result = dispatcher.send("ana@test", MESSAGE)
    assert sleeps == pytest.approx([0.2, 0.4, 0.8, 1.6])
    assert [a.backoff_applied_ms for a in result.attempts] == [200, 400, 800, 1600, 0]
    assert [a.attempt_number for a in result.attempts] == [1, 2, 3, 4, 5]


def test_non_delivery_errors_propagate() -> None:
    class Broken:
        def send(self, message: MailMessage) -> str:
            raise RuntimeError("bug")

    sleeps: list[float] = []
    with pytest.raises(RuntimeError):
        NotificationDispatcher(Broken(), sleep=sleeps.append).send("ana@test", MESSAGE)
    assert sleeps == []


def test_requires_one_attempt() -> None:
    with pytest.raises(ValueError):
        NotificationDispatcher(FakeTransport(), max_attempts=0)
