"""Bounded exponential-backoff delivery of notifications."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass, field
from typing import Callable

from tenacity import RetryCallState, Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from course_mentor.core.errors import DeliveryError
from course_mentor.core.logging import get_logger, log_context
from course_mentor.core.metrics import DELIVERY_ATTEMPTS
from course_mentor.notify.transport import MailMessage, MailTransport

logger = get_logger(__name__)


class AttemptOutcome(str, enum.Enum):
    SUCCESS = "success"
    RETRYABLE = "retryable"
    FATAL = "fatal"


@dataclass(slots=True)
class DeliveryAttempt:
    target: str
    attempt_number: int
    outcome: AttemptOutcome
    backoff_applied_ms: int = 0
    error: str | None = None


@dataclass(slots=True)
class DeliveryResult:
    success: bool
    message_id: str | None = None
    error: str | None = None
    attempts: list[DeliveryAttempt] = field(default_factory=list)

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)


def _is_retryable(exc: BaseException) -> bool:
    return isinstance(exc, DeliveryError) and exc.retryable


class NotificationDispatcher:
    """Send a message, retrying transport failures.

    After a retryable failure on attempt ``n`` the dispatcher waits
    ``base_backoff_ms * 2 ** (n - 1)`` before attempt ``n + 1``; with the
    defaults that is 500 ms then 1000 ms, and at most 3 attempts are made.
    """

    def __init__(
        self,
        transport: MailTransport,
        max_attempts: int = 3,
        base_backoff_ms: int = 500,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.transport = transport
        self.max_attempts = max_attempts
        self.base_backoff_ms = base_backoff_ms
        self.sleep = sleep

    def send(self, target: str, payload: MailMessage) -> DeliveryResult:
        result = DeliveryResult(success=False)

        def record_retry(state: RetryCallState) -> None:
            exc = state.outcome.exception() if state.outcome else None
            backoff_ms = round(state.next_action.sleep * 1000) if state.next_action else 0
            result.attempts.append(
                DeliveryAttempt(target, state.attempt_number, AttemptOutcome.RETRYABLE, backoff_ms, str(exc))
            )
            DELIVERY_ATTEMPTS.labels(outcome=AttemptOutcome.RETRYABLE.value).inc()
            logger.warning(
                "Delivery attempt failed, retrying in %s ms: %s",
                backoff_ms,
                exc,
                extra=log_context(target=target, attempt=state.attempt_number),
            )

        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.base_backoff_ms / 1000),
            retry=retry_if_exception(_is_retryable),
            sleep=self.sleep,
            before_sleep=record_retry,
            reraise=True,
        )
        try:
            message_id = retrying(self.transport.send, payload)
        except DeliveryError as exc:
            # Attempts that were retried are already recorded by record_retry.
            attempt_number = result.attempt_count + 1
            outcome = AttemptOutcome.RETRYABLE if exc.retryable else AttemptOutcome.FATAL
            result.attempts.append(DeliveryAttempt(target, attempt_number, outcome, error=str(exc)))
            result.error = str(exc)
            DELIVERY_ATTEMPTS.labels(outcome=outcome.value).inc()
            logger.error(
                "Delivery failed after %s attempt(s): %s",
                attempt_number,
                exc,
                extra=log_context(target=target, attempt=attempt_number),
            )
            return result

        attempt_number = result.attempt_count + 1
        result.attempts.append(DeliveryAttempt(target, attempt_number, AttemptOutcome.SUCCESS))
        DELIVERY_ATTEMPTS.labels(outcome=AttemptOutcome.SUCCESS.value).inc()
        result.success = True
        result.message_id = message_id
        logger.info("Delivered", extra=log_context(target=target, attempt=attempt_number))
        return result


__all__ = [
    "AttemptOutcome",
    "DeliveryAttempt",
    "DeliveryResult",
    "NotificationDispatcher",
]
