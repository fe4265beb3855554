"""Chat-completion client for an OpenAI-compatible endpoint."""

from __future__ import annotations

import time
from typing import Any

import requests

from course_mentor.core.config import Settings
from course_mentor.core.errors import ProviderError, ProviderRateLimitError
from course_mentor.core.logging import get_logger
from course_mentor.core.metrics import PROVIDER_LATENCY
from course_mentor.ingest.embeddings import is_rate_limited

logger = get_logger(__name__)


class CompletionClient:
    def __init__(
        self,
        api_url: str,
        api_key: str | None,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        session: requests.Session | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.api_url = api_url
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings, session: requests.Session | None = None) -> "CompletionClient":
        return cls(
            api_url=settings.completion_api_url,
            api_key=settings.completion_api_key,
            model=settings.completion_model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            session=session,
            timeout=settings.request_timeout_s,
        )

    def complete(self, prompt: str) -> str:
        """Send ``prompt`` as a single user message; returns ``""`` if the reply has no text."""
        if not self.api_key:
            raise ProviderError("Completion API key is not configured")
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        started = time.perf_counter()
        try:
            resp = self.session.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise ProviderError(f"Completion request failed: {exc}") from exc
        finally:
            PROVIDER_LATENCY.labels(provider="completion").observe(time.perf_counter() - started)

        body = _safe_json(resp)
        if not resp.ok:
            logger.error("Completion provider returned %s: %s", resp.status_code, body)
            if is_rate_limited(resp.status_code, body):
                raise ProviderRateLimitError("Completion rate limit reached", status_code=resp.status_code)
            raise ProviderError(f"Completion provider returned {resp.status_code}", status_code=resp.status_code)
        if not isinstance(body, dict):
            raise ProviderError("Completion response is not a JSON object")
        return _extract_text(body)


def _safe_json(resp: requests.Response) -> Any:
    try:
        return resp.json()
    except ValueError:
        return None


def _extract_text(body: dict[str, Any]) -> str:
    choices = body.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return ""
    message = choices[0].get("message") or {}
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


__all__ = ["CompletionClient"]
