"""Error taxonomy shared by the retrieval, answering and notification layers."""

from __future__ import annotations


class CourseMentorError(Exception):
    """Base class for every error raised by Course Mentor."""


class ConfigError(CourseMentorError):
    """Invalid configuration, e.g. chunk overlap not smaller than chunk size."""


class NoExtractableTextError(CourseMentorError):
    """A source document produced no usable text."""

    def __init__(self, source: str) -> None:
        super().__init__(f"No extractable text in {source!r}")
        self.source = source


class EmbeddingServiceError(CourseMentorError):
    """The remote embedding service failed or returned an unusable payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderError(CourseMentorError):
    """The completion provider failed (network, non-2xx, malformed payload)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProviderRateLimitError(ProviderError):
    """The provider signalled that the (daily) request quota is exhausted."""


class EmbeddingRateLimitError(EmbeddingServiceError, ProviderRateLimitError):
    """Rate limit reported by the embedding endpoint."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        EmbeddingServiceError.__init__(self, message, status_code=status_code)


class DeliveryError(CourseMentorError):
    """Mail transport failure; ``retryable`` is False for permanent failures."""

    def __init__(self, message: str, retryable: bool = True) -> None:
        super().__init__(message)
        self.retryable = retryable


__all__ = [
    "CourseMentorError",
    "ConfigError",
    "NoExtractableTextError",
    "EmbeddingServiceError",
    "EmbeddingRateLimitError",
    "ProviderError",
    "ProviderRateLimitError",
    "DeliveryError",
]
