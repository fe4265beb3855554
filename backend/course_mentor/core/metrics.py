"""Prometheus metrics instrumentation."""

from __future__ import annotations

from fastapi import Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()

ANSWER_COUNT = Counter(
    "cmentor_answers_total",
    "Answers produced, by outcome",
    labelnames=("outcome",),
    registry=REGISTRY,
)

PROVIDER_LATENCY = Histogram(
    "cmentor_provider_latency_seconds",
    "Latency of outbound provider calls",
    labelnames=("provider",),
    registry=REGISTRY,
)

EMBEDDING_FAILURES = Counter(
    "cmentor_embedding_failures_total",
    "Chunk embeddings that could not be produced",
    labelnames=("stage",),
    registry=REGISTRY,
)

INGESTED_CHUNKS = Counter(
    "cmentor_ingested_chunks_total",
    "Chunks appended to the document store",
    registry=REGISTRY,
)

DELIVERY_ATTEMPTS = Counter(
    "cmentor_delivery_attempts_total",
    "Mail delivery attempts, by outcome",
    labelnames=("outcome",),
    registry=REGISTRY,
)


def metrics_response() -> Response:
    """Return Prometheus metrics as an HTTP response."""
    payload = generate_latest(REGISTRY)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "REGISTRY",
    "ANSWER_COUNT",
    "PROVIDER_LATENCY",
    "EMBEDDING_FAILURES",
    "INGESTED_CHUNKS",
    "DELIVERY_ATTEMPTS",
    "metrics_response",
]
