"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    question: str
    student_id: str
    class_name: str | None = None


class SourceItem(BaseModel):
    content: str
    metadata: dict[str, Any]


class ChatResponse(BaseModel):
    answer: str
    sources: list[SourceItem]
    outcome: Literal["answered", "no_documents", "rate_limited", "unavailable"]


class InteractionItem(BaseModel):
    id: str
    question: str
    answer: str
    outcome: str
    created_at: datetime


class ChatHistoryResponse(BaseModel):
    class_id: str
    student_id: str
    interactions: list[InteractionItem]


class SearchRequest(BaseModel):
    query: str
    k: int = Field(default=5, ge=1, le=50)


class SearchHit(BaseModel):
    score: float
    content: str
    metadata: dict[str, Any]


class SearchResponse(BaseModel):
    results: list[SearchHit]


class DocumentIngestRequest(BaseModel):
    path: str = Field(description="Local path of the PDF to ingest")
    document_id: str | None = None


class DocumentIngestResponse(BaseModel):
    class_id: str
    document_id: str
    source: str
    status: str
    stats: dict[str, int]


class ThemeResponse(BaseModel):
    class_id: str
    ranked_themes: list[str]
    matched_keywords: list[str]
    confidence: float
    scores: dict[str, float]


class CandidateItem(BaseModel):
    student_id: str
    class_id: str
    email: str
    name: str
    class_name: str
    enrolled_at: datetime


class CampaignRequest(BaseModel):
    candidates: list[CandidateItem] = Field(default_factory=list)


class CampaignResponse(BaseModel):
    checked: int
    sent: int
    failed: int
    skipped: int


class EmailAuditItem(BaseModel):
    student_id: str
    class_id: str
    recipient: str
    status: str
    days_inactive: int | None
    template: str | None
    error: str | None
    sent_at: datetime


class EmailStatsResponse(BaseModel):
    total: int
    by_status: dict[str, int]
    recent: list[EmailAuditItem]


__all__ = [
    "ChatRequest",
    "ChatResponse",
    "ChatHistoryResponse",
    "InteractionItem",
    "SourceItem",
    "SearchRequest",
    "SearchResponse",
    "SearchHit",
    "DocumentIngestRequest",
    "DocumentIngestResponse",
    "ThemeResponse",
    "CandidateItem",
    "CampaignRequest",
    "CampaignResponse",
    "EmailAuditItem",
    "EmailStatsResponse",
]
