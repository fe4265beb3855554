"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from course_mentor.analysis.persona import PersonaSynthesizer
from course_mentor.analysis.themes import ThemeAnalyzer
from course_mentor.answer.completion import CompletionClient
from course_mentor.answer.orchestrator import AnswerOrchestrator
from course_mentor.core.config import Settings, get_settings
from course_mentor.db.repositories import EmailAuditLog, InteractionLog
from course_mentor.db.sqlite import SQLiteDatabase
from course_mentor.ingest.embeddings import Embedder, build_embedder
from course_mentor.ingest.pipeline import IngestPipeline
from course_mentor.notify.campaign import MotivationalCampaign
from course_mentor.notify.dispatcher import NotificationDispatcher
from course_mentor.notify.templates import TemplateRenderer
from course_mentor.notify.transport import SmtpMailTransport, format_sender
from course_mentor.retrieval import SimilarityRanker
from course_mentor.store.base import DocumentStore
from course_mentor.store.json_store import JsonArtifactStore
from course_mentor.store.sqlite_store import SQLiteDocumentStore

_DB: SQLiteDatabase | None = None
_STORE: DocumentStore | None = None
_EMBEDDER: Embedder | None = None
_PIPELINE: IngestPipeline | None = None
_ORCHESTRATOR: AnswerOrchestrator | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_database() -> SQLiteDatabase:
    global _DB
    if _DB is None:
        db = SQLiteDatabase(get_app_settings().db_path)
        db.ensure_schema()
        _DB = db
    return _DB


def get_document_store() -> DocumentStore:
    global _STORE
    if _STORE is None:
        settings = get_app_settings()
        if settings.document_store == "json":
            _STORE = JsonArtifactStore(settings.artifacts_dir)
        else:
            _STORE = SQLiteDocumentStore(get_database())
    return _STORE


def get_embedder() -> Embedder:
    global _EMBEDDER
    if _EMBEDDER is None:
        _EMBEDDER = build_embedder(get_app_settings())
    return _EMBEDDER


def get_ranker() -> SimilarityRanker:
    return SimilarityRanker(get_embedder(), get_app_settings().lexical)


def get_theme_analyzer() -> ThemeAnalyzer:
    return ThemeAnalyzer(get_app_settings().themes)


def get_ingest_pipeline() -> IngestPipeline:
    global _PIPELINE
    if _PIPELINE is None:
        _PIPELINE = IngestPipeline(
            store=get_document_store(),
            settings=get_app_settings(),
            embedder=get_embedder(),
        )
    return _PIPELINE


def get_orchestrator() -> AnswerOrchestrator:
    global _ORCHESTRATOR
    if _ORCHESTRATOR is None:
        settings = get_app_settings()
        _ORCHESTRATOR = AnswerOrchestrator(
            store=get_document_store(),
            ranker=get_ranker(),
            completer=CompletionClient.from_settings(settings),
            analyzer=get_theme_analyzer(),
            persona=PersonaSynthesizer(),
            top_k=settings.top_k,
        )
    return _ORCHESTRATOR


def get_interaction_log() -> InteractionLog:
    return InteractionLog(get_database())


def get_email_audit_log() -> EmailAuditLog:
    return EmailAuditLog(get_database())


def get_campaign() -> MotivationalCampaign:
    settings = get_app_settings()
    dispatcher = NotificationDispatcher(
        SmtpMailTransport.from_settings(settings),
        max_attempts=settings.delivery_max_attempts,
        base_backoff_ms=settings.delivery_base_backoff_ms,
    )
    return MotivationalCampaign(
        interactions=get_interaction_log(),
        audit=get_email_audit_log(),
        dispatcher=dispatcher,
        renderer=TemplateRenderer(settings.app_base_url),
        sender=format_sender(settings.mail_from_name, settings.mail_from),
        inactivity_days=settings.inactivity_threshold_days,
        cooldown_days=settings.email_cooldown_days,
    )


def reset_singletons() -> None:
    """Drop cached components so the next request rebuilds them from settings."""
    global _DB, _STORE, _EMBEDDER, _PIPELINE, _ORCHESTRATOR
    if _DB is not None:
        _DB.close()
    _DB = None
    _STORE = None
    _EMBEDDER = None
    _PIPELINE = None
    _ORCHESTRATOR = None
    get_app_settings.cache_clear()


__all__ = [
    "get_app_settings",
    "get_database",
    "get_document_store",
    "get_embedder",
    "get_ranker",
    "get_theme_analyzer",
    "get_ingest_pipeline",
    "get_orchestrator",
    "get_interaction_log",
    "get_email_audit_log",
    "get_campaign",
    "reset_singletons",
]
