"""Student-facing routes: chat, history, search and theme inspection."""

from __future__ import annotations

from functools import partial

from fastapi import APIRouter, Depends, HTTPException, Query

from course_mentor.analysis.themes import ThemeAnalyzer
from course_mentor.answer.orchestrator import AnswerOrchestrator
from course_mentor.api.dependencies import (
    get_document_store,
    get_interaction_log,
    get_orchestrator,
    get_ranker,
    get_theme_analyzer,
)
from course_mentor.core.errors import ProviderRateLimitError
from course_mentor.db.repositories import InteractionLog
from course_mentor.models.dto import (
    ChatHistoryResponse,
    ChatRequest,
    ChatResponse,
    InteractionItem,
    SearchHit,
    SearchRequest,
    SearchResponse,
    SourceItem,
    ThemeResponse,
)
from course_mentor.retrieval import SimilarityRanker
from course_mentor.store.base import DocumentStore
from course_mentor.utils.text import preview

router = APIRouter()


@router.post("/classes/{class_id}/chat", response_model=ChatResponse, summary="Ask the class mentor")
def chat(
    class_id: str,
    request: ChatRequest,
    orchestrator: AnswerOrchestrator = Depends(get_orchestrator),
    interactions: InteractionLog = Depends(get_interaction_log),
) -> ChatResponse:
    question = request.question.strip()
    if not question:
        raise HTTPException(status_code=400, detail="La pregunta es requerida")
    result = orchestrator.answer(class_id, question, request.class_name)
    interactions.record(
        class_id=class_id,
        student_id=request.student_id,
        question=question,
        answer=result.answer,
        outcome=result.outcome,
    )
    return ChatResponse(
        answer=result.answer,
        sources=[SourceItem(**source.to_dict()) for source in result.sources],
        outcome=result.outcome,
    )


@router.get(
    "/classes/{class_id}/chat/history",
    response_model=ChatHistoryResponse,
    summary="Chat history of a student in a class",
)
def chat_history(
    class_id: str,
    student_id: str = Query(...),
    limit: int = Query(50, ge=1, le=500),
    interactions: InteractionLog = Depends(get_interaction_log),
) -> ChatHistoryResponse:
    records = interactions.history(class_id, student_id, limit=limit)
    return ChatHistoryResponse(
        class_id=class_id,
        student_id=student_id,
        interactions=[
            InteractionItem(
                id=record.id,
                question=record.question,
                answer=record.answer,
                outcome=record.outcome,
                created_at=record.created_at,
            )
            for record in records
        ],
    )


@router.post("/classes/{class_id}/search", response_model=SearchResponse, summary="Rank class chunks for a query")
def search(
    class_id: str,
    request: SearchRequest,
    store: DocumentStore = Depends(get_document_store),
    ranker: SimilarityRanker = Depends(get_ranker),
) -> SearchResponse:
    if not request.query.strip():
        raise HTTPException(status_code=400, detail="La consulta es requerida")
    try:
        ranked = ranker.rank(
            request.query,
            store.find(class_id),
            top_k=request.k,
            on_embedded=partial(store.save_embeddings, class_id),
        )
    except ProviderRateLimitError as exc:
        raise HTTPException(status_code=429, detail=str(exc)) from exc
    return SearchResponse(
        results=[
            SearchHit(score=item.score, content=preview(item.chunk.content), metadata=item.chunk.metadata)
            for item in ranked
        ]
    )


@router.get("/classes/{class_id}/themes", response_model=ThemeResponse, summary="Detected themes of a class")
def themes(
    class_id: str,
    store: DocumentStore = Depends(get_document_store),
    analyzer: ThemeAnalyzer = Depends(get_theme_analyzer),
) -> ThemeResponse:
    analysis = analyzer.analyze(store.find(class_id))
    return ThemeResponse(class_id=class_id, **analysis.to_dict())


__all__ = ["router"]
