"""Document ingest routes."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException

from course_mentor.api.dependencies import get_ingest_pipeline
from course_mentor.core.errors import ConfigError, NoExtractableTextError
from course_mentor.ingest.pipeline import IngestPipeline
from course_mentor.models.dto import DocumentIngestRequest, DocumentIngestResponse

router = APIRouter()


@router.post(
    "/classes/{class_id}/documents",
    response_model=DocumentIngestResponse,
    summary="Extract, chunk and index a PDF for a class",
)
def ingest_document(
    class_id: str,
    request: DocumentIngestRequest,
    pipeline: IngestPipeline = Depends(get_ingest_pipeline),
) -> DocumentIngestResponse:
    path = Path(request.path).expanduser()
    try:
        result = pipeline.ingest_pdf(class_id, path, document_id=request.document_id)
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=f"File not found: {path}") from exc
    except NoExtractableTextError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except ConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return DocumentIngestResponse(
        class_id=result.class_id,
        document_id=result.document_id,
        source=result.source,
        status=result.status,
        stats=result.stats.to_dict(),
    )


__all__ = ["router"]
