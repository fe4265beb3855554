"""Administrative routes for Course Mentor."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from course_mentor.api.dependencies import get_campaign, get_email_audit_log
from course_mentor.core.metrics import metrics_response
from course_mentor.db.repositories import EmailAuditLog
from course_mentor.models.dto import (
    CampaignRequest,
    CampaignResponse,
    EmailAuditItem,
    EmailStatsResponse,
)
from course_mentor.notify.campaign import Candidate, MotivationalCampaign

router = APIRouter()


@router.get("/metrics", summary="Prometheus metrics")
async def get_metrics():
    return metrics_response()


@router.post(
    "/notifications/motivational/run",
    response_model=CampaignResponse,
    summary="Email inactive students",
)
def run_motivational_campaign(
    request: CampaignRequest,
    campaign: MotivationalCampaign = Depends(get_campaign),
) -> CampaignResponse:
    candidates = [Candidate(**item.model_dump()) for item in request.candidates]
    summary = campaign.run(candidates)
    return CampaignResponse(**summary.to_dict())


@router.get(
    "/notifications/motivational/stats",
    response_model=EmailStatsResponse,
    summary="Motivational email counts and latest records",
)
def motivational_stats(
    class_id: str | None = Query(None),
    limit: int = Query(10, ge=1, le=100),
    audit: EmailAuditLog = Depends(get_email_audit_log),
) -> EmailStatsResponse:
    by_status = audit.stats(class_id)
    recent = audit.recent(class_id, limit=limit)
    return EmailStatsResponse(
        total=sum(by_status.values()),
        by_status=by_status,
        recent=[
            EmailAuditItem(
                student_id=row.student_id,
                class_id=row.class_id,
                recipient=row.recipient,
                status=row.status,
                days_inactive=row.days_inactive,
                template=row.template,
                error=row.error,
                sent_at=row.sent_at,
            )
            for row in recent
        ],
    )


__all__ = ["router"]
