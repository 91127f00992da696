"""Moderation-related endpoints for the VowSwap API."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Query, status

from vowswap.api.v1.dependencies import CurrentUserDep, ModeratorDep, SessionDep
from vowswap.models import ContentType, ReportStatus
from vowswap.schemas.moderation import (
    ContentHistoryResponse,
    ModerationActionCreate,
    ModerationActionResponse,
    ModerationActionResult,
    ModerationStatsResponse,
    RecentActionResponse,
    ReportCreate,
    ReportResponse,
)
from vowswap.services.moderation import ModerationService

router = APIRouter(prefix="/moderation", tags=["moderation"])
moderation_service = ModerationService()


@router.post(
    "/reports",
    status_code=status.HTTP_201_CREATED,
    response_model=ReportResponse,
)
async def submit_report(
    payload: ReportCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ReportResponse:
    """File a report against a product, review, profile or registry."""
    report = moderation_service.submit_report(db, current_user, payload)
    return ReportResponse.from_report(report)


@router.get("/reports", response_model=list[ReportResponse])
async def list_reports(
    moderator: ModeratorDep,
    db: SessionDep,
    report_status: ReportStatus | None = Query(None, alias="status"),
    content_type: ContentType | None = Query(None, alias="type"),
    start_date: datetime | None = Query(None, alias="startDate"),
    end_date: datetime | None = Query(None, alias="endDate"),
) -> list[ReportResponse]:
    """List reports newest first, each with its action history oldest first."""
    reports = moderation_service.list_reports(
        db,
        moderator,
        status=report_status,
        content_type=content_type,
        start=start_date,
        end=end_date,
    )
    return [ReportResponse.from_report(report) for report in reports]


@router.post("/actions", response_model=ModerationActionResult)
async def apply_moderation_action(
    payload: ModerationActionCreate,
    moderator: ModeratorDep,
    db: SessionDep,
) -> ModerationActionResult:
    """Record a moderator decision and move the report's status accordingly."""
    action, report = moderation_service.apply_moderation_action(
        db,
        moderator,
        payload.action,
        payload.report_id,
        payload.notes,
    )
    return ModerationActionResult(
        moderation_action=ModerationActionResponse.model_validate(action),
        updated_report=ReportResponse.from_report(report, newest_first=True),
    )


@router.get("/stats", response_model=ModerationStatsResponse)
async def moderation_stats(
    moderator: ModeratorDep,
    db: SessionDep,
) -> ModerationStatsResponse:
    """Counters and recent activity for the moderation dashboard."""
    return ModerationStatsResponse.model_validate(moderation_service.moderation_stats(db, moderator))


@router.get("/content", response_model=ContentHistoryResponse)
async def content_history(
    moderator: ModeratorDep,
    db: SessionDep,
    content_type: ContentType = Query(..., alias="type"),
    content_id: str = Query(..., alias="contentId", min_length=1, max_length=64),
) -> ContentHistoryResponse:
    """Reports on one piece of content and its moderation history, newest first."""
    history = moderation_service.content_history(db, moderator, content_type, content_id)
    return ContentHistoryResponse(
        type=history["type"],
        content_id=history["content_id"],
        reports=[ReportResponse.from_report(report, newest_first=True) for report in history["reports"]],
        moderation_events=[
            RecentActionResponse.model_validate(event) for event in history["moderation_events"]
        ],
    )
