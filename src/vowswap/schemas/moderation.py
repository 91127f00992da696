"""Moderation-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from vowswap.models.moderation import (
    ContentReport,
    ContentType,
    ModerationActionType,
    ReportStatus,
)
from vowswap.schemas.common import APIModel, UserSummary


class ReportCreate(APIModel):
    """Schema for filing a content report."""

    type: ContentType
    content_id: str = Field(..., min_length=1, max_length=64)
    reason: str = Field(..., min_length=1, max_length=2000)
    details: str | None = Field(None, max_length=5000)
    reported_user_id: int | None = None


class ModerationActionCreate(APIModel):
    """Schema for recording a moderator decision on a report."""

    action: ModerationActionType
    report_id: int
    notes: str | None = Field(None, max_length=5000)


class ModerationActionResponse(APIModel):
    """Audit record of a single moderator decision."""

    id: int
    action: ModerationActionType
    moderator_id: int
    report_id: int
    notes: str | None = None
    created_at: datetime


class ReportResponse(APIModel):
    """Report with reporter/reported-user summaries and action history."""

    id: int
    type: ContentType
    content_id: str
    reason: str
    details: str | None = None
    status: ReportStatus
    reporter_id: int
    reported_user_id: int | None = None
    created_at: datetime
    updated_at: datetime
    reported_by: UserSummary
    reported_user: UserSummary | None = None
    moderation_events: list[ModerationActionResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: ContentReport, *, newest_first: bool = False) -> ReportResponse:
        """Build a response whose history is ordered as requested."""
        response = cls.model_validate(report)
        # Ids are assigned in insertion order, unlike timestamps which can tie.
        response.moderation_events.sort(key=lambda event: event.id, reverse=newest_first)
        return response


class ModerationActionResult(APIModel):
    """Outcome of a moderation action: the audit row and the updated report."""

    moderation_action: ModerationActionResponse
    updated_report: ReportResponse


class ReportSummary(APIModel):
    """Minimal report fields shown next to recent actions."""

    type: ContentType
    reason: str
    content_id: str


class RecentActionResponse(ModerationActionResponse):
    """Moderation action enriched for the dashboard feed."""

    moderator: UserSummary
    report: ReportSummary


class ModerationStatsResponse(APIModel):
    """Aggregate counters for the moderation dashboard."""

    total_reports: int
    pending_reports: int
    resolved_reports: int
    reports_by_type: dict[str, int]
    reports_by_status: dict[str, int]
    recent_actions: list[RecentActionResponse]
    timestamp: datetime


class ContentHistoryResponse(APIModel):
    """All reports filed on one piece of content and the decisions taken on them."""

    type: ContentType
    content_id: str
    reports: list[ReportResponse]
    moderation_events: list[RecentActionResponse]
