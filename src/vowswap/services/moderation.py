"""Moderation services for VowSwap.

Reports move through their lifecycle only by way of a recorded moderation
action. The status a report lands in depends solely on the action taken,
never on the status it had before.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from types import MappingProxyType
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, contains_eager, joinedload, selectinload

from vowswap.core.security import MODERATION_ROLES
from vowswap.core.settings import settings
from vowswap.db.time import as_utc, utcnow
from vowswap.models import (
    ContentReport,
    ContentType,
    ModerationAction,
    ModerationActionType,
    ReportStatus,
    User,
    UserStatus,
)
from vowswap.schemas.moderation import ReportCreate
from vowswap.services.access import ensure_capability
from vowswap.services.errors import (
    NotFound,
    StoreFailure,
    Unauthenticated,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ACTION: Mapping[ModerationActionType, ReportStatus] = MappingProxyType({
    ModerationActionType.APPROVE: ReportStatus.RESOLVED,
    ModerationActionType.REJECT: ReportStatus.RESOLVED,
    ModerationActionType.DELETE: ReportStatus.RESOLVED,
    ModerationActionType.FLAG: ReportStatus.UNDER_REVIEW,
    ModerationActionType.WARN: ReportStatus.RESOLVED,
    ModerationActionType.SUSPEND: ReportStatus.RESOLVED,
})


def resolve_report_status(action: ModerationActionType | str | None) -> ReportStatus:
    """Return the status a report takes after ``action``.

    Unrecognised actions fall back to UNDER_REVIEW.
    """
    try:
        return STATUS_BY_ACTION[ModerationActionType(action)]
    except (KeyError, ValueError):
        return ReportStatus.UNDER_REVIEW


def _report_query(db: Session):
    return db.query(ContentReport).options(
        joinedload(ContentReport.reported_by),
        joinedload(ContentReport.reported_user),
        selectinload(ContentReport.moderation_events),
    )


class ModerationService:
    """Service handling content reports and moderator decisions."""

    @staticmethod
    def submit_report(db: Session, reporter: User | None, payload: ReportCreate) -> ContentReport:
        """File a new PENDING report on behalf of ``reporter``.

        Duplicate reports of the same content are accepted and tracked
        independently.

        Args:
            db: Database session
            reporter: Authenticated user filing the report
            payload: Report contents

        Returns:
            The persisted report with its user relationships loaded

        Raises:
            Unauthenticated: If no reporter is given
            ValidationError: If the content id or reason is blank
            NotFound: If ``reported_user_id`` names no user
        """
        if reporter is None:
            raise Unauthenticated()

        content_id = payload.content_id.strip()
        reason = payload.reason.strip()
        if not content_id or not reason:
            raise ValidationError("contentId and reason are required")

        if payload.reported_user_id is not None and db.get(User, payload.reported_user_id) is None:
            raise NotFound("Reported user not found")

        report = ContentReport(
            content_type=payload.type,
            content_id=content_id,
            reason=reason,
            details=payload.details,
            reporter_id=reporter.id,
            reported_user_id=payload.reported_user_id,
            status=ReportStatus.PENDING,
        )
        try:
            db.add(report)
            db.commit()
        except SQLAlchemyError as err:
            db.rollback()
            logger.error("Failed to store report from user %s", reporter.id, exc_info=True)
            raise StoreFailure() from err

        db.refresh(report)
        logger.info(
            "Report %s filed by user %s against %s %s",
            report.id, reporter.id, report.content_type.value, report.content_id,
        )
        return report

    @staticmethod
    def apply_moderation_action(
        db: Session,
        moderator: User | None,
        action: ModerationActionType | str,
        report_id: int,
        notes: str | None = None,
    ) -> tuple[ModerationAction, ContentReport]:
        """Record ``action`` against a report and move the report's status.

        The audit row, the status change and (for SUSPEND) the reported
        user's suspension are committed together or not at all.

        Args:
            db: Database session
            moderator: User taking the action; must be ADMIN or MODERATOR
            action: Decision taken
            report_id: Target report
            notes: Optional moderator notes

        Returns:
            The new moderation action and the updated report
        """
        ensure_capability(moderator, MODERATION_ROLES)
        try:
            action_type = ModerationActionType(action)
        except ValueError as err:
            raise ValidationError(f"Unsupported moderation action: {action}") from err

        new_status = resolve_report_status(action_type)
        try:
            report = db.get(ContentReport, report_id)
            if report is None:
                raise NotFound("Report not found")

            record = ModerationAction(
                action=action_type,
                moderator_id=moderator.id,
                report=report,
                notes=notes,
            )
            db.add(record)
            report.status = new_status

            suspended_user_id = None
            if action_type == ModerationActionType.SUSPEND and report.reported_user_id is not None:
                reported_user = db.get(User, report.reported_user_id)
                if reported_user is not None:
                    reported_user.status = UserStatus.SUSPENDED
                    suspended_user_id = reported_user.id

            db.commit()
        except NotFound:
            db.rollback()
            raise
        except SQLAlchemyError as err:
            db.rollback()
            logger.error(
                "Moderation action %s on report %s rolled back",
                action_type.value, report_id, exc_info=True,
            )
            raise StoreFailure() from err

        db.refresh(record)
        db.refresh(report)
        logger.info(
            "Moderator %s applied %s to report %s; status is now %s",
            moderator.id, action_type.value, report.id, new_status.value,
        )
        if suspended_user_id is not None:
            # Provenance of reported_user_id is not re-checked at action time.
            logger.info(
                "User %s suspended through report %s by moderator %s",
                suspended_user_id, report.id, moderator.id,
            )
        return record, report

    @staticmethod
    def list_reports(
        db: Session,
        viewer: User | None,
        status: ReportStatus | None = None,
        content_type: ContentType | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[ContentReport]:
        """Return reports matching the filters, newest first.

        ``start`` and ``end`` bound the creation time inclusively and may be
        given independently.
        """
        ensure_capability(viewer, MODERATION_ROLES)

        query = _report_query(db)
        if status is not None:
            query = query.filter(ContentReport.status == status)
        if content_type is not None:
            query = query.filter(ContentReport.content_type == content_type)
        if start is not None:
            query = query.filter(ContentReport.created_at >= as_utc(start))
        if end is not None:
            query = query.filter(ContentReport.created_at <= as_utc(end))

        return query.order_by(ContentReport.created_at.desc(), ContentReport.id.desc()).all()

    @staticmethod
    def content_history(
        db: Session,
        viewer: User | None,
        content_type: ContentType,
        content_id: str,
    ) -> dict[str, Any]:
        """Return every report on one piece of content and the decisions taken on them.

        The catalog records themselves live outside this service, so content
        is known here only through its reports.

        Raises:
            ValidationError: If ``content_id`` is blank
            NotFound: If nothing has ever been reported under that type and id
        """
        ensure_capability(viewer, MODERATION_ROLES)
        content_id = content_id.strip()
        if not content_id:
            raise ValidationError("type and contentId are required")

        reports = (
            _report_query(db)
            .filter(
                ContentReport.content_type == content_type,
                ContentReport.content_id == content_id,
            )
            .order_by(ContentReport.created_at.desc(), ContentReport.id.desc())
            .all()
        )
        if not reports:
            raise NotFound("Content not found")

        events = (
            db.query(ModerationAction)
            .join(ModerationAction.report)
            .options(
                joinedload(ModerationAction.moderator),
                contains_eager(ModerationAction.report),
            )
            .filter(
                ContentReport.content_type == content_type,
                ContentReport.content_id == content_id,
            )
            .order_by(ModerationAction.created_at.desc(), ModerationAction.id.desc())
            .all()
        )
        return {
            "type": content_type,
            "content_id": content_id,
            "reports": reports,
            "moderation_events": events,
        }

    @staticmethod
    def moderation_stats(db: Session, viewer: User | None) -> dict[str, Any]:
        """Return aggregate counters and recent activity for the dashboard."""
        ensure_capability(viewer, MODERATION_ROLES)

        total_reports = db.query(func.count(ContentReport.id)).scalar() or 0
        by_status = dict(
            db.query(ContentReport.status, func.count(ContentReport.id))
            .group_by(ContentReport.status)
            .all()
        )
        by_type = dict(
            db.query(ContentReport.content_type, func.count(ContentReport.id))
            .group_by(ContentReport.content_type)
            .all()
        )
        recent_actions = (
            db.query(ModerationAction)
            .options(
                joinedload(ModerationAction.moderator),
                joinedload(ModerationAction.report),
            )
            .order_by(ModerationAction.created_at.desc(), ModerationAction.id.desc())
            .limit(settings.moderation_recent_actions)
            .all()
        )

        return {
            "total_reports": total_reports,
            "pending_reports": by_status.get(ReportStatus.PENDING, 0),
            "resolved_reports": by_status.get(ReportStatus.RESOLVED, 0),
            "reports_by_type": {ContentType(key).value: count for key, count in by_type.items()},
            "reports_by_status": {ReportStatus(key).value: count for key, count in by_status.items()},
            "recent_actions": recent_actions,
            "timestamp": utcnow(),
        }
