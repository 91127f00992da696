# tests/services/test_moderation_service.py
"""Tests for the moderation service."""

from datetime import timedelta

import pytest

from vowswap.db.time import utcnow
from vowswap.models import (
    ContentReport,
    ContentType,
    ModerationAction,
    ModerationActionType,
    ReportStatus,
    UserStatus,
)
from vowswap.schemas.moderation import ReportCreate
from vowswap.services.errors import Forbidden, NotFound, Unauthenticated, ValidationError
from vowswap.services.moderation import ModerationService, resolve_report_status


class TestResolveReportStatus:
    """The status a report lands in depends only on the action."""

    @pytest.mark.parametrize(
        ("action", "expected"),
        [
            (ModerationActionType.APPROVE, ReportStatus.RESOLVED),
            (ModerationActionType.REJECT, ReportStatus.RESOLVED),
            (ModerationActionType.DELETE, ReportStatus.RESOLVED),
            (ModerationActionType.WARN, ReportStatus.RESOLVED),
            (ModerationActionType.SUSPEND, ReportStatus.RESOLVED),
            (ModerationActionType.FLAG, ReportStatus.UNDER_REVIEW),
        ],
    )
    def test_known_actions(self, action, expected):
        assert resolve_report_status(action) == expected

    def test_accepts_raw_strings(self):
        assert resolve_report_status("WARN") == ReportStatus.RESOLVED

    @pytest.mark.parametrize("action", ["ESCALATE", "", None])
    def test_unknown_actions_fall_back_to_under_review(self, action):
        assert resolve_report_status(action) == ReportStatus.UNDER_REVIEW


class TestSubmitReport:
    """Tests for filing reports."""

    def test_creates_pending_report(self, db_session, customer_user, reported_user):
        payload = ReportCreate(
            type=ContentType.PRODUCT,
            content_id="gown-42",
            reason="Listing uses stolen photos",
            details="Same pictures as a designer site",
            reported_user_id=reported_user.id,
        )

        report = ModerationService.submit_report(db_session, customer_user, payload)

        assert report.id is not None
        assert report.status == ReportStatus.PENDING
        assert report.reporter_id == customer_user.id
        assert report.reported_user_id == reported_user.id
        assert report.type == ContentType.PRODUCT
        assert report.moderation_events == []

    def test_duplicate_reports_are_tracked_separately(self, db_session, customer_user):
        payload = ReportCreate(type=ContentType.REVIEW, content_id="review-7", reason="Spam")

        first = ModerationService.submit_report(db_session, customer_user, payload)
        second = ModerationService.submit_report(db_session, customer_user, payload)

        assert first.id != second.id
        assert db_session.query(ContentReport).count() == 2

    def test_requires_reporter(self, db_session):
        payload = ReportCreate(type=ContentType.REVIEW, content_id="review-7", reason="Spam")

        with pytest.raises(Unauthenticated):
            ModerationService.submit_report(db_session, None, payload)

    def test_blank_reason_rejected(self, db_session, customer_user):
        payload = ReportCreate(type=ContentType.REVIEW, content_id="review-7", reason="   ")

        with pytest.raises(ValidationError):
            ModerationService.submit_report(db_session, customer_user, payload)
        assert db_session.query(ContentReport).count() == 0

    def test_unknown_reported_user(self, db_session, customer_user):
        payload = ReportCreate(
            type=ContentType.USER_PROFILE,
            content_id="profile-1",
            reason="Impersonation",
            reported_user_id=424242,
        )

        with pytest.raises(NotFound):
            ModerationService.submit_report(db_session, customer_user, payload)


class TestApplyModerationAction:
    """Tests for recording moderator decisions."""

    def test_records_action_and_resolves(self, db_session, moderator_user, make_report):
        report = make_report()

        action, updated = ModerationService.apply_moderation_action(
            db_session, moderator_user, ModerationActionType.APPROVE, report.id, "Looks fine",
        )

        assert action.id is not None
        assert action.moderator_id == moderator_user.id
        assert action.report_id == report.id
        assert action.notes == "Looks fine"
        assert updated.status == ReportStatus.RESOLVED
        assert [event.id for event in updated.moderation_events] == [action.id]

    def test_status_ignores_prior_status(self, db_session, moderator_user, make_report):
        report = make_report()

        for action_type in (
            ModerationActionType.FLAG,
            ModerationActionType.WARN,
            ModerationActionType.FLAG,
        ):
            _, report = ModerationService.apply_moderation_action(
                db_session, moderator_user, action_type, report.id,
            )

        assert report.status == ReportStatus.UNDER_REVIEW
        assert len(report.moderation_events) == 3

    def test_suspend_suspends_reported_user(
        self, db_session, moderator_user, make_report, reported_user,
    ):
        report = make_report(reported_user=reported_user)

        ModerationService.apply_moderation_action(
            db_session, moderator_user, ModerationActionType.SUSPEND, report.id,
        )

        db_session.refresh(reported_user)
        assert reported_user.status == UserStatus.SUSPENDED

    def test_suspend_without_reported_user(self, db_session, moderator_user, make_report):
        report = make_report()

        _, updated = ModerationService.apply_moderation_action(
            db_session, moderator_user, ModerationActionType.SUSPEND, report.id,
        )

        assert updated.status == ReportStatus.RESOLVED

    def test_other_actions_leave_reported_user_active(
        self, db_session, moderator_user, make_report, reported_user,
    ):
        report = make_report(reported_user=reported_user)

        ModerationService.apply_moderation_action(
            db_session, moderator_user, ModerationActionType.WARN, report.id,
        )

        db_session.refresh(reported_user)
        assert reported_user.status == UserStatus.ACTIVE

    def test_missing_report_writes_nothing(self, db_session, moderator_user):
        with pytest.raises(NotFound):
            ModerationService.apply_moderation_action(
                db_session, moderator_user, ModerationActionType.APPROVE, 9999,
            )

        assert db_session.query(ModerationAction).count() == 0

    def test_unsupported_action(self, db_session, moderator_user, make_report):
        report = make_report()

        with pytest.raises(ValidationError):
            ModerationService.apply_moderation_action(db_session, moderator_user, "ESCALATE", report.id)

        db_session.refresh(report)
        assert report.status == ReportStatus.PENDING

    def test_customer_cannot_moderate(self, db_session, customer_user, make_report):
        report = make_report()

        with pytest.raises(Forbidden):
            ModerationService.apply_moderation_action(
                db_session, customer_user, ModerationActionType.DELETE, report.id,
            )
        assert db_session.query(ModerationAction).count() == 0

    def test_requires_moderator(self, db_session, make_report):
        report = make_report()

        with pytest.raises(Unauthenticated):
            ModerationService.apply_moderation_action(
                db_session, None, ModerationActionType.DELETE, report.id,
            )

    def test_admin_can_moderate(self, db_session, admin_user, make_report):
        report = make_report()

        _, updated = ModerationService.apply_moderation_action(
            db_session, admin_user, ModerationActionType.REJECT, report.id,
        )

        assert updated.status == ReportStatus.RESOLVED


class TestListReports:
    """Tests for the moderation queue listing."""

    def test_newest_first(self, db_session, moderator_user, make_report):
        now = utcnow()
        older = make_report(content_id="a", created_at=now - timedelta(days=2))
        newer = make_report(content_id="b", created_at=now - timedelta(hours=1))

        reports = ModerationService.list_reports(db_session, moderator_user)

        assert [report.id for report in reports] == [newer.id, older.id]

    def test_filters_by_status_and_type(self, db_session, moderator_user, make_report):
        product = make_report(content_type=ContentType.PRODUCT)
        review = make_report(content_type=ContentType.REVIEW)
        ModerationService.apply_moderation_action(
            db_session, moderator_user, ModerationActionType.FLAG, review.id,
        )

        under_review = ModerationService.list_reports(
            db_session, moderator_user, status=ReportStatus.UNDER_REVIEW,
        )
        products = ModerationService.list_reports(
            db_session, moderator_user, content_type=ContentType.PRODUCT,
        )

        assert [report.id for report in under_review] == [review.id]
        assert [report.id for report in products] == [product.id]

    def test_date_bounds_are_independent(self, db_session, moderator_user, make_report):
        now = utcnow()
        old = make_report(content_id="old", created_at=now - timedelta(days=10))
        mid = make_report(content_id="mid", created_at=now - timedelta(days=5))
        recent = make_report(content_id="recent", created_at=now - timedelta(days=1))

        since = ModerationService.list_reports(
            db_session, moderator_user, start=now - timedelta(days=6),
        )
        until = ModerationService.list_reports(
            db_session, moderator_user, end=now - timedelta(days=4),
        )
        window = ModerationService.list_reports(
            db_session,
            moderator_user,
            start=now - timedelta(days=6),
            end=now - timedelta(days=4),
        )

        assert [report.id for report in since] == [recent.id, mid.id]
        assert [report.id for report in until] == [mid.id, old.id]
        assert [report.id for report in window] == [mid.id]

    def test_seller_cannot_list(self, db_session, seller_user):
        with pytest.raises(Forbidden):
            ModerationService.list_reports(db_session, seller_user)


class TestContentHistory:
    """Tests for the per-content moderation history."""

    def test_collects_reports_and_decisions(self, db_session, moderator_user, admin_user, make_report):
        first = make_report(content_type=ContentType.REVIEW, content_id="review-9")
        second = make_report(content_type=ContentType.REVIEW, content_id="review-9", reason="Spam link")
        make_report(content_type=ContentType.PRODUCT, content_id="review-9")
        make_report(content_type=ContentType.REVIEW, content_id="review-10")
        flagged, _ = ModerationService.apply_moderation_action(
            db_session, moderator_user, ModerationActionType.FLAG, first.id,
        )
        deleted, _ = ModerationService.apply_moderation_action(
            db_session, admin_user, ModerationActionType.DELETE, second.id, "Removed",
        )

        history = ModerationService.content_history(
            db_session, moderator_user, ContentType.REVIEW, " review-9 ",
        )

        assert history["type"] == ContentType.REVIEW
        assert history["content_id"] == "review-9"
        assert [report.id for report in history["reports"]] == [second.id, first.id]
        assert [event.id for event in history["moderation_events"]] == [deleted.id, flagged.id]
        assert history["moderation_events"][0].moderator.id == admin_user.id

    def test_unreported_content(self, db_session, moderator_user, make_report):
        make_report(content_type=ContentType.PRODUCT, content_id="product-1")

        with pytest.raises(NotFound):
            ModerationService.content_history(
                db_session, moderator_user, ContentType.REGISTRY, "product-1",
            )

    def test_blank_content_id(self, db_session, moderator_user):
        with pytest.raises(ValidationError):
            ModerationService.content_history(db_session, moderator_user, ContentType.PRODUCT, "  ")

    def test_reports_without_decisions(self, db_session, admin_user, make_report):
        report = make_report(content_type=ContentType.SELLER_PROFILE, content_id="seller-4")

        history = ModerationService.content_history(
            db_session, admin_user, ContentType.SELLER_PROFILE, "seller-4",
        )

        assert [item.id for item in history["reports"]] == [report.id]
        assert history["moderation_events"] == []

    def test_customer_cannot_view(self, db_session, customer_user, make_report):
        make_report()

        with pytest.raises(Forbidden):
            ModerationService.content_history(db_session, customer_user, ContentType.PRODUCT, "product-1")


class TestModerationStats:
    """Tests for the dashboard counters."""

    def test_counts_and_recent_actions(self, db_session, moderator_user, make_report):
        first = make_report(content_type=ContentType.PRODUCT)
        second = make_report(content_type=ContentType.PRODUCT)
        make_report(content_type=ContentType.REGISTRY)
        ModerationService.apply_moderation_action(
            db_session, moderator_user, ModerationActionType.APPROVE, first.id,
        )
        ModerationService.apply_moderation_action(
            db_session, moderator_user, ModerationActionType.FLAG, second.id,
        )

        stats = ModerationService.moderation_stats(db_session, moderator_user)

        assert stats["total_reports"] == 3
        assert stats["pending_reports"] == 1
        assert stats["resolved_reports"] == 1
        assert stats["reports_by_type"] == {"PRODUCT": 2, "REGISTRY": 1}
        assert stats["reports_by_status"] == {"PENDING": 1, "RESOLVED": 1, "UNDER_REVIEW": 1}
        assert [action.report_id for action in stats["recent_actions"]] == [second.id, first.id]
        assert stats["timestamp"] is not None

    def test_empty_store(self, db_session, admin_user):
        stats = ModerationService.moderation_stats(db_session, admin_user)

        assert stats["total_reports"] == 0
        assert stats["reports_by_type"] == {}
        assert stats["recent_actions"] == []
