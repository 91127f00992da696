"""Models tracking content reports and the moderator actions taken on them."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship, synonym

from vowswap.db.session import Base
from vowswap.db.time import utcnow
from vowswap.models.user import User


class ContentType(str, Enum):
    """Kinds of marketplace content that can be reported."""

    PRODUCT = "PRODUCT"
    REVIEW = "REVIEW"
    USER_PROFILE = "USER_PROFILE"
    SELLER_PROFILE = "SELLER_PROFILE"
    REGISTRY = "REGISTRY"


class ReportStatus(str, Enum):
    """Lifecycle of a content report."""

    PENDING = "PENDING"
    UNDER_REVIEW = "UNDER_REVIEW"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


class ModerationActionType(str, Enum):
    """Decisions a moderator can record against a report."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"
    DELETE = "DELETE"
    FLAG = "FLAG"
    WARN = "WARN"
    SUSPEND = "SUSPEND"


class ContentReport(Base):
    """User-filed complaint against a piece of content.

    Reports are never deleted; their status only moves through a recorded
    ModerationAction.
    """

    __tablename__ = "content_report"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content_type: Mapped[ContentType] = mapped_column(
        SAEnum(ContentType, name="content_type"),
        nullable=False,
        index=True,
    )
    # Identifier in the owning catalog (product, review, registry...); opaque here.
    content_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ReportStatus] = mapped_column(
        SAEnum(ReportStatus, name="report_status"),
        nullable=False,
        default=ReportStatus.PENDING,
        index=True,
    )
    reporter_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
    )
    reported_user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    reported_by: Mapped[User] = relationship("User", foreign_keys=[reporter_id])
    reported_user: Mapped[User | None] = relationship("User", foreign_keys=[reported_user_id])
    moderation_events: Mapped[list[ModerationAction]] = relationship(
        "ModerationAction",
        back_populates="report",
        order_by="ModerationAction.id",
    )

    # Wire name used by the marketplace clients.
    type = synonym("content_type")


class ModerationAction(Base):
    """Append-only audit record of a moderator decision."""

    __tablename__ = "moderation_action"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    action: Mapped[ModerationActionType] = mapped_column(
        SAEnum(ModerationActionType, name="moderation_action_type"),
        nullable=False,
    )
    moderator_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
    )
    report_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("content_report.id"),
        nullable=False,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    moderator: Mapped[User] = relationship("User")
    report: Mapped[ContentReport] = relationship(
        "ContentReport",
        back_populates="moderation_events",
    )
