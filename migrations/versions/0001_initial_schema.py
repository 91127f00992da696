"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLE = sa.Enum("ADMIN", "MODERATOR", "SELLER", "CUSTOMER", name="user_role")
USER_STATUS = sa.Enum("ACTIVE", "SUSPENDED", name="user_status")
CONTENT_TYPE = sa.Enum(
    "PRODUCT", "REVIEW", "USER_PROFILE", "SELLER_PROFILE", "REGISTRY", name="content_type"
)
REPORT_STATUS = sa.Enum("PENDING", "UNDER_REVIEW", "RESOLVED", "DISMISSED", name="report_status")
ACTION_TYPE = sa.Enum(
    "APPROVE", "REJECT", "DELETE", "FLAG", "WARN", "SUSPEND", name="moderation_action_type"
)
PROMOTION_TYPE = sa.Enum("COUPON", "FLASH_SALE", "BULK_DISCOUNT", name="promotion_type")
DISCOUNT_TYPE = sa.Enum("PERCENTAGE", "FIXED_AMOUNT", name="discount_type")


def upgrade() -> None:
    """Create accounts, moderation and promotion tables."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("role", USER_ROLE, nullable=False),
        sa.Column("status", USER_STATUS, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_table(
        "content_report",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("content_type", CONTENT_TYPE, nullable=False),
        sa.Column("content_id", sa.String(length=64), nullable=False),
        sa.Column("reason", sa.Text(), nullable=False),
        sa.Column("details", sa.Text(), nullable=True),
        sa.Column("status", REPORT_STATUS, nullable=False),
        sa.Column("reporter_id", sa.Integer(), nullable=False),
        sa.Column("reported_user_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["reporter_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["reported_user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_content_report_content_type", "content_report", ["content_type"])
    op.create_index("ix_content_report_status", "content_report", ["status"])
    op.create_index("ix_content_report_created_at", "content_report", ["created_at"])
    op.create_table(
        "moderation_action",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("action", ACTION_TYPE, nullable=False),
        sa.Column("moderator_id", sa.Integer(), nullable=False),
        sa.Column("report_id", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["moderator_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["report_id"], ["content_report.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_moderation_action_report_id", "moderation_action", ["report_id"])
    op.create_table(
        "promotion",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("seller_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", PROMOTION_TYPE, nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["seller_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_promotion_seller_id", "promotion", ["seller_id"])
    op.create_table(
        "coupon_code",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("promotion_id", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("discount_type", DISCOUNT_TYPE, nullable=False),
        sa.Column("discount_value", sa.Numeric(10, 2), nullable=False),
        sa.Column("minimum_purchase", sa.Numeric(10, 2), nullable=True),
        sa.Column("max_uses", sa.Integer(), nullable=True),
        sa.Column("used_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("per_user_limit", sa.Integer(), nullable=True),
        sa.CheckConstraint("used_count >= 0", name="ck_coupon_code_used_count_positive"),
        sa.CheckConstraint(
            "max_uses IS NULL OR used_count <= max_uses",
            name="ck_coupon_code_used_count_within_max",
        ),
        sa.ForeignKeyConstraint(["promotion_id"], ["promotion.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code"),
        sa.UniqueConstraint("promotion_id"),
    )
    op.create_table(
        "used_coupon",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("coupon_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("order_id", sa.String(length=64), nullable=True),
        sa.ForeignKeyConstraint(["coupon_id"], ["coupon_code.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_used_coupon_coupon_id", "used_coupon", ["coupon_id"])
    op.create_index("ix_used_coupon_user_id", "used_coupon", ["user_id"])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_index("ix_used_coupon_user_id", table_name="used_coupon")
    op.drop_index("ix_used_coupon_coupon_id", table_name="used_coupon")
    op.drop_table("used_coupon")
    op.drop_table("coupon_code")
    op.drop_index("ix_promotion_seller_id", table_name="promotion")
    op.drop_table("promotion")
    op.drop_index("ix_moderation_action_report_id", table_name="moderation_action")
    op.drop_table("moderation_action")
    op.drop_index("ix_content_report_created_at", table_name="content_report")
    op.drop_index("ix_content_report_status", table_name="content_report")
    op.drop_index("ix_content_report_content_type", table_name="content_report")
    op.drop_table("content_report")
    op.drop_table("users")

    bind = op.get_bind()
    for enum in (
        DISCOUNT_TYPE, PROMOTION_TYPE, ACTION_TYPE, REPORT_STATUS, CONTENT_TYPE, USER_STATUS, USER_ROLE,
    ):
        enum.drop(bind, checkfirst=True)
