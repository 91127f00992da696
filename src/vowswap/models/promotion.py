"""Models for seller promotions, their coupon codes and coupon redemptions."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vowswap.db.session import Base
from vowswap.db.time import utcnow
from vowswap.models.user import User


class PromotionType(str, Enum):
    """Kinds of promotion a seller can run."""

    COUPON = "COUPON"
    FLASH_SALE = "FLASH_SALE"
    BULK_DISCOUNT = "BULK_DISCOUNT"


class DiscountType(str, Enum):
    """How a coupon's discount value is interpreted."""

    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


class Promotion(Base):
    """Time-boxed promotion owned by a seller."""

    __tablename__ = "promotion"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    seller_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[PromotionType] = mapped_column(
        SAEnum(PromotionType, name="promotion_type"),
        nullable=False,
    )
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    seller: Mapped[User] = relationship("User")
    coupon_code: Mapped[CouponCode | None] = relationship(
        "CouponCode",
        back_populates="promotion",
        uselist=False,
        cascade="all, delete-orphan",
    )


class CouponCode(Base):
    """Redeemable code attached to a promotion.

    ``used_count`` only ever moves together with the insertion of a
    UsedCoupon row, inside the redemption transaction.
    """

    __tablename__ = "coupon_code"
    __table_args__ = (
        CheckConstraint("used_count >= 0", name="ck_coupon_code_used_count_positive"),
        CheckConstraint(
            "max_uses IS NULL OR used_count <= max_uses",
            name="ck_coupon_code_used_count_within_max",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    promotion_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("promotion.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    discount_type: Mapped[DiscountType] = mapped_column(
        SAEnum(DiscountType, name="discount_type"),
        nullable=False,
    )
    discount_value: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    minimum_purchase: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    max_uses: Mapped[int | None] = mapped_column(Integer, nullable=True)
    used_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    per_user_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)

    promotion: Mapped[Promotion] = relationship("Promotion", back_populates="coupon_code")
    used_coupons: Mapped[list[UsedCoupon]] = relationship(
        "UsedCoupon",
        back_populates="coupon",
        order_by="UsedCoupon.id",
    )


class UsedCoupon(Base):
    """One redemption of a coupon; never mutated or deleted."""

    __tablename__ = "used_coupon"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    coupon_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("coupon_code.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    used_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    order_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    coupon: Mapped[CouponCode] = relationship("CouponCode", back_populates="used_coupons")
