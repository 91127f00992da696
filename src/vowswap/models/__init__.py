"""SQLAlchemy models for the VowSwap trust and promotions service."""

from .moderation import (
    ContentReport,
    ContentType,
    ModerationAction,
    ModerationActionType,
    ReportStatus,
)
from .promotion import CouponCode, DiscountType, Promotion, PromotionType, UsedCoupon
from .user import User, UserStatus

__all__ = [
    "ContentReport", "ContentType", "ModerationAction", "ModerationActionType", "ReportStatus",
    "CouponCode", "DiscountType", "Promotion", "PromotionType", "UsedCoupon",
    "User", "UserStatus",
]
