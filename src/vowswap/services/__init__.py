"""Business logic services for the VowSwap trust and promotions service."""

from .coupons import CouponResult
from .errors import (
    Forbidden,
    NotFound,
    StoreFailure,
    Unauthenticated,
    ValidationError,
    VowSwapError,
)
from .moderation import ModerationService

__all__ = [
    "CouponResult",
    "ModerationService",
    "VowSwapError",
    "Unauthenticated",
    "Forbidden",
    "NotFound",
    "ValidationError",
    "StoreFailure",
]
