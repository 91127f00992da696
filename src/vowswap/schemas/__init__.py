"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .common import ApiResponse, UserSummary
from .moderation import (
    ContentHistoryResponse,
    ModerationActionCreate,
    ModerationActionResponse,
    ModerationActionResult,
    ModerationStatsResponse,
    ReportCreate,
    ReportResponse,
)
from .promotion import (
    CouponRedeemRequest,
    CouponResultData,
    CouponValidateRequest,
    PromotionCreate,
    PromotionResponse,
    PromotionUpdate,
)

__all__ = [
    "ApiResponse", "UserSummary",
    "ContentHistoryResponse", "ModerationActionCreate", "ModerationActionResponse", "ModerationActionResult",
    "ModerationStatsResponse", "ReportCreate", "ReportResponse",
    "CouponRedeemRequest", "CouponResultData", "CouponValidateRequest",
    "PromotionCreate", "PromotionResponse", "PromotionUpdate",
]
