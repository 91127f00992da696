"""Promotion and coupon Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import Field, model_validator

from vowswap.models.promotion import DiscountType, PromotionType
from vowswap.schemas.common import APIModel


class CouponCodeCreate(APIModel):
    """Coupon terms supplied when a promotion is created."""

    code: str = Field(..., min_length=1, max_length=64)
    discount_type: DiscountType
    discount_value: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    minimum_purchase: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    max_uses: int | None = Field(None, ge=1)
    per_user_limit: int | None = Field(None, ge=1)

    @model_validator(mode="after")
    def _percentage_within_bounds(self) -> CouponCodeCreate:
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("Percentage discounts cannot exceed 100")
        return self


class CouponCodeUpdate(APIModel):
    """Partial update of coupon terms; the usage counter is not writable."""

    code: str | None = Field(None, min_length=1, max_length=64)
    discount_type: DiscountType | None = None
    discount_value: Decimal | None = Field(None, gt=0, max_digits=10, decimal_places=2)
    minimum_purchase: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    max_uses: int | None = Field(None, ge=1)
    per_user_limit: int | None = Field(None, ge=1)


class CouponCodeResponse(APIModel):
    """Coupon as shown to its seller."""

    id: int
    promotion_id: int
    code: str
    discount_type: DiscountType
    discount_value: float
    minimum_purchase: float | None = None
    max_uses: int | None = None
    used_count: int
    per_user_limit: int | None = None


class PromotionCreate(APIModel):
    """Schema for creating a promotion, optionally with its coupon."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    type: PromotionType
    start_date: datetime
    end_date: datetime
    coupon_code: CouponCodeCreate | None = None


class PromotionUpdate(APIModel):
    """Partial update of a promotion identified by ``id``."""

    id: int
    name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=5000)
    type: PromotionType | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    is_active: bool | None = None
    coupon_code: CouponCodeUpdate | None = None


class PromotionDelete(APIModel):
    """Identifies the promotion to delete."""

    id: int


class PromotionResponse(APIModel):
    """Promotion with its coupon terms."""

    id: int
    seller_id: int
    name: str
    description: str | None = None
    type: PromotionType
    start_date: datetime
    end_date: datetime
    is_active: bool
    created_at: datetime
    updated_at: datetime
    coupon_code: CouponCodeResponse | None = None


class PromotionList(APIModel):
    """One page of a seller's promotions."""

    promotions: list[PromotionResponse]
    total: int
    page: int
    limit: int


class DeletedPromotion(APIModel):
    """Acknowledges a deletion."""

    id: int


class CouponValidateRequest(APIModel):
    """Coupon check against a cart total; redeems when ``order_id`` is present."""

    code: str = Field(..., min_length=1, max_length=64)
    user_id: int | None = None
    order_id: str | None = Field(None, min_length=1, max_length=64)
    total_amount: Decimal = Field(..., ge=0)


class CouponRedeemRequest(CouponValidateRequest):
    """Coupon redemption at checkout; ``order_id`` is mandatory."""

    order_id: str = Field(..., min_length=1, max_length=64)


class CouponResultData(APIModel):
    """Eligibility verdict; ``valid`` false is a normal outcome, not an error."""

    valid: bool
    discount: float | None = None
    discount_type: DiscountType | None = None
    message: str | None = None
