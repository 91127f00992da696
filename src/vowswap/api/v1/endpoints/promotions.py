"""Coupon validation and redemption endpoints for shoppers."""

from __future__ import annotations

from fastapi import APIRouter

from vowswap.api.v1.dependencies import CurrentUserDep, SessionDep
from vowswap.schemas.common import ApiResponse
from vowswap.schemas.promotion import (
    CouponRedeemRequest,
    CouponResultData,
    CouponValidateRequest,
)
from vowswap.services import coupons
from vowswap.services.coupons import CouponResult

router = APIRouter(prefix="/promotions", tags=["promotions"])


def _envelope(result: CouponResult) -> ApiResponse[CouponResultData]:
    data = CouponResultData(
        valid=result.valid,
        discount=result.discount,
        discount_type=result.discount_type,
        message=result.message,
    )
    return ApiResponse[CouponResultData](success=True, data=data)


@router.post("/validate-coupon", response_model=ApiResponse[CouponResultData])
async def validate_coupon(
    payload: CouponValidateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ApiResponse[CouponResultData]:
    """Check a coupon against a cart total, redeeming it when ``orderId`` is present.

    Ineligible coupons still answer 200 with ``valid: false``.
    """
    user_id = coupons.resolve_coupon_user(db, current_user, payload.user_id)
    result = coupons.validate_and_redeem(
        db,
        payload.code,
        user_id,
        payload.total_amount,
        payload.order_id,
    )
    return _envelope(result)


@router.post("/coupons/validate", response_model=ApiResponse[CouponResultData])
async def dry_run_coupon(
    payload: CouponValidateRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ApiResponse[CouponResultData]:
    """Price a coupon without consuming it; any ``orderId`` is ignored."""
    user_id = coupons.resolve_coupon_user(db, current_user, payload.user_id)
    result = coupons.validate_coupon(db, payload.code, user_id, payload.total_amount)
    return _envelope(result)


@router.post("/coupons/redeem", response_model=ApiResponse[CouponResultData])
async def redeem_coupon(
    payload: CouponRedeemRequest,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> ApiResponse[CouponResultData]:
    """Consume one use of a coupon for an order at checkout."""
    user_id = coupons.resolve_coupon_user(db, current_user, payload.user_id)
    result = coupons.redeem_coupon(
        db,
        payload.code,
        user_id,
        payload.total_amount,
        payload.order_id,
    )
    return _envelope(result)
