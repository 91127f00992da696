"""Seller-facing promotion management endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from vowswap.api.v1.dependencies import SellerDep, SessionDep
from vowswap.models import PromotionType
from vowswap.schemas.common import ApiResponse
from vowswap.schemas.promotion import (
    DeletedPromotion,
    PromotionCreate,
    PromotionDelete,
    PromotionList,
    PromotionResponse,
    PromotionUpdate,
)
from vowswap.services import promotions

router = APIRouter(prefix="/seller/promotions", tags=["seller-promotions"])


@router.get("", response_model=ApiResponse[PromotionList])
async def list_promotions(
    seller: SellerDep,
    db: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    promotion_type: PromotionType | None = Query(None, alias="type"),
    is_active: bool | None = Query(None, alias="isActive"),
) -> ApiResponse[PromotionList]:
    """Page through the caller's promotions, newest first."""
    listing = promotions.list_promotions(
        db,
        seller,
        page=page,
        limit=limit,
        promotion_type=promotion_type,
        is_active=is_active,
    )
    return ApiResponse[PromotionList](data=PromotionList.model_validate(listing))


@router.post("", response_model=ApiResponse[PromotionResponse])
async def create_promotion(
    payload: PromotionCreate,
    seller: SellerDep,
    db: SessionDep,
) -> ApiResponse[PromotionResponse]:
    promotion = promotions.create_promotion(db, seller, payload)
    return ApiResponse[PromotionResponse](data=PromotionResponse.model_validate(promotion))


@router.patch("", response_model=ApiResponse[PromotionResponse])
async def update_promotion(
    payload: PromotionUpdate,
    seller: SellerDep,
    db: SessionDep,
) -> ApiResponse[PromotionResponse]:
    promotion = promotions.update_promotion(db, seller, payload)
    return ApiResponse[PromotionResponse](data=PromotionResponse.model_validate(promotion))


@router.delete("", response_model=ApiResponse[DeletedPromotion])
async def delete_promotion(
    payload: PromotionDelete,
    seller: SellerDep,
    db: SessionDep,
) -> ApiResponse[DeletedPromotion]:
    """Delete a never-redeemed promotion; the id travels in the request body."""
    deleted_id = promotions.delete_promotion(db, seller, payload.id)
    return ApiResponse[DeletedPromotion](data=DeletedPromotion(id=deleted_id))
