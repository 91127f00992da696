"""CRUD-style helpers for seller promotions and their coupon codes."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from vowswap.core.security import PROMOTION_ROLES, Role
from vowswap.core.settings import settings
from vowswap.db.time import as_utc
from vowswap.models import CouponCode, DiscountType, Promotion, PromotionType, User
from vowswap.schemas.promotion import PromotionCreate, PromotionUpdate
from vowswap.services.access import ensure_capability
from vowswap.services.errors import NotFound, StoreFailure, ValidationError

__all__ = [
    "list_promotions",
    "get_promotion",
    "create_promotion",
    "update_promotion",
    "delete_promotion",
]

logger = logging.getLogger(__name__)


def _scoped_query(db: Session, seller: User):
    query = db.query(Promotion)
    if seller.role != Role.ADMIN:
        query = query.filter(Promotion.seller_id == seller.id)
    return query


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ValidationError("Coupon code is already in use") from err
    except SQLAlchemyError as err:
        db.rollback()
        logger.error("Failed to %s", what, exc_info=True)
        raise StoreFailure() from err


def _code_taken(db: Session, code: str, exclude_id: int | None = None) -> bool:
    query = db.query(CouponCode.id).filter(CouponCode.code == code)
    if exclude_id is not None:
        query = query.filter(CouponCode.id != exclude_id)
    return query.first() is not None


def list_promotions(
    db: Session,
    seller: User | None,
    page: int = 1,
    limit: int = 10,
    promotion_type: PromotionType | None = None,
    is_active: bool | None = None,
) -> dict[str, Any]:
    """Return one page of the caller's promotions, newest first."""
    seller = ensure_capability(seller, PROMOTION_ROLES)
    page = max(page, 1)
    limit = min(max(limit, 1), settings.promotions_page_size_max)

    query = _scoped_query(db, seller)
    if promotion_type is not None:
        query = query.filter(Promotion.type == promotion_type)
    if is_active is not None:
        query = query.filter(Promotion.is_active == is_active)

    total = query.with_entities(func.count(Promotion.id)).scalar() or 0
    promotions = (
        query.options(selectinload(Promotion.coupon_code))
        .order_by(Promotion.created_at.desc(), Promotion.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"promotions": promotions, "total": total, "page": page, "limit": limit}


def get_promotion(db: Session, seller: User | None, promotion_id: int) -> Promotion:
    """Return a promotion visible to ``seller`` or raise NotFound."""
    seller = ensure_capability(seller, PROMOTION_ROLES)
    promotion = (
        _scoped_query(db, seller)
        .options(selectinload(Promotion.coupon_code))
        .filter(Promotion.id == promotion_id)
        .first()
    )
    if promotion is None:
        raise NotFound("Promotion not found")
    return promotion


def create_promotion(db: Session, seller: User | None, payload: PromotionCreate) -> Promotion:
    """Persist a new active promotion, with its coupon when one is supplied."""
    seller = ensure_capability(seller, PROMOTION_ROLES)
    if as_utc(payload.end_date) < as_utc(payload.start_date):
        raise ValidationError("endDate must not be before startDate")

    promotion = Promotion(
        seller_id=seller.id,
        name=payload.name,
        description=payload.description,
        type=payload.type,
        start_date=as_utc(payload.start_date),
        end_date=as_utc(payload.end_date),
        is_active=True,
    )
    if payload.coupon_code is not None:
        if _code_taken(db, payload.coupon_code.code):
            raise ValidationError("Coupon code is already in use")
        promotion.coupon_code = CouponCode(**payload.coupon_code.model_dump(), used_count=0)

    db.add(promotion)
    _commit(db, "create promotion")
    db.refresh(promotion)
    logger.info("Promotion %s created by seller %s", promotion.id, seller.id)
    return promotion


def update_promotion(db: Session, seller: User | None, payload: PromotionUpdate) -> Promotion:
    """Apply a partial update to a promotion and its coupon terms."""
    promotion = get_promotion(db, seller, payload.id)
    changes = payload.model_dump(exclude_unset=True, exclude={"id", "coupon_code"})

    for key in ("start_date", "end_date"):
        if changes.get(key) is not None:
            changes[key] = as_utc(changes[key])
    start = changes.get("start_date") or as_utc(promotion.start_date)
    end = changes.get("end_date") or as_utc(promotion.end_date)
    if end < start:
        raise ValidationError("endDate must not be before startDate")

    coupon = promotion.coupon_code
    coupon_changes: dict[str, Any] = {}
    if payload.coupon_code is not None:
        if coupon is None:
            raise ValidationError("Promotion has no coupon code")
        coupon_changes = payload.coupon_code.model_dump(exclude_unset=True)
        max_uses = coupon_changes.get("max_uses", coupon.max_uses)
        if max_uses is not None and max_uses < coupon.used_count:
            raise ValidationError("maxUses cannot be lower than the coupon's current usage")
        discount_type = coupon_changes.get("discount_type") or coupon.discount_type
        discount_value = coupon_changes.get("discount_value")
        if discount_value is None:
            discount_value = coupon.discount_value
        if discount_type == DiscountType.PERCENTAGE and discount_value > 100:
            raise ValidationError("Percentage discounts cannot exceed 100")
        new_code = coupon_changes.get("code")
        if new_code and _code_taken(db, new_code, exclude_id=coupon.id):
            raise ValidationError("Coupon code is already in use")

    for key, value in changes.items():
        if value is None and key in ("name", "type", "start_date", "end_date", "is_active"):
            continue
        setattr(promotion, key, value)

    if coupon is not None:
        for key, value in coupon_changes.items():
            if value is None and key in ("code", "discount_type", "discount_value"):
                continue
            setattr(coupon, key, value)

    _commit(db, f"update promotion {promotion.id}")
    db.refresh(promotion)
    logger.info("Promotion %s updated", promotion.id)
    return promotion


def delete_promotion(db: Session, seller: User | None, promotion_id: int) -> int:
    """Delete a promotion whose coupon has never been redeemed."""
    promotion = get_promotion(db, seller, promotion_id)
    coupon = promotion.coupon_code
    if coupon is not None and coupon.used_count > 0:
        raise ValidationError(
            "Promotion has redeemed coupons and cannot be deleted; deactivate it instead"
        )

    db.delete(promotion)
    _commit(db, f"delete promotion {promotion_id}")
    logger.info("Promotion %s deleted", promotion_id)
    return promotion_id
