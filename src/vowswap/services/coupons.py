"""Coupon eligibility and redemption.

Eligibility is an ordered chain of guards; the first one that fails decides
the outcome and nothing is written. Ineligibility is returned as a result,
not raised.

Redemption never trusts the counters read while evaluating the guards: the
usage counter is bumped with a conditional UPDATE that only matches while the
coupon is still under its cap, and the per-user count is re-read after that
UPDATE has locked the coupon row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import func, or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from vowswap.core.security import Role
from vowswap.db.time import as_utc, utcnow, within_window
from vowswap.models import CouponCode, DiscountType, UsedCoupon, User
from vowswap.services.errors import Forbidden, NotFound, StoreFailure, Unauthenticated

__all__ = [
    "CouponResult",
    "check_eligibility",
    "compute_discount",
    "resolve_coupon_user",
    "validate_coupon",
    "redeem_coupon",
    "validate_and_redeem",
]

logger = logging.getLogger(__name__)

INVALID_CODE = "Invalid coupon code"
NOT_ACTIVE = "Coupon has expired or is not active"
MAX_USES_REACHED = "Coupon has reached maximum usage limit"
PER_USER_LIMIT_REACHED = "You have reached the usage limit for this coupon"
APPLIED = "Coupon applied successfully"

CENT = Decimal("0.01")


@dataclass(frozen=True)
class CouponResult:
    """Verdict of a coupon evaluation."""

    valid: bool
    message: str
    discount: Decimal | None = None
    discount_type: DiscountType | None = None

    @classmethod
    def rejected(cls, message: str) -> CouponResult:
        return cls(valid=False, message=message)


def minimum_purchase_message(minimum: Decimal) -> str:
    return f"Minimum purchase amount of ${minimum} required"


def check_eligibility(
    coupon: CouponCode | None,
    total_amount: Decimal,
    user_redemptions: int,
    now: datetime,
) -> str | None:
    """Run the guards in order and return the first failure message, if any."""
    if coupon is None:
        return INVALID_CODE

    promotion = coupon.promotion
    if not promotion.is_active or not within_window(now, promotion.start_date, promotion.end_date):
        return NOT_ACTIVE

    if coupon.minimum_purchase is not None and total_amount < coupon.minimum_purchase:
        return minimum_purchase_message(coupon.minimum_purchase)

    if coupon.max_uses is not None and coupon.used_count >= coupon.max_uses:
        return MAX_USES_REACHED

    if coupon.per_user_limit is not None and user_redemptions >= coupon.per_user_limit:
        return PER_USER_LIMIT_REACHED

    return None


def compute_discount(
    discount_type: DiscountType,
    discount_value: Decimal,
    total_amount: Decimal,
) -> Decimal:
    """Return the discount in currency units, rounded to cents."""
    if discount_type == DiscountType.PERCENTAGE:
        discount = Decimal(total_amount) * Decimal(discount_value) / 100
    else:
        discount = Decimal(discount_value)
    return discount.quantize(CENT, rounding=ROUND_HALF_UP)


def resolve_coupon_user(db: Session, caller: User | None, user_id: int | None) -> int:
    """Return the id of the user a coupon check is made for.

    Callers act for themselves; only an ADMIN may name another user.
    """
    if caller is None:
        raise Unauthenticated()
    if user_id is None or user_id == caller.id:
        return caller.id
    if caller.role != Role.ADMIN:
        raise Forbidden("Coupons can only be applied for your own account")
    if db.get(User, user_id) is None:
        raise NotFound("User not found")
    return user_id


def _find_coupon(db: Session, code: str) -> CouponCode | None:
    return (
        db.query(CouponCode)
        .options(joinedload(CouponCode.promotion))
        .filter(CouponCode.code == code)
        .first()
    )


def _count_user_redemptions(db: Session, coupon_id: int, user_id: int) -> int:
    return db.query(func.count(UsedCoupon.id)).filter(
        UsedCoupon.coupon_id == coupon_id,
        UsedCoupon.user_id == user_id,
    ).scalar() or 0


def _evaluate(
    db: Session,
    code: str,
    user_id: int,
    total_amount: Decimal,
    now: datetime | None,
) -> tuple[CouponCode | None, CouponResult]:
    coupon = _find_coupon(db, code)
    user_redemptions = 0
    if coupon is not None and coupon.per_user_limit is not None:
        user_redemptions = _count_user_redemptions(db, coupon.id, user_id)

    failure = check_eligibility(coupon, total_amount, user_redemptions, as_utc(now or utcnow()))
    if failure is not None:
        logger.debug("Coupon %r rejected for user %s: %s", code, user_id, failure)
        return coupon, CouponResult.rejected(failure)

    discount = compute_discount(coupon.discount_type, coupon.discount_value, total_amount)
    return coupon, CouponResult(
        valid=True,
        message=APPLIED,
        discount=discount,
        discount_type=coupon.discount_type,
    )


def _record_redemption(
    db: Session,
    coupon: CouponCode,
    user_id: int,
    order_id: str,
) -> str | None:
    """Consume one use of ``coupon`` atomically.

    Returns None on success or the ineligibility message when a concurrent
    redemption got there first; in that case nothing is written.
    """
    coupon_id = coupon.id
    per_user_limit = coupon.per_user_limit
    try:
        claimed = db.execute(
            update(CouponCode)
            .where(
                CouponCode.id == coupon_id,
                or_(CouponCode.max_uses.is_(None), CouponCode.used_count < CouponCode.max_uses),
            )
            .values(used_count=CouponCode.used_count + 1)
            .execution_options(synchronize_session=False)
        )
        if claimed.rowcount == 0:
            db.rollback()
            logger.warning("Coupon %s hit its usage cap during redemption", coupon_id)
            return MAX_USES_REACHED

        if per_user_limit is not None:
            used = _count_user_redemptions(db, coupon_id, user_id)
            if used >= per_user_limit:
                db.rollback()
                logger.warning(
                    "User %s hit the per-user limit of coupon %s during redemption",
                    user_id, coupon_id,
                )
                return PER_USER_LIMIT_REACHED

        db.add(UsedCoupon(coupon_id=coupon_id, user_id=user_id, order_id=order_id))
        db.commit()
    except SQLAlchemyError as err:
        db.rollback()
        logger.error("Redemption of coupon %s rolled back", coupon_id, exc_info=True)
        raise StoreFailure() from err

    db.expire(coupon)
    return None


def validate_coupon(
    db: Session,
    code: str,
    user_id: int,
    total_amount: Decimal,
    *,
    now: datetime | None = None,
) -> CouponResult:
    """Dry run: evaluate the guards and price the discount without recording usage."""
    _, result = _evaluate(db, code, user_id, total_amount, now)
    return result


def redeem_coupon(
    db: Session,
    code: str,
    user_id: int,
    total_amount: Decimal,
    order_id: str,
    *,
    now: datetime | None = None,
) -> CouponResult:
    """Evaluate the guards and, when they pass, consume one use for ``order_id``."""
    coupon, result = _evaluate(db, code, user_id, total_amount, now)
    if not result.valid:
        return result

    failure = _record_redemption(db, coupon, user_id, order_id)
    if failure is not None:
        return CouponResult.rejected(failure)

    logger.info(
        "Coupon %s redeemed by user %s for order %s (discount %s)",
        code, user_id, order_id, result.discount,
    )
    return result


def validate_and_redeem(
    db: Session,
    code: str,
    user_id: int,
    total_amount: Decimal,
    order_id: str | None = None,
    *,
    now: datetime | None = None,
) -> CouponResult:
    """Redeem when ``order_id`` is given, otherwise only validate."""
    if order_id is not None:
        return redeem_coupon(db, code, user_id, total_amount, order_id, now=now)
    return validate_coupon(db, code, user_id, total_amount, now=now)
