"""API endpoint modules for version 1."""

from .moderation import router as moderation_router
from .promotions import router as promotions_router
from .seller_promotions import router as seller_promotions_router

__all__ = [
    "moderation_router",
    "promotions_router",
    "seller_promotions_router",
]
