"""Version 1 API endpoints."""

from .endpoints import (
    moderation_router,
    promotions_router,
    seller_promotions_router,
)

__all__ = [
    "moderation_router",
    "promotions_router",
    "seller_promotions_router",
]
