"""Shared Pydantic schemas for common API elements."""
from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class APIModel(BaseModel):
    """Base model speaking camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserSummary(APIModel):
    """Public slice of a user embedded in other payloads."""

    id: int
    name: str | None = None
    email: str


class ApiResponse(APIModel, Generic[T]):
    """Success envelope used by the promotion and coupon endpoints."""

    success: bool = True
    data: T | None = None
    error: str | None = None
