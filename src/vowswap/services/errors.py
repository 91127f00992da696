"""Exceptions raised by the moderation, coupon and promotion services.

Each exception carries the HTTP status the API layer answers with, so the
services stay free of any web framework imports.
"""

from __future__ import annotations


class VowSwapError(RuntimeError):
    """Base exception for service-level failures."""

    status_code: int = 500
    default_detail: str = "Internal Server Error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(VowSwapError):
    """Raised when an operation needs an identity and none was supplied."""

    status_code = 401
    default_detail = "Unauthorized"


class Forbidden(VowSwapError):
    """Raised when the caller's role is outside the required capability set."""

    status_code = 403
    default_detail = "Forbidden"


class NotFound(VowSwapError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    default_detail = "Not found"


class ValidationError(VowSwapError):
    """Raised for malformed or inconsistent input detected by a service."""

    status_code = 400
    default_detail = "Invalid request"


class StoreFailure(VowSwapError):
    """Raised when a transaction fails; all of its writes have been rolled back.

    The detail is always generic so store internals never reach clients.
    """

    status_code = 500
    default_detail = "Internal Server Error"
