"""Roles, capability sets and bearer-token helpers.

Authentication itself belongs to the external identity provider; this module
only knows how to read (and, for tooling and tests, mint) the HS256 tokens it
issues, and how to check a role against a capability set.
"""
from __future__ import annotations

from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any

from jose import JWTError, jwt

from vowswap.core.settings import settings


class Role(str, Enum):
    """Role claim carried by every authenticated user."""

    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"
    SELLER = "SELLER"
    CUSTOMER = "CUSTOMER"


MODERATION_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.MODERATOR})
PROMOTION_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.SELLER})


def has_capability(role: Role | str | None, allowed: frozenset[Role]) -> bool:
    """Return True when ``role`` is one of the ``allowed`` roles."""
    if role is None:
        return False
    try:
        return Role(role) in allowed
    except ValueError:
        return False


def create_access_token(subject: int | str, extra_claims: dict[str, Any] | None = None) -> str:
    """Create a JWT access token for ``subject`` (a user id)."""
    to_encode: dict[str, Any] = {"sub": str(subject)}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_subject(token: str) -> int | None:
    """Return the user id carried by ``token`` or None when it cannot be trusted."""
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None
