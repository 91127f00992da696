"""Role-based authorization shared by the services."""

from __future__ import annotations

from vowswap.core.security import Role, has_capability
from vowswap.models import User
from vowswap.services.errors import Forbidden, Unauthenticated


def ensure_capability(actor: User | None, allowed: frozenset[Role]) -> User:
    """Return ``actor`` if its role is in ``allowed``.

    Raises:
        Unauthenticated: If there is no actor.
        Forbidden: If the actor's role is not allowed.
    """
    if actor is None:
        raise Unauthenticated()
    if not has_capability(actor.role, allowed):
        raise Forbidden("Unauthorized")
    return actor
