# tests/v1/test_dependencies.py
"""Tests for API dependencies module."""

import pytest
from fastapi import HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from vowswap.api.v1.dependencies import get_current_user, require_roles
from vowswap.core.security import MODERATION_ROLES, PROMOTION_ROLES, create_access_token
from vowswap.models import UserStatus
from vowswap.services.errors import Forbidden


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestGetCurrentUser:
    """Test the get_current_user dependency function."""

    def test_get_current_user_success(self, db_session, customer_user):
        token = create_access_token(customer_user.id)

        user = get_current_user(_credentials(token), db_session)

        assert user.id == customer_user.id

    def test_missing_credentials(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(None, db_session)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_invalid_token(self, db_session):
        with pytest.raises(HTTPException) as exc_info:
            get_current_user(_credentials("invalid.token.here"), db_session)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED
        assert "Could not validate credentials" in exc_info.value.detail

    def test_unknown_user(self, db_session):
        token = create_access_token(123456)

        with pytest.raises(HTTPException) as exc_info:
            get_current_user(_credentials(token), db_session)

        assert exc_info.value.status_code == status.HTTP_401_UNAUTHORIZED

    def test_suspended_user(self, db_session, customer_user):
        customer_user.status = UserStatus.SUSPENDED
        db_session.commit()
        token = create_access_token(customer_user.id)

        with pytest.raises(HTTPException) as exc_info:
            get_current_user(_credentials(token), db_session)

        assert exc_info.value.status_code == status.HTTP_403_FORBIDDEN


class TestRequireRoles:
    """Test the role-gating dependency factory."""

    def test_allowed_roles_pass(self, moderator_user, admin_user):
        dependency = require_roles(MODERATION_ROLES)

        assert dependency(moderator_user) is moderator_user
        assert dependency(admin_user) is admin_user

    def test_other_roles_are_forbidden(self, moderator_user, customer_user):
        dependency = require_roles(PROMOTION_ROLES)

        for user in (moderator_user, customer_user):
            with pytest.raises(Forbidden):
                dependency(user)
