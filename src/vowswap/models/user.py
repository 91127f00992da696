"""SQLAlchemy model for marketplace accounts."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from vowswap.core.security import Role
from vowswap.db.session import Base
from vowswap.db.time import utcnow


class UserStatus(str, Enum):
    """Account standing; SUSPENDED accounts are locked out of the API."""

    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"


class User(Base):
    """Account mirrored from the identity provider.

    The provider owns credentials; this table only carries what moderation
    and promotions need: the role claim and the account status.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    role: Mapped[Role] = mapped_column(
        SAEnum(Role, name="user_role"),
        nullable=False,
        default=Role.CUSTOMER,
    )
    status: Mapped[UserStatus] = mapped_column(
        SAEnum(UserStatus, name="user_status"),
        nullable=False,
        default=UserStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    @property
    def is_suspended(self) -> bool:
        """Return True when the account has been suspended by a moderator."""
        return self.status == UserStatus.SUSPENDED
