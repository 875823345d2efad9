"""SQLAlchemy models for user identities."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from hublib.db.session import Base
from hublib.db.time import UTCDateTime, utcnow

ROLE_USER = "user"
ROLE_MODERATOR = "moderator"
ROLE_ADMIN = "admin"
ROLE_SUPER_ADMIN = "super_admin"

USER_ROLES = (ROLE_USER, ROLE_MODERATOR, ROLE_ADMIN, ROLE_SUPER_ADMIN)
ADMIN_ROLES = frozenset({ROLE_ADMIN, ROLE_SUPER_ADMIN})


class User(Base):
    """Profile of a registered user.

    Accounts are provisioned by the identity service; HubLib keeps the
    profile row that ownership, shares and votes point at.
    """

    __tablename__ = "user_profile"
    __table_args__ = (
        CheckConstraint(
            "role IN ('user', 'moderator', 'admin', 'super_admin')",
            name="ck_user_profile_role",
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    full_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=ROLE_USER)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    @property
    def is_admin(self) -> bool:
        """Return True when the user holds an admin-level role."""
        return self.role in ADMIN_ROLES
