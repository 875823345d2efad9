"""Models granting non-owners access to a resource."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hublib.db.session import Base
from hublib.db.time import UTCDateTime, utcnow

if TYPE_CHECKING:
    from .resource import Resource

SHARE_PERMISSION_READ = "read"
SHARE_PERMISSION_WRITE = "write"


class ResourceShare(Base):
    """Coarse read/write grant to one user or one group.

    Exactly one target is set at creation. Target foreign keys use
    ``SET NULL`` so removing a user or group leaves an inert row behind.
    """

    __tablename__ = "resource_share"
    __table_args__ = (
        CheckConstraint("permission IN ('read', 'write')", name="ck_resource_share_permission"),
        UniqueConstraint(
            "resource_id",
            "shared_with_user_id",
            name="uq_resource_share_resource_user",
        ),
        UniqueConstraint(
            "resource_id",
            "shared_with_group_id",
            name="uq_resource_share_resource_group",
        ),
        Index("ix_resource_share_resource_id", "resource_id"),
        Index("ix_resource_share_user_id", "shared_with_user_id"),
        Index("ix_resource_share_group_id", "shared_with_group_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    resource_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("resource.id", ondelete="CASCADE"),
        nullable=False,
    )
    shared_with_user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_profile.id", ondelete="SET NULL"),
        nullable=True,
    )
    shared_with_group_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_group.id", ondelete="SET NULL"),
        nullable=True,
    )
    permission: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=SHARE_PERMISSION_READ,
    )
    # NULL means the grant never lapses.
    expires_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    resource: Mapped[Resource] = relationship("Resource", back_populates="shares")


class ResourcePermission(Base):
    """Free-text labelled grant scoped to a user or a group."""

    __tablename__ = "resource_permission"
    __table_args__ = (
        Index("ix_resource_permission_resource_id", "resource_id"),
        Index("ix_resource_permission_user_id", "user_id"),
        Index("ix_resource_permission_group_id", "group_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    resource_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("resource.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_profile.id", ondelete="SET NULL"),
        nullable=True,
    )
    group_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_group.id", ondelete="SET NULL"),
        nullable=True,
    )
    permission: Mapped[str] = mapped_column(String(100), nullable=False)
    expires_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

    resource: Mapped[Resource] = relationship("Resource", back_populates="permissions")
