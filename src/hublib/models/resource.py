"""SQLAlchemy models for shared resources and their tags."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hublib.db.session import Base
from hublib.db.time import UTCDateTime, utcnow

if TYPE_CHECKING:
    from .comment import Comment
    from .rating import ResourceRating
    from .share import ResourcePermission, ResourceShare

RESOURCE_TYPE_FILE_UPLOAD = "file_upload"
RESOURCE_TYPE_EXTERNAL_LINK = "external_link"
RESOURCE_TYPE_GITHUB_REPO = "github_repo"

VISIBILITY_PUBLIC = "public"
VISIBILITY_PRIVATE = "private"
VISIBILITY_SHARED_USERS = "shared_users"
VISIBILITY_SHARED_GROUPS = "shared_groups"

SHARED_VISIBILITIES = (VISIBILITY_SHARED_USERS, VISIBILITY_SHARED_GROUPS)


class Resource(Base):
    """A file, link or repository published by a user.

    ``average_rating`` and ``ratings_count`` are a cache over the
    ``resource_rating`` rows, recomputed after every rating mutation.
    """

    __tablename__ = "resource"
    __table_args__ = (
        CheckConstraint(
            "resource_type IN ('file_upload', 'external_link', 'github_repo')",
            name="ck_resource_type",
        ),
        CheckConstraint(
            "visibility IN ('public', 'private', 'shared_users', 'shared_groups')",
            name="ck_resource_visibility",
        ),
        Index("ix_resource_owner_id", "owner_id"),
        Index("ix_resource_visibility", "visibility"),
        Index("ix_resource_category", "category"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_profile.id"),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(String(255), nullable=True)
    resource_type: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=RESOURCE_TYPE_EXTERNAL_LINK,
    )
    visibility: Mapped[str] = mapped_column(String(32), nullable=False, default=VISIBILITY_PUBLIC)

    external_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    github_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    language: Mapped[str | None] = mapped_column(String(100), nullable=True)
    license: Mapped[str | None] = mapped_column(String(100), nullable=True)

    views_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downloads_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    ratings_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    tag_rows: Mapped[list[ResourceTag]] = relationship(
        "ResourceTag",
        back_populates="resource",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )
    shares: Mapped[list[ResourceShare]] = relationship(
        "ResourceShare",
        back_populates="resource",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    permissions: Mapped[list[ResourcePermission]] = relationship(
        "ResourcePermission",
        back_populates="resource",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    ratings: Mapped[list[ResourceRating]] = relationship(
        "ResourceRating",
        back_populates="resource",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    comments: Mapped[list[Comment]] = relationship(
        "Comment",
        back_populates="resource",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def tags(self) -> list[str]:
        """Return the resource tags in a stable order."""
        return sorted(row.tag for row in self.tag_rows)

    @tags.setter
    def tags(self, values: Iterable[str]) -> None:
        wanted = set(values)
        # Keep surviving rows so re-adding a tag never collides with its own delete.
        self.tag_rows = [row for row in self.tag_rows if row.tag in wanted]
        present = {row.tag for row in self.tag_rows}
        for tag in sorted(wanted - present):
            self.tag_rows.append(ResourceTag(tag=tag))


class ResourceTag(Base):
    """One tag attached to a resource."""

    __tablename__ = "resource_tag"
    __table_args__ = (
        UniqueConstraint("resource_id", "tag", name="uq_resource_tag_resource_tag"),
        Index("ix_resource_tag_tag", "tag"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    resource_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("resource.id", ondelete="CASCADE"),
        nullable=False,
    )
    tag: Mapped[str] = mapped_column(String(100), nullable=False)

    resource: Mapped[Resource] = relationship("Resource", back_populates="tag_rows")
