"""Per-user ratings of resources."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, SmallInteger, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hublib.db.session import Base
from hublib.db.time import UTCDateTime, utcnow

if TYPE_CHECKING:
    from .resource import Resource

RATING_MIN = 1
RATING_MAX = 5


class ResourceRating(Base):
    """One user's 1-5 rating of a resource; the source of truth for averages."""

    __tablename__ = "resource_rating"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_resource_rating_range"),
        # One rating per user and resource.
        UniqueConstraint("resource_id", "user_id", name="uq_resource_rating_resource_user"),
        Index("ix_resource_rating_resource_id", "resource_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    resource_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("resource.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_profile.id", ondelete="CASCADE"),
        nullable=False,
    )
    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    resource: Mapped[Resource] = relationship("Resource", back_populates="ratings")
