"""Comments left on resources."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hublib.db.session import Base
from hublib.db.time import UTCDateTime, utcnow

if TYPE_CHECKING:
    from .resource import Resource


class Comment(Base):
    """Plain-text comment attached to a resource."""

    __tablename__ = "resource_comment"
    __table_args__ = (Index("ix_resource_comment_resource_id", "resource_id"),)

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
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    # NULL until the comment is first edited.
    updated_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    resource: Mapped[Resource] = relationship("Resource", back_populates="comments")
