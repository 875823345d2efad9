"""Models for community taxonomy suggestions."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
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

from .vote import SuggestionVote

SUGGESTION_TYPE_CATEGORY = "category"
SUGGESTION_TYPE_TAG = "tag"
SUGGESTION_TYPE_RESOURCE_TYPE = "resource_type"
SUGGESTION_TYPE_FILTER = "filter"

SUGGESTION_TYPES = (
    SUGGESTION_TYPE_CATEGORY,
    SUGGESTION_TYPE_TAG,
    SUGGESTION_TYPE_RESOURCE_TYPE,
    SUGGESTION_TYPE_FILTER,
)

SUGGESTION_STATUS_PENDING = "pending"
SUGGESTION_STATUS_APPROVED = "approved"
SUGGESTION_STATUS_REJECTED = "rejected"

TERMINAL_STATUSES = frozenset({SUGGESTION_STATUS_APPROVED, SUGGESTION_STATUS_REJECTED})


class Suggestion(Base):
    """State machine for a proposed category, tag, resource type or filter.

    ``pending`` moves to ``approved`` or ``rejected`` through automation or
    an admin; only an admin moves a suggestion back to ``pending``.
    ``reviewed_by`` stays NULL for system decisions.
    """

    __tablename__ = "suggestion"
    __table_args__ = (
        CheckConstraint(
            "type IN ('category', 'tag', 'resource_type', 'filter')",
            name="ck_suggestion_type",
        ),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_suggestion_status",
        ),
        UniqueConstraint("name", "type", name="uq_suggestion_name_type"),
        Index("ix_suggestion_status", "status"),
        Index("ix_suggestion_votes_count", "votes_count"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=SUGGESTION_STATUS_PENDING,
    )
    suggested_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_profile.id", ondelete="SET NULL"),
        nullable=True,
    )
    # Net score: upvotes minus downvotes, recomputed by the vote ledger.
    votes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reviewed_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    reviewed_by: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("user_profile.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    votes: Mapped[list[SuggestionVote]] = relationship(
        SuggestionVote,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
