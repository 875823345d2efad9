# src/hublib/models/vote.py
"""Models capturing voting interactions on suggestions."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from hublib.db.session import Base
from hublib.db.time import UTCDateTime, utcnow

VOTE_UPVOTE = "upvote"
VOTE_DOWNVOTE = "downvote"


class SuggestionVote(Base):
    """Per-user vote on a suggestion.

    The unique constraint on (suggestion_id, user_id) is what serializes
    concurrent votes by the same user; the ledger retries on violation.
    """

    __tablename__ = "suggestion_vote"
    __table_args__ = (
        CheckConstraint("vote_type IN ('upvote', 'downvote')", name="ck_suggestion_vote_type"),
        UniqueConstraint("suggestion_id", "user_id", name="uq_suggestion_vote_suggestion_user"),
        Index("ix_suggestion_vote_suggestion_id", "suggestion_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    suggestion_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("suggestion.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("user_profile.id", ondelete="CASCADE"),
        nullable=False,
    )
    vote_type: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
