# src/hublib/services/votes.py
"""Vote ledger for suggestions.

Each (suggestion, user) pair holds at most one vote, guaranteed by a unique
constraint. Casting the same vote twice retracts it; casting the opposite
vote switches it in place. Every mutation recomputes ``votes_count`` and runs
auto-moderation inside the same transaction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hublib.core.errors import ConflictError, InvalidInputError, NotFoundError
from hublib.core.settings import settings
from hublib.models import Suggestion, SuggestionVote
from hublib.models.vote import VOTE_DOWNVOTE, VOTE_UPVOTE
from hublib.services.cache import CacheInvalidator, invalidate_suggestion
from hublib.services.moderation import ModerationConfig, ModerationService

logger = logging.getLogger(__name__)

VOTE_ADDED = "added"
VOTE_REMOVED = "removed"
VOTE_CHANGED = "changed"


@dataclass(frozen=True)
class VoteTally:
    """Aggregates of a suggestion seen from one voter."""

    total_upvotes: int
    total_downvotes: int
    user_vote: str | None


@dataclass(frozen=True)
class VoteOutcome:
    """Result of a ledger mutation."""

    action: str
    suggestion: Suggestion
    tally: VoteTally
    status_changed: bool


def _lock_suggestion_or_404(db: Session, suggestion_id: int) -> Suggestion:
    suggestion = db.scalars(
        select(Suggestion).where(Suggestion.id == suggestion_id).with_for_update()
    ).first()
    if suggestion is None:
        raise NotFoundError("Suggestion not found", code="SUGGESTION_NOT_FOUND")
    return suggestion


def _find_vote(db: Session, suggestion_id: int, user_id: int) -> SuggestionVote | None:
    return db.scalars(
        select(SuggestionVote).where(
            SuggestionVote.suggestion_id == suggestion_id,
            SuggestionVote.user_id == user_id,
        )
    ).first()


def count_votes(db: Session, suggestion_id: int) -> tuple[int, int]:
    """Return ``(upvotes, downvotes)`` counted from the vote rows."""
    row = db.execute(
        select(
            func.coalesce(func.sum(case((SuggestionVote.vote_type == VOTE_UPVOTE, 1), else_=0)), 0),
            func.coalesce(
                func.sum(case((SuggestionVote.vote_type == VOTE_DOWNVOTE, 1), else_=0)),
                0,
            ),
        ).where(SuggestionVote.suggestion_id == suggestion_id)
    ).one()
    return int(row[0]), int(row[1])


def recompute_votes_count(db: Session, suggestion: Suggestion) -> tuple[int, int]:
    """Set ``votes_count`` to upvotes minus downvotes and return both counts.

    This is the only place the denormalized score is written.
    """
    db.flush()
    upvotes, downvotes = count_votes(db, suggestion.id)
    suggestion.votes_count = upvotes - downvotes
    return upvotes, downvotes


def get_user_vote(db: Session, suggestion_id: int, user_id: int) -> str | None:
    """Return the caller's current vote type, if any."""
    return db.scalars(
        select(SuggestionVote.vote_type).where(
            SuggestionVote.suggestion_id == suggestion_id,
            SuggestionVote.user_id == user_id,
        )
    ).first()


def tally_votes(db: Session, suggestion_id: int, user_id: int | None = None) -> VoteTally:
    """Return current aggregates, including ``user_id``'s vote when given."""
    upvotes, downvotes = count_votes(db, suggestion_id)
    user_vote = get_user_vote(db, suggestion_id, user_id) if user_id is not None else None
    return VoteTally(total_upvotes=upvotes, total_downvotes=downvotes, user_vote=user_vote)


def _apply_vote(db: Session, suggestion_id: int, user_id: int, vote_type: str) -> str:
    existing = _find_vote(db, suggestion_id, user_id)
    if existing is None:
        db.add(SuggestionVote(suggestion_id=suggestion_id, user_id=user_id, vote_type=vote_type))
        return VOTE_ADDED
    if existing.vote_type == vote_type:
        db.delete(existing)
        return VOTE_REMOVED
    existing.vote_type = vote_type
    return VOTE_CHANGED


def cast_vote(
    db: Session,
    *,
    suggestion_id: int,
    user_id: int,
    vote_type: str,
    config: ModerationConfig,
    cache: CacheInvalidator | None = None,
    max_attempts: int | None = None,
) -> VoteOutcome:
    """Record, switch or retract a vote and re-run auto-moderation.

    A unique-constraint violation means a concurrent request by the same
    user won the race; the transaction is rolled back and replayed from a
    fresh read.

    Raises:
        InvalidInputError: If ``vote_type`` is not upvote or downvote.
        NotFoundError: If the suggestion does not exist.
        ConflictError: If the race persists after ``max_attempts`` tries.
    """
    if vote_type not in (VOTE_UPVOTE, VOTE_DOWNVOTE):
        raise InvalidInputError("vote_type must be upvote or downvote", field="vote_type")

    attempts = max_attempts or settings.vote_max_attempts
    for attempt in range(1, attempts + 1):
        try:
            suggestion = _lock_suggestion_or_404(db, suggestion_id)
            action = _apply_vote(db, suggestion_id, user_id, vote_type)
            upvotes, downvotes = recompute_votes_count(db, suggestion)
            changed = ModerationService.evaluate_suggestion(
                suggestion,
                upvotes=upvotes,
                downvotes=downvotes,
                config=config,
            )
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(
                "Vote conflict on suggestion %s by user %s (attempt %d/%d)",
                suggestion_id,
                user_id,
                attempt,
                attempts,
            )
            continue

        db.refresh(suggestion)
        if cache is not None:
            invalidate_suggestion(cache, suggestion_id)
        user_vote = None if action == VOTE_REMOVED else vote_type
        return VoteOutcome(
            action=action,
            suggestion=suggestion,
            tally=VoteTally(
                total_upvotes=upvotes,
                total_downvotes=downvotes,
                user_vote=user_vote,
            ),
            status_changed=changed,
        )

    raise ConflictError(
        "Vote could not be recorded because of concurrent updates; retry",
        code="VOTE_CONFLICT",
    )


def remove_vote(
    db: Session,
    *,
    suggestion_id: int,
    user_id: int,
    config: ModerationConfig,
    cache: CacheInvalidator | None = None,
) -> VoteOutcome:
    """Retract the caller's vote.

    Raises:
        NotFoundError: If the suggestion or the caller's vote does not exist.
    """
    suggestion = _lock_suggestion_or_404(db, suggestion_id)
    existing = _find_vote(db, suggestion_id, user_id)
    if existing is None:
        db.rollback()
        raise NotFoundError("You have not voted on this suggestion", code="VOTE_NOT_FOUND")

    db.delete(existing)
    upvotes, downvotes = recompute_votes_count(db, suggestion)
    changed = ModerationService.evaluate_suggestion(
        suggestion,
        upvotes=upvotes,
        downvotes=downvotes,
        config=config,
    )
    db.commit()
    db.refresh(suggestion)
    if cache is not None:
        invalidate_suggestion(cache, suggestion_id)
    return VoteOutcome(
        action=VOTE_REMOVED,
        suggestion=suggestion,
        tally=VoteTally(total_upvotes=upvotes, total_downvotes=downvotes, user_vote=None),
        status_changed=changed,
    )
