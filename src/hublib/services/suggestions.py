"""Suggestion lifecycle outside of voting."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hublib.core.errors import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from hublib.models import Suggestion, SuggestionVote, User
from hublib.services.cache import CacheInvalidator, invalidate_suggestion
from hublib.services.moderation import ModerationConfig, ModerationService
from hublib.services.votes import recompute_votes_count

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "votes_count": Suggestion.votes_count,
    "created_at": Suggestion.created_at,
}


@dataclass(frozen=True)
class SuggestionPage:
    """One page of suggestions and the total behind it."""

    items: list[Suggestion]
    total: int
    page: int
    limit: int


def get_suggestion_or_404(db: Session, suggestion_id: int) -> Suggestion:
    """Load a suggestion or raise :class:`NotFoundError`."""
    suggestion = db.get(Suggestion, suggestion_id)
    if suggestion is None:
        raise NotFoundError("Suggestion not found", code="SUGGESTION_NOT_FOUND")
    return suggestion


def create_suggestion(
    db: Session,
    *,
    author: User,
    name: str,
    suggestion_type: str,
    description: str | None,
    cache: CacheInvalidator,
) -> Suggestion:
    """Propose a taxonomy item.

    Only an admin reset moves a reviewed suggestion back to pending, so a
    name and type that already exist in any status are refused.

    Raises:
        ConflictError: If a suggestion with this name and type exists.
    """
    existing = db.scalars(
        select(Suggestion).where(Suggestion.name == name, Suggestion.type == suggestion_type)
    ).first()
    if existing is not None:
        raise ConflictError(
            f"A {existing.status} suggestion with this name already exists",
            code="SUGGESTION_EXISTS",
        )

    suggestion = Suggestion(
        name=name,
        type=suggestion_type,
        description=description,
        suggested_by=author.id,
    )
    db.add(suggestion)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError(
            "A suggestion with this name already exists",
            code="SUGGESTION_EXISTS",
        ) from err
    db.refresh(suggestion)
    logger.info("Suggestion %s proposed by user %s", suggestion.id, author.id)
    invalidate_suggestion(cache, suggestion.id)
    return suggestion


def list_suggestions(
    db: Session,
    *,
    suggestion_type: str | None = None,
    status: str | None = None,
    sort_by: str = "votes_count",
    sort_order: str = "desc",
    page: int = 1,
    limit: int = 20,
) -> SuggestionPage:
    """Return a filtered, sorted page of suggestions."""
    if sort_by not in SORT_COLUMNS:
        raise InvalidInputError(f"Cannot sort by {sort_by!r}", field="sort_by")
    if sort_order not in ("asc", "desc"):
        raise InvalidInputError("sort_order must be asc or desc", field="sort_order")

    clauses = []
    if suggestion_type:
        clauses.append(Suggestion.type == suggestion_type)
    if status:
        clauses.append(Suggestion.status == status)

    total = db.scalar(select(func.count(Suggestion.id)).where(*clauses)) or 0
    column = SORT_COLUMNS[sort_by]
    ordering = column.asc() if sort_order == "asc" else column.desc()
    stmt = (
        select(Suggestion)
        .where(*clauses)
        .order_by(ordering, Suggestion.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
    )
    return SuggestionPage(items=list(db.scalars(stmt)), total=int(total), page=page, limit=limit)


def user_votes_for(db: Session, user_id: int, suggestion_ids: list[int]) -> dict[int, str]:
    """Map suggestion id to ``user_id``'s vote for the given suggestions."""
    if not suggestion_ids:
        return {}
    rows = db.execute(
        select(SuggestionVote.suggestion_id, SuggestionVote.vote_type).where(
            SuggestionVote.user_id == user_id,
            SuggestionVote.suggestion_id.in_(suggestion_ids),
        )
    ).all()
    return {suggestion_id: vote_type for suggestion_id, vote_type in rows}


def delete_suggestion(
    db: Session,
    *,
    suggestion_id: int,
    requester: User,
    cache: CacheInvalidator,
) -> None:
    """Delete a suggestion and its votes; author or admin only."""
    suggestion = get_suggestion_or_404(db, suggestion_id)
    if suggestion.suggested_by != requester.id and not requester.is_admin:
        raise ForbiddenError("Only the author or an administrator can delete this suggestion")
    db.delete(suggestion)
    db.commit()
    logger.info("Suggestion %s deleted by user %s", suggestion_id, requester.id)
    invalidate_suggestion(cache, suggestion_id)


def reevaluate_suggestion(
    db: Session,
    *,
    suggestion_id: int,
    config: ModerationConfig,
    cache: CacheInvalidator,
) -> tuple[Suggestion, bool]:
    """Recompute the score and re-run auto-moderation with ``config``."""
    suggestion = db.scalars(
        select(Suggestion).where(Suggestion.id == suggestion_id).with_for_update()
    ).first()
    if suggestion is None:
        raise NotFoundError("Suggestion not found", code="SUGGESTION_NOT_FOUND")

    upvotes, downvotes = recompute_votes_count(db, suggestion)
    changed = ModerationService.evaluate_suggestion(
        suggestion,
        upvotes=upvotes,
        downvotes=downvotes,
        config=config,
    )
    db.commit()
    db.refresh(suggestion)
    invalidate_suggestion(cache, suggestion_id)
    return suggestion, changed
