"""Resource ratings and the derived average/count on the resource row."""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hublib.core.errors import ConflictError, NotFoundError
from hublib.models import Resource, ResourceRating, User
from hublib.services.cache import CacheInvalidator, invalidate_resource
from hublib.services.visibility import ensure_readable

logger = logging.getLogger(__name__)


def _lock_resource_or_404(db: Session, resource_id: int) -> Resource:
    resource = db.scalars(
        select(Resource).where(Resource.id == resource_id).with_for_update()
    ).first()
    if resource is None:
        raise NotFoundError("Resource not found", code="RESOURCE_NOT_FOUND")
    return resource


def _find_rating(db: Session, resource_id: int, user_id: int) -> ResourceRating | None:
    return db.scalars(
        select(ResourceRating).where(
            ResourceRating.resource_id == resource_id,
            ResourceRating.user_id == user_id,
        )
    ).first()


def recompute_rating_aggregate(db: Session, resource: Resource) -> tuple[float, int]:
    """Rewrite ``average_rating`` and ``ratings_count`` from the rating rows.

    Both are 0 when the resource has no ratings.
    """
    db.flush()
    average, count = db.execute(
        select(func.avg(ResourceRating.rating), func.count(ResourceRating.id)).where(
            ResourceRating.resource_id == resource.id
        )
    ).one()
    resource.ratings_count = int(count or 0)
    resource.average_rating = float(average) if resource.ratings_count else 0.0
    return resource.average_rating, resource.ratings_count


def rate_resource(
    db: Session,
    *,
    resource_id: int,
    user: User,
    rating: int,
    cache: CacheInvalidator,
) -> ResourceRating:
    """Create the caller's rating of a readable resource.

    Raises:
        ConflictError: If the caller already rated it; use an update instead.
    """
    resource = _lock_resource_or_404(db, resource_id)
    ensure_readable(db, resource, user)
    if _find_rating(db, resource_id, user.id) is not None:
        db.rollback()
        raise ConflictError("You have already rated this resource", code="ALREADY_RATED")

    row = ResourceRating(resource_id=resource_id, user_id=user.id, rating=rating)
    db.add(row)
    try:
        recompute_rating_aggregate(db, resource)
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("You have already rated this resource", code="ALREADY_RATED") from err
    db.refresh(row)
    invalidate_resource(cache, resource_id)
    return row


def update_rating(
    db: Session,
    *,
    resource_id: int,
    user: User,
    rating: int,
    cache: CacheInvalidator,
) -> ResourceRating:
    """Change the caller's existing rating of a resource they can still read."""
    resource = _lock_resource_or_404(db, resource_id)
    ensure_readable(db, resource, user)
    row = _find_rating(db, resource_id, user.id)
    if row is None:
        db.rollback()
        raise NotFoundError("You have not rated this resource", code="RATING_NOT_FOUND")

    row.rating = rating
    recompute_rating_aggregate(db, resource)
    db.commit()
    db.refresh(row)
    invalidate_resource(cache, resource_id)
    return row


def delete_rating(
    db: Session,
    *,
    resource_id: int,
    user: User,
    cache: CacheInvalidator,
) -> Resource:
    """Remove the caller's rating and return the updated resource."""
    resource = _lock_resource_or_404(db, resource_id)
    row = _find_rating(db, resource_id, user.id)
    if row is None:
        db.rollback()
        raise NotFoundError("You have not rated this resource", code="RATING_NOT_FOUND")

    db.delete(row)
    recompute_rating_aggregate(db, resource)
    db.commit()
    db.refresh(resource)
    invalidate_resource(cache, resource_id)
    return resource


def list_ratings(db: Session, *, resource_id: int, requester: User | None) -> list[ResourceRating]:
    """Return the ratings of a readable resource, newest first."""
    resource = db.get(Resource, resource_id)
    if resource is None:
        raise NotFoundError("Resource not found", code="RESOURCE_NOT_FOUND")
    ensure_readable(db, resource, requester)
    return list(
        db.scalars(
            select(ResourceRating)
            .where(ResourceRating.resource_id == resource_id)
            .order_by(ResourceRating.created_at.desc(), ResourceRating.id.desc())
        )
    )
