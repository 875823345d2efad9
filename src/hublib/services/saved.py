"""Saved resources: a per-user reading list."""

from __future__ import annotations

import logging

from sqlalchemy import and_, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hublib.core.errors import ConflictError, NotFoundError
from hublib.db.time import utcnow
from hublib.models import Resource, SavedResource, User
from hublib.services.resource_query import ResourcePage, readable_resources_clause
from hublib.services.resources import get_resource_or_404
from hublib.services.visibility import ensure_readable

logger = logging.getLogger(__name__)


def _saved_row(db: Session, user_id: int, resource_id: int) -> SavedResource | None:
    return db.scalars(
        select(SavedResource).where(
            SavedResource.user_id == user_id,
            SavedResource.resource_id == resource_id,
        )
    ).first()


def save_resource(db: Session, *, resource_id: int, user: User) -> SavedResource:
    """Save a readable resource for ``user``.

    Raises:
        ConflictError: If it is already saved.
    """
    resource = get_resource_or_404(db, resource_id)
    ensure_readable(db, resource, user)
    if _saved_row(db, user.id, resource_id) is not None:
        raise ConflictError("Resource already saved", code="ALREADY_SAVED")

    row = SavedResource(user_id=user.id, resource_id=resource_id)
    db.add(row)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("Resource already saved", code="ALREADY_SAVED") from err
    db.refresh(row)
    logger.info("Resource %s saved by user %s", resource_id, user.id)
    return row


def unsave_resource(db: Session, *, resource_id: int, user: User) -> None:
    """Remove a resource from ``user``'s saved list."""
    row = _saved_row(db, user.id, resource_id)
    if row is None:
        raise NotFoundError("Resource is not saved", code="NOT_SAVED")
    db.delete(row)
    db.commit()


def list_saved(db: Session, *, user: User, page: int = 1, limit: int = 20) -> ResourcePage:
    """Return ``user``'s saved resources they can still read, newest save first."""
    predicate = and_(
        SavedResource.user_id == user.id,
        readable_resources_clause(user, utcnow()),
    )
    base = select(Resource).join(SavedResource, SavedResource.resource_id == Resource.id)

    total = db.scalar(
        select(func.count(SavedResource.id))
        .join(Resource, Resource.id == SavedResource.resource_id)
        .where(predicate)
    ) or 0
    items = list(
        db.scalars(
            base.where(predicate)
            .order_by(SavedResource.created_at.desc(), SavedResource.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
    )
    return ResourcePage(items=items, total=int(total), page=page, limit=limit)
