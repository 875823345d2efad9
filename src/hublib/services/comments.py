"""Comments on resources."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from hublib.core.errors import ForbiddenError, NotFoundError
from hublib.db.time import utcnow
from hublib.models import Comment, User
from hublib.services.cache import CacheInvalidator
from hublib.services.resources import get_resource, get_resource_or_404
from hublib.services.visibility import ensure_readable

logger = logging.getLogger(__name__)


def _get_comment_or_404(db: Session, resource_id: int, comment_id: int) -> Comment:
    comment = db.get(Comment, comment_id)
    if comment is None or comment.resource_id != resource_id:
        raise NotFoundError("Comment not found", code="COMMENT_NOT_FOUND")
    return comment


def list_comments(db: Session, *, resource_id: int, requester: User | None) -> list[Comment]:
    """Return comments of a readable resource, oldest first."""
    get_resource(db, resource_id=resource_id, requester=requester)
    stmt = (
        select(Comment)
        .where(Comment.resource_id == resource_id)
        .order_by(Comment.created_at, Comment.id)
    )
    return list(db.scalars(stmt))


def add_comment(
    db: Session,
    *,
    resource_id: int,
    author: User,
    content: str,
    cache: CacheInvalidator,
) -> Comment:
    """Comment on a readable resource."""
    get_resource(db, resource_id=resource_id, requester=author)
    comment = Comment(resource_id=resource_id, user_id=author.id, content=content)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    cache.invalidate(f"resource:{resource_id}")
    return comment


def update_comment(
    db: Session,
    *,
    resource_id: int,
    comment_id: int,
    requester: User,
    content: str,
    cache: CacheInvalidator,
) -> Comment:
    """Edit a comment's text.

    Admins may edit any comment. Authors may edit their own while they can
    still read the resource.
    """
    resource = get_resource_or_404(db, resource_id)
    comment = _get_comment_or_404(db, resource_id, comment_id)
    if not requester.is_admin:
        if requester.id != comment.user_id:
            raise ForbiddenError("You cannot edit this comment")
        ensure_readable(db, resource, requester)
    comment.content = content
    comment.updated_at = utcnow()
    db.commit()
    db.refresh(comment)
    cache.invalidate(f"resource:{resource_id}")
    return comment


def delete_comment(
    db: Session,
    *,
    resource_id: int,
    comment_id: int,
    requester: User,
    cache: CacheInvalidator,
) -> None:
    """Delete a comment; allowed for its author, the resource owner or an admin."""
    resource = get_resource_or_404(db, resource_id)
    comment = _get_comment_or_404(db, resource_id, comment_id)
    if requester.id not in (comment.user_id, resource.owner_id) and not requester.is_admin:
        raise ForbiddenError("You cannot delete this comment")
    db.delete(comment)
    db.commit()
    logger.info("Comment %s on resource %s deleted by user %s", comment_id, resource_id, requester.id)
    cache.invalidate(f"resource:{resource_id}")
