"""Read/write access decisions for a single resource.

Owners always have full access. Public resources are readable by anyone,
private ones only by their owner. ``shared_users`` and ``shared_groups``
resources are readable through an active grant that names the requester or
one of the groups the requester belongs to at check time. Grants are either
resource shares or explicit permission records. Expiry is compared in SQL
against ``now`` on every check.
"""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime

from sqlalchemy import ColumnElement, Select, or_, select
from sqlalchemy.orm import Session

from hublib.core.errors import AccessDeniedError, ForbiddenError
from hublib.db.time import utcnow
from hublib.models import GroupMember, Resource, ResourcePermission, ResourceShare, User
from hublib.models.resource import VISIBILITY_PRIVATE, VISIBILITY_PUBLIC
from hublib.models.share import SHARE_PERMISSION_READ, SHARE_PERMISSION_WRITE

READ_PERMISSION_LABELS = frozenset({"read", "view"})
WRITE_PERMISSION_LABELS = frozenset({"write", "update", "delete", "share"})


def is_active(expires_at: ColumnElement[datetime | None], now: datetime) -> ColumnElement[bool]:
    """SQL predicate for a grant that has not lapsed."""
    return or_(expires_at.is_(None), expires_at > now)


def member_group_ids(user_id: int) -> Select[tuple[int]]:
    """Subquery of the groups ``user_id`` currently belongs to."""
    return select(GroupMember.group_id).where(GroupMember.user_id == user_id)


def _has_share(
    db: Session,
    resource_id: int,
    user_id: int,
    now: datetime,
    permissions: Collection[str],
) -> bool:
    stmt = (
        select(ResourceShare.id)
        .where(
            ResourceShare.resource_id == resource_id,
            ResourceShare.permission.in_(permissions),
            is_active(ResourceShare.expires_at, now),
            or_(
                ResourceShare.shared_with_user_id == user_id,
                ResourceShare.shared_with_group_id.in_(member_group_ids(user_id)),
            ),
        )
        .limit(1)
    )
    return db.execute(stmt).first() is not None


def _has_permission(
    db: Session,
    resource_id: int,
    user_id: int,
    now: datetime,
    labels: Collection[str],
) -> bool:
    stmt = (
        select(ResourcePermission.id)
        .where(
            ResourcePermission.resource_id == resource_id,
            ResourcePermission.permission.in_(labels),
            is_active(ResourcePermission.expires_at, now),
            or_(
                ResourcePermission.user_id == user_id,
                ResourcePermission.group_id.in_(member_group_ids(user_id)),
            ),
        )
        .limit(1)
    )
    return db.execute(stmt).first() is not None


def can_read(
    db: Session,
    resource: Resource,
    requester: User | None,
    *,
    now: datetime | None = None,
) -> bool:
    """Return True when ``requester`` may read ``resource``."""
    if resource.visibility == VISIBILITY_PUBLIC:
        return True
    if requester is None:
        return False
    if resource.owner_id == requester.id:
        return True
    if resource.visibility == VISIBILITY_PRIVATE:
        return False

    now = now or utcnow()
    # A write grant implies read.
    if _has_share(
        db,
        resource.id,
        requester.id,
        now,
        (SHARE_PERMISSION_READ, SHARE_PERMISSION_WRITE),
    ):
        return True
    return _has_permission(
        db,
        resource.id,
        requester.id,
        now,
        READ_PERMISSION_LABELS | WRITE_PERMISSION_LABELS,
    )


def can_write(
    db: Session,
    resource: Resource,
    requester: User | None,
    *,
    now: datetime | None = None,
) -> bool:
    """Return True when ``requester`` may modify ``resource``.

    Owners and admin-level users always may. Others need an active write
    share or write-class permission; grants on private resources are ignored.
    """
    if requester is None:
        return False
    if resource.owner_id == requester.id or requester.is_admin:
        return True
    if resource.visibility == VISIBILITY_PRIVATE:
        return False

    now = now or utcnow()
    if _has_share(db, resource.id, requester.id, now, (SHARE_PERMISSION_WRITE,)):
        return True
    return _has_permission(db, resource.id, requester.id, now, WRITE_PERMISSION_LABELS)


def ensure_readable(
    db: Session,
    resource: Resource,
    requester: User | None,
    *,
    now: datetime | None = None,
) -> None:
    """Raise :class:`AccessDeniedError` unless ``requester`` may read."""
    if not can_read(db, resource, requester, now=now):
        raise AccessDeniedError("Access to this resource is denied")


def ensure_writable(
    db: Session,
    resource: Resource,
    requester: User | None,
    *,
    now: datetime | None = None,
) -> None:
    """Raise :class:`ForbiddenError` unless ``requester`` may modify."""
    if not can_write(db, resource, requester, now=now):
        raise ForbiddenError("You do not have permission to modify this resource")


def ensure_owner_or_admin(resource: Resource, requester: User, action: str) -> None:
    """Raise :class:`ForbiddenError` unless ``requester`` owns ``resource`` or is an admin."""
    if resource.owner_id != requester.id and not requester.is_admin:
        raise ForbiddenError(f"Only the owner or an administrator can {action}")


def ensure_owner(resource: Resource, requester: User, action: str) -> None:
    """Raise :class:`ForbiddenError` unless ``requester`` owns ``resource``."""
    if resource.owner_id != requester.id:
        raise ForbiddenError(f"Only the owner can {action}")
