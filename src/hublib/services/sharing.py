"""Share and explicit-permission store for resources.

Shares are managed by the resource owner only. Explicit permissions may be
managed by the owner or an admin-level user. Every mutation commits on its
own and then invalidates the affected cache entries.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hublib.core.errors import ConflictError, NotFoundError
from hublib.models import Group, Resource, ResourcePermission, ResourceShare, User
from hublib.schemas.share import ForGroup, ForUser, ShareTarget
from hublib.services.cache import CacheInvalidator, invalidate_resource
from hublib.services.visibility import ensure_owner, ensure_owner_or_admin

logger = logging.getLogger(__name__)


def get_resource_or_404(db: Session, resource_id: int) -> Resource:
    """Load a resource or raise :class:`NotFoundError`."""
    resource = db.get(Resource, resource_id)
    if resource is None:
        raise NotFoundError("Resource not found", code="RESOURCE_NOT_FOUND")
    return resource


def _ensure_target_exists(db: Session, target: ShareTarget) -> None:
    match target:
        case ForUser(user_id=user_id):
            if db.get(User, user_id) is None:
                raise NotFoundError("User not found", code="USER_NOT_FOUND")
        case ForGroup(group_id=group_id):
            if db.get(Group, group_id) is None:
                raise NotFoundError("Group not found", code="GROUP_NOT_FOUND")


def _share_target_columns(target: ShareTarget) -> dict[str, int | None]:
    match target:
        case ForUser(user_id=user_id):
            return {"shared_with_user_id": user_id, "shared_with_group_id": None}
        case ForGroup(group_id=group_id):
            return {"shared_with_user_id": None, "shared_with_group_id": group_id}
    raise TypeError(f"Unsupported share target: {target!r}")


def _permission_target_columns(target: ShareTarget) -> dict[str, int | None]:
    match target:
        case ForUser(user_id=user_id):
            return {"user_id": user_id, "group_id": None}
        case ForGroup(group_id=group_id):
            return {"user_id": None, "group_id": group_id}
    raise TypeError(f"Unsupported permission target: {target!r}")


def _apply_partial(row: Any, changes: dict[str, Any]) -> None:
    for field_name, value in changes.items():
        setattr(row, field_name, value)


# --- Shares -----------------------------------------------------------------


def create_share(
    db: Session,
    *,
    resource_id: int,
    owner: User,
    target: ShareTarget,
    permission: str,
    expires_at: datetime | None,
    cache: CacheInvalidator,
) -> ResourceShare:
    """Share a resource with one user or one group.

    Raises:
        NotFoundError: If the resource or the target does not exist.
        ForbiddenError: If ``owner`` does not own the resource.
        ConflictError: If the target already holds a share on the resource.
    """
    resource = get_resource_or_404(db, resource_id)
    ensure_owner(resource, owner, "share this resource")
    _ensure_target_exists(db, target)

    columns = _share_target_columns(target)
    duplicate = db.execute(
        select(ResourceShare.id).where(
            ResourceShare.resource_id == resource_id,
            *(
                getattr(ResourceShare, name) == value
                for name, value in columns.items()
                if value is not None
            ),
        )
    ).first()
    if duplicate is not None:
        raise ConflictError("This resource is already shared with that target", code="SHARE_EXISTS")

    share = ResourceShare(
        resource_id=resource_id,
        permission=permission,
        expires_at=expires_at,
        **columns,
    )
    db.add(share)
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError(
            "This resource is already shared with that target",
            code="SHARE_EXISTS",
        ) from err
    db.refresh(share)
    logger.info("Resource %s shared (%s) with %r", resource_id, permission, target)
    invalidate_resource(cache, resource_id)
    return share


def list_shares(db: Session, *, resource_id: int, owner: User) -> list[ResourceShare]:
    """Return every share of a resource, including lapsed ones."""
    resource = get_resource_or_404(db, resource_id)
    ensure_owner(resource, owner, "view the shares of this resource")
    stmt = (
        select(ResourceShare)
        .where(ResourceShare.resource_id == resource_id)
        .order_by(ResourceShare.created_at.desc(), ResourceShare.id.desc())
    )
    return list(db.scalars(stmt))


def _get_share_or_404(db: Session, resource_id: int, share_id: int) -> ResourceShare:
    share = db.get(ResourceShare, share_id)
    if share is None or share.resource_id != resource_id:
        raise NotFoundError("Share not found", code="SHARE_NOT_FOUND")
    return share


def update_share(
    db: Session,
    *,
    resource_id: int,
    share_id: int,
    owner: User,
    changes: dict[str, Any],
    cache: CacheInvalidator,
) -> ResourceShare:
    """Apply a partial update of ``permission`` and/or ``expires_at``.

    Only keys present in ``changes`` are written, so an explicit ``None``
    expiry clears it while an omitted one is left alone.
    """
    resource = get_resource_or_404(db, resource_id)
    ensure_owner(resource, owner, "modify the shares of this resource")
    share = _get_share_or_404(db, resource_id, share_id)

    if changes.get("permission", share.permission) is None:
        changes.pop("permission")
    _apply_partial(share, changes)
    db.commit()
    db.refresh(share)
    logger.info("Share %s on resource %s updated: %s", share_id, resource_id, sorted(changes))
    invalidate_resource(cache, resource_id)
    return share


def delete_share(
    db: Session,
    *,
    resource_id: int,
    share_id: int,
    owner: User,
    cache: CacheInvalidator,
) -> None:
    """Revoke a share."""
    resource = get_resource_or_404(db, resource_id)
    ensure_owner(resource, owner, "remove the shares of this resource")
    share = _get_share_or_404(db, resource_id, share_id)
    db.delete(share)
    db.commit()
    logger.info("Share %s on resource %s revoked", share_id, resource_id)
    invalidate_resource(cache, resource_id)


# --- Explicit permissions ---------------------------------------------------


def create_permission(
    db: Session,
    *,
    resource_id: int,
    actor: User,
    target: ShareTarget,
    permission: str,
    expires_at: datetime | None,
    cache: CacheInvalidator,
) -> ResourcePermission:
    """Grant a labelled permission on a resource to one user or group."""
    resource = get_resource_or_404(db, resource_id)
    ensure_owner_or_admin(resource, actor, "set permissions on this resource")
    _ensure_target_exists(db, target)

    grant = ResourcePermission(
        resource_id=resource_id,
        permission=permission,
        expires_at=expires_at,
        **_permission_target_columns(target),
    )
    db.add(grant)
    db.commit()
    db.refresh(grant)
    logger.info("Permission %r on resource %s granted to %r", permission, resource_id, target)
    invalidate_resource(cache, resource_id)
    return grant


def list_permissions(db: Session, *, resource_id: int, actor: User) -> list[ResourcePermission]:
    """Return every explicit permission on a resource."""
    resource = get_resource_or_404(db, resource_id)
    ensure_owner_or_admin(resource, actor, "view the permissions of this resource")
    stmt = (
        select(ResourcePermission)
        .where(ResourcePermission.resource_id == resource_id)
        .order_by(ResourcePermission.created_at.desc(), ResourcePermission.id.desc())
    )
    return list(db.scalars(stmt))


def _get_permission_or_404(db: Session, resource_id: int, permission_id: int) -> ResourcePermission:
    grant = db.get(ResourcePermission, permission_id)
    if grant is None or grant.resource_id != resource_id:
        raise NotFoundError("Permission not found", code="PERMISSION_NOT_FOUND")
    return grant


def update_permission(
    db: Session,
    *,
    resource_id: int,
    permission_id: int,
    actor: User,
    changes: dict[str, Any],
    cache: CacheInvalidator,
) -> ResourcePermission:
    """Apply a partial update of a permission's label and/or expiry."""
    resource = get_resource_or_404(db, resource_id)
    ensure_owner_or_admin(resource, actor, "modify the permissions of this resource")
    grant = _get_permission_or_404(db, resource_id, permission_id)

    if changes.get("permission", grant.permission) is None:
        changes.pop("permission")
    _apply_partial(grant, changes)
    db.commit()
    db.refresh(grant)
    logger.info(
        "Permission %s on resource %s updated: %s",
        permission_id,
        resource_id,
        sorted(changes),
    )
    invalidate_resource(cache, resource_id)
    return grant


def delete_permission(
    db: Session,
    *,
    resource_id: int,
    permission_id: int,
    actor: User,
    cache: CacheInvalidator,
) -> None:
    """Revoke an explicit permission."""
    resource = get_resource_or_404(db, resource_id)
    ensure_owner_or_admin(resource, actor, "modify the permissions of this resource")
    grant = _get_permission_or_404(db, resource_id, permission_id)
    db.delete(grant)
    db.commit()
    logger.info("Permission %s on resource %s revoked", permission_id, resource_id)
    invalidate_resource(cache, resource_id)
