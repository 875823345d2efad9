"""Resource lifecycle: publish, read, edit, delete, counters and forks."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from hublib.core.errors import NotFoundError
from hublib.models import Resource, User
from hublib.models.resource import VISIBILITY_PRIVATE
from hublib.schemas.resource import ResourceCreate
from hublib.services.cache import CacheInvalidator, invalidate_resource
from hublib.services.visibility import ensure_owner_or_admin, ensure_readable, ensure_writable

logger = logging.getLogger(__name__)

FORK_SUFFIX = " (Fork)"


def get_resource_or_404(db: Session, resource_id: int) -> Resource:
    """Load a resource or raise :class:`NotFoundError`."""
    resource = db.get(Resource, resource_id)
    if resource is None:
        raise NotFoundError("Resource not found", code="RESOURCE_NOT_FOUND")
    return resource


def create_resource(
    db: Session,
    *,
    owner: User,
    payload: ResourceCreate,
    cache: CacheInvalidator,
) -> Resource:
    """Publish a resource owned by ``owner``."""
    data = payload.model_dump(exclude={"tags"})
    resource = Resource(owner_id=owner.id, **data)
    resource.tags = payload.tags
    db.add(resource)
    db.commit()
    db.refresh(resource)
    logger.info("Resource %s created by user %s", resource.id, owner.id)
    invalidate_resource(cache, resource.id)
    return resource


def get_resource(db: Session, *, resource_id: int, requester: User | None) -> Resource:
    """Return a resource the requester may read.

    Raises:
        NotFoundError: If it does not exist.
        AccessDeniedError: If it exists but is not readable.
    """
    resource = get_resource_or_404(db, resource_id)
    ensure_readable(db, resource, requester)
    return resource


def update_resource(
    db: Session,
    *,
    resource_id: int,
    requester: User,
    changes: dict[str, Any],
    cache: CacheInvalidator,
) -> Resource:
    """Apply a partial update; only keys present in ``changes`` are written.

    Write grants cover content fields. Changing ``visibility`` re-scopes every
    grant on the resource, so it stays with the owner or an admin.
    """
    resource = get_resource_or_404(db, resource_id)
    ensure_writable(db, resource, requester)
    if "visibility" in changes and changes["visibility"] != resource.visibility:
        ensure_owner_or_admin(resource, requester, "change the visibility of this resource")

    tags = changes.pop("tags", None)
    for field_name, value in changes.items():
        setattr(resource, field_name, value)
    if tags is not None:
        resource.tags = tags
    db.commit()
    db.refresh(resource)
    invalidate_resource(cache, resource_id)
    return resource


def delete_resource(
    db: Session,
    *,
    resource_id: int,
    requester: User,
    cache: CacheInvalidator,
) -> None:
    """Delete a resource with its shares, permissions, ratings and comments."""
    resource = get_resource_or_404(db, resource_id)
    ensure_owner_or_admin(resource, requester, "delete this resource")
    db.delete(resource)
    db.commit()
    logger.info("Resource %s deleted by user %s", resource_id, requester.id)
    invalidate_resource(cache, resource_id)


def _increment(db: Session, resource: Resource, column: str) -> Resource:
    counter = getattr(Resource, column)
    db.execute(
        update(Resource)
        .where(Resource.id == resource.id)
        .values({column: counter + 1})
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(resource)
    return resource


def record_view(
    db: Session,
    *,
    resource_id: int,
    requester: User | None,
    cache: CacheInvalidator,
) -> Resource:
    """Atomically bump the view counter of a readable resource."""
    resource = get_resource(db, resource_id=resource_id, requester=requester)
    _increment(db, resource, "views_count")
    cache.invalidate(f"resource:{resource_id}")
    return resource


def record_download(
    db: Session,
    *,
    resource_id: int,
    requester: User | None,
    cache: CacheInvalidator,
) -> Resource:
    """Atomically bump the download counter of a readable resource."""
    resource = get_resource(db, resource_id=resource_id, requester=requester)
    _increment(db, resource, "downloads_count")
    cache.invalidate(f"resource:{resource_id}")
    return resource


def fork_resource(
    db: Session,
    *,
    resource_id: int,
    requester: User,
    cache: CacheInvalidator,
) -> Resource:
    """Copy a readable resource into a private resource owned by ``requester``.

    Counters, ratings, shares and comments are not copied.
    """
    original = get_resource(db, resource_id=resource_id, requester=requester)
    fork = Resource(
        owner_id=requester.id,
        title=f"{original.title}{FORK_SUFFIX}"[:500],
        description=original.description,
        category=original.category,
        resource_type=original.resource_type,
        visibility=VISIBILITY_PRIVATE,
        external_url=original.external_url,
        github_url=original.github_url,
        file_url=original.file_url,
        language=original.language,
        license=original.license,
    )
    fork.tags = original.tags
    db.add(fork)
    db.commit()
    db.refresh(fork)
    logger.info("Resource %s forked as %s by user %s", resource_id, fork.id, requester.id)
    invalidate_resource(cache, fork.id)
    return fork
