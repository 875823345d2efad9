"""User-curated collections of resources.

A collection only arranges resources; it never grants access to them. Entries
the caller cannot read are left out of every view and every count, using the
same predicate as resource listings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hublib.core.errors import AccessDeniedError, ConflictError, ForbiddenError, NotFoundError
from hublib.db.time import utcnow
from hublib.models import Collection, CollectionResource, Resource, User
from hublib.schemas.collection import CollectionCreate
from hublib.services.resource_query import readable_resources_clause
from hublib.services.resources import get_resource_or_404
from hublib.services.visibility import ensure_readable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionPage:
    """One page of collections with their readable entry counts."""

    items: list[Collection]
    counts: dict[int, int]
    total: int
    page: int
    limit: int


def get_collection_or_404(db: Session, collection_id: int) -> Collection:
    """Load a collection or raise :class:`NotFoundError`."""
    collection = db.get(Collection, collection_id)
    if collection is None:
        raise NotFoundError("Collection not found", code="COLLECTION_NOT_FOUND")
    return collection


def _ensure_visible(collection: Collection, requester: User | None) -> None:
    if collection.is_public:
        return
    if requester is None or collection.owner_id != requester.id:
        raise AccessDeniedError("This collection is private")


def _ensure_manageable(collection: Collection, requester: User) -> None:
    if collection.owner_id != requester.id and not requester.is_admin:
        raise ForbiddenError(
            "Only the owner or an administrator can modify this collection",
            code="NOT_OWNER",
        )


def readable_counts(
    db: Session,
    collection_ids: list[int],
    requester: User | None,
    *,
    now: datetime | None = None,
) -> dict[int, int]:
    """Map each collection id to the number of its entries ``requester`` can read."""
    if not collection_ids:
        return {}
    rows = db.execute(
        select(CollectionResource.collection_id, func.count(CollectionResource.id))
        .join(Resource, Resource.id == CollectionResource.resource_id)
        .where(
            CollectionResource.collection_id.in_(collection_ids),
            readable_resources_clause(requester, now or utcnow()),
        )
        .group_by(CollectionResource.collection_id)
    ).all()
    counts = {collection_id: 0 for collection_id in collection_ids}
    counts.update({collection_id: int(count) for collection_id, count in rows})
    return counts


def list_collections(
    db: Session,
    *,
    requester: User | None,
    owner_id: int | None = None,
    page: int = 1,
    limit: int = 20,
) -> CollectionPage:
    """Return a page of collections, most recently updated first.

    Without ``owner_id`` only public collections are listed. With it, the
    owner sees all of their own collections and everyone else sees the
    public ones.
    """
    stmt = select(Collection)
    if owner_id is not None:
        stmt = stmt.where(Collection.owner_id == owner_id)
    if owner_id is None or requester is None or requester.id != owner_id:
        stmt = stmt.where(Collection.is_public.is_(True))

    total = db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
    items = list(
        db.scalars(
            stmt.order_by(Collection.updated_at.desc(), Collection.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
    )
    return CollectionPage(
        items=items,
        counts=readable_counts(db, [item.id for item in items], requester),
        total=int(total),
        page=page,
        limit=limit,
    )


def get_collection(
    db: Session,
    *,
    collection_id: int,
    requester: User | None,
) -> tuple[Collection, list[CollectionResource]]:
    """Return a visible collection and its readable entries in order.

    Raises:
        NotFoundError: If the collection does not exist.
        AccessDeniedError: If it is private and not the requester's.
    """
    collection = get_collection_or_404(db, collection_id)
    _ensure_visible(collection, requester)
    entries = list(
        db.scalars(
            select(CollectionResource)
            .join(Resource, Resource.id == CollectionResource.resource_id)
            .where(
                CollectionResource.collection_id == collection_id,
                readable_resources_clause(requester, utcnow()),
            )
            .order_by(CollectionResource.order_index, CollectionResource.id)
        )
    )
    return collection, entries


def create_collection(db: Session, *, owner: User, payload: CollectionCreate) -> Collection:
    """Create a collection owned by ``owner``."""
    collection = Collection(owner_id=owner.id, **payload.model_dump())
    db.add(collection)
    db.commit()
    db.refresh(collection)
    logger.info("Collection %s created by user %s", collection.id, owner.id)
    return collection


def update_collection(
    db: Session,
    *,
    collection_id: int,
    requester: User,
    changes: dict[str, Any],
) -> Collection:
    """Apply a partial update; owner or admin only."""
    collection = get_collection_or_404(db, collection_id)
    _ensure_manageable(collection, requester)
    for field_name, value in changes.items():
        if field_name in ("name", "is_public") and value is None:
            continue
        setattr(collection, field_name, value)
    db.commit()
    db.refresh(collection)
    return collection


def delete_collection(db: Session, *, collection_id: int, requester: User) -> None:
    """Delete a collection and its entries; the resources themselves stay."""
    collection = get_collection_or_404(db, collection_id)
    _ensure_manageable(collection, requester)
    db.delete(collection)
    db.commit()
    logger.info("Collection %s deleted by user %s", collection_id, requester.id)


def _entry(db: Session, collection_id: int, resource_id: int) -> CollectionResource | None:
    return db.scalars(
        select(CollectionResource).where(
            CollectionResource.collection_id == collection_id,
            CollectionResource.resource_id == resource_id,
        )
    ).first()


def add_resource(
    db: Session,
    *,
    collection_id: int,
    resource_id: int,
    requester: User,
) -> CollectionResource:
    """Append a resource the requester can read to the end of a collection.

    Raises:
        ConflictError: If the resource is already in the collection.
    """
    collection = get_collection_or_404(db, collection_id)
    _ensure_manageable(collection, requester)
    resource = get_resource_or_404(db, resource_id)
    ensure_readable(db, resource, requester)
    if _entry(db, collection_id, resource_id) is not None:
        raise ConflictError(
            "Resource is already in this collection",
            code="RESOURCE_ALREADY_IN_COLLECTION",
        )

    last = db.scalar(
        select(func.max(CollectionResource.order_index)).where(
            CollectionResource.collection_id == collection_id
        )
    )
    entry = CollectionResource(
        collection_id=collection_id,
        resource_id=resource_id,
        order_index=0 if last is None else last + 1,
    )
    db.add(entry)
    collection.updated_at = utcnow()
    try:
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError(
            "Resource is already in this collection",
            code="RESOURCE_ALREADY_IN_COLLECTION",
        ) from err
    db.refresh(entry)
    logger.info("Resource %s added to collection %s", resource_id, collection_id)
    return entry


def remove_resource(
    db: Session,
    *,
    collection_id: int,
    resource_id: int,
    requester: User,
) -> None:
    """Take a resource out of a collection."""
    collection = get_collection_or_404(db, collection_id)
    _ensure_manageable(collection, requester)
    entry = _entry(db, collection_id, resource_id)
    if entry is None:
        raise NotFoundError("Resource is not in this collection", code="NOT_IN_COLLECTION")
    db.delete(entry)
    collection.updated_at = utcnow()
    db.commit()
    logger.info("Resource %s removed from collection %s", resource_id, collection_id)
