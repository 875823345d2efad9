"""List-time visibility composition for resources.

The readable-set predicate is ANDed with the caller's filters before
ordering and pagination, and the total is counted from the same statement,
so page counts never include rows the caller cannot see.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from sqlalchemy import ColumnElement, and_, exists, func, or_, select
from sqlalchemy.orm import Session

from hublib.core.errors import InvalidInputError
from hublib.core.settings import settings
from hublib.db.time import utcnow
from hublib.models import Resource, ResourcePermission, ResourceShare, ResourceTag, User
from hublib.models.resource import SHARED_VISIBILITIES, VISIBILITY_PUBLIC
from hublib.services.visibility import (
    READ_PERMISSION_LABELS,
    WRITE_PERMISSION_LABELS,
    is_active,
    member_group_ids,
)

SORT_COLUMNS = {
    "created_at": Resource.created_at,
    "updated_at": Resource.updated_at,
    "views_count": Resource.views_count,
    "downloads_count": Resource.downloads_count,
    "average_rating": Resource.average_rating,
}


@dataclass
class ResourceFilters:
    """Caller-supplied filters, sorting and paging for a listing."""

    search: str | None = None
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    owner_id: int | None = None
    language: str | None = None
    visibility: str | None = None
    resource_type: str | None = None
    sort_by: str = "created_at"
    sort_order: str = "desc"
    page: int = 1
    limit: int = 20


@dataclass(frozen=True)
class ResourcePage:
    """One page of resources and the total behind it."""

    items: list[Resource]
    total: int
    page: int
    limit: int


def readable_resources_clause(requester: User | None, now: datetime) -> ColumnElement[bool]:
    """SQL predicate selecting the resources ``requester`` may read.

    It mirrors the detail-level read check: an active share or an active
    read- or write-class permission naming the requester or one of their
    groups opens a shared resource. Anonymous callers collapse to public
    resources only.
    """
    if requester is None:
        return Resource.visibility == VISIBILITY_PUBLIC

    shared_with_requester = exists().where(
        ResourceShare.resource_id == Resource.id,
        is_active(ResourceShare.expires_at, now),
        or_(
            ResourceShare.shared_with_user_id == requester.id,
            ResourceShare.shared_with_group_id.in_(member_group_ids(requester.id)),
        ),
    )
    permitted_to_requester = exists().where(
        ResourcePermission.resource_id == Resource.id,
        ResourcePermission.permission.in_(READ_PERMISSION_LABELS | WRITE_PERMISSION_LABELS),
        is_active(ResourcePermission.expires_at, now),
        or_(
            ResourcePermission.user_id == requester.id,
            ResourcePermission.group_id.in_(member_group_ids(requester.id)),
        ),
    )
    return or_(
        Resource.visibility == VISIBILITY_PUBLIC,
        Resource.owner_id == requester.id,
        and_(
            Resource.visibility.in_(SHARED_VISIBILITIES),
            or_(shared_with_requester, permitted_to_requester),
        ),
    )


def _filter_clauses(filters: ResourceFilters) -> list[ColumnElement[bool]]:
    clauses: list[ColumnElement[bool]] = []
    if filters.search:
        pattern = f"%{filters.search.strip().lower()}%"
        clauses.append(
            or_(
                func.lower(Resource.title).like(pattern),
                func.lower(Resource.description).like(pattern),
            )
        )
    if filters.category:
        clauses.append(Resource.category == filters.category)
    for tag in dict.fromkeys(filters.tags):
        clauses.append(
            exists().where(ResourceTag.resource_id == Resource.id, ResourceTag.tag == tag)
        )
    if filters.owner_id is not None:
        clauses.append(Resource.owner_id == filters.owner_id)
    if filters.language:
        clauses.append(Resource.language == filters.language)
    if filters.visibility:
        clauses.append(Resource.visibility == filters.visibility)
    if filters.resource_type:
        clauses.append(Resource.resource_type == filters.resource_type)
    return clauses


def list_resources(
    db: Session,
    requester: User | None,
    filters: ResourceFilters,
    *,
    now: datetime | None = None,
) -> ResourcePage:
    """Return the page of readable resources matching ``filters``."""
    if filters.sort_by not in SORT_COLUMNS:
        raise InvalidInputError(f"Cannot sort by {filters.sort_by!r}", field="sort_by")
    if filters.sort_order not in ("asc", "desc"):
        raise InvalidInputError("sort_order must be asc or desc", field="sort_order")
    if filters.page < 1:
        raise InvalidInputError("page must be at least 1", field="page")
    if not 1 <= filters.limit <= settings.max_page_size:
        raise InvalidInputError(
            f"limit must be between 1 and {settings.max_page_size}",
            field="limit",
        )

    predicate = and_(
        readable_resources_clause(requester, now or utcnow()),
        *_filter_clauses(filters),
    )

    total = db.scalar(select(func.count(Resource.id)).where(predicate)) or 0

    sort_column = SORT_COLUMNS[filters.sort_by]
    ordering = sort_column.asc() if filters.sort_order == "asc" else sort_column.desc()
    stmt = (
        select(Resource)
        .where(predicate)
        .order_by(ordering, Resource.id.desc())
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
    )
    return ResourcePage(
        items=list(db.scalars(stmt)),
        total=int(total),
        page=filters.page,
        limit=filters.limit,
    )
