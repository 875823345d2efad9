# src/hublib/api/v1/endpoints/resources.py
"""Resource endpoints for the HubLib API."""

from typing import Annotated, Literal

from fastapi import APIRouter, Query, Response, status

from hublib.core.settings import settings
from hublib.models import Resource
from hublib.schemas.common import PageMeta
from hublib.schemas.resource import (
    CounterResponse,
    ResourceCreate,
    ResourceListResponse,
    ResourceResponse,
    ResourceType,
    ResourceUpdate,
    Visibility,
)
from hublib.services import resources as resource_service
from hublib.services.resource_query import ResourceFilters, list_resources

from ..dependencies import CacheDep, CurrentUserDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/resources", tags=["resources"])


def _split_tags(raw: list[str] | None) -> list[str]:
    tags: list[str] = []
    for value in raw or []:
        tags.extend(part.strip() for part in value.split(",") if part.strip())
    return tags


@router.get("", response_model=ResourceListResponse)
async def list_resources_endpoint(
    db: SessionDep,
    current_user: OptionalUserDep,
    search: str | None = None,
    category: str | None = None,
    tags: Annotated[list[str] | None, Query()] = None,
    owner_id: int | None = None,
    language: str | None = None,
    visibility: Visibility | None = None,
    resource_type: ResourceType | None = None,
    sort_by: Literal[
        "created_at", "updated_at", "views_count", "downloads_count", "average_rating"
    ] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = settings.default_page_size,
) -> ResourceListResponse:
    """List the resources the caller can see; anonymous callers see public ones."""
    filters = ResourceFilters(
        search=search,
        category=category,
        tags=_split_tags(tags),
        owner_id=owner_id,
        language=language,
        visibility=visibility,
        resource_type=resource_type,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    result = list_resources(db, current_user, filters)
    return ResourceListResponse(
        resources=[ResourceResponse.model_validate(item) for item in result.items],
        pagination=PageMeta.build(page=result.page, limit=result.limit, total=result.total),
    )


@router.post("", response_model=ResourceResponse, status_code=status.HTTP_201_CREATED)
async def create_resource(
    resource_data: ResourceCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Resource:
    """Publish a new resource owned by the caller."""
    return resource_service.create_resource(db, owner=current_user, payload=resource_data, cache=cache)


@router.get("/{resource_id}", response_model=ResourceResponse)
async def get_resource(
    resource_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> Resource:
    """Get a resource; 404 if missing, 403 if the caller may not read it."""
    return resource_service.get_resource(db, resource_id=resource_id, requester=current_user)


@router.put("/{resource_id}", response_model=ResourceResponse)
async def update_resource(
    resource_id: int,
    resource_data: ResourceUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Resource:
    """Partially update a resource."""
    changes = resource_data.model_dump(exclude_unset=True)
    for required in ("title", "description", "resource_type", "visibility"):
        if changes.get(required, "") is None:
            changes.pop(required)
    return resource_service.update_resource(
        db,
        resource_id=resource_id,
        requester=current_user,
        changes=changes,
        cache=cache,
    )


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resource(
    resource_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Response:
    """Delete a resource and everything attached to it."""
    resource_service.delete_resource(db, resource_id=resource_id, requester=current_user, cache=cache)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _counters(resource: Resource) -> CounterResponse:
    return CounterResponse(
        id=resource.id,
        views_count=resource.views_count,
        downloads_count=resource.downloads_count,
    )


@router.post("/{resource_id}/view", response_model=CounterResponse)
async def record_view(
    resource_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> CounterResponse:
    """Count a view of a readable resource."""
    resource = resource_service.record_view(
        db, resource_id=resource_id, requester=current_user, cache=cache
    )
    return _counters(resource)


@router.post("/{resource_id}/download", response_model=CounterResponse)
async def record_download(
    resource_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> CounterResponse:
    """Count a download of a readable resource."""
    resource = resource_service.record_download(
        db, resource_id=resource_id, requester=current_user, cache=cache
    )
    return _counters(resource)


@router.post(
    "/{resource_id}/fork",
    response_model=ResourceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def fork_resource(
    resource_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Resource:
    """Copy a readable resource into a private one owned by the caller."""
    return resource_service.fork_resource(
        db, resource_id=resource_id, requester=current_user, cache=cache
    )
