"""Collection endpoints for the HubLib API."""

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from hublib.core.settings import settings
from hublib.schemas.collection import (
    CollectionCreate,
    CollectionDetailResponse,
    CollectionItemAdd,
    CollectionItemResponse,
    CollectionListResponse,
    CollectionResponse,
    CollectionUpdate,
)
from hublib.schemas.common import PageMeta
from hublib.services import collections as collection_service

from ..dependencies import CurrentUserDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get("", response_model=CollectionListResponse)
async def list_collections(
    db: SessionDep,
    current_user: OptionalUserDep,
    owner_id: int | None = None,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = settings.default_page_size,
) -> CollectionListResponse:
    """List public collections, or one user's collections with ``owner_id``."""
    result = collection_service.list_collections(
        db,
        requester=current_user,
        owner_id=owner_id,
        page=page,
        limit=limit,
    )
    return CollectionListResponse(
        collections=[
            CollectionResponse.model_validate(item).model_copy(
                update={"resources_count": result.counts.get(item.id, 0)}
            )
            for item in result.items
        ],
        pagination=PageMeta.build(page=result.page, limit=result.limit, total=result.total),
    )


@router.post("", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
async def create_collection(
    collection_data: CollectionCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CollectionResponse:
    """Create a collection owned by the caller."""
    collection = collection_service.create_collection(
        db, owner=current_user, payload=collection_data
    )
    return CollectionResponse.model_validate(collection)


@router.get("/{collection_id}", response_model=CollectionDetailResponse)
async def get_collection(
    collection_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> CollectionDetailResponse:
    """Get a collection with the resources the caller can read."""
    collection, entries = collection_service.get_collection(
        db, collection_id=collection_id, requester=current_user
    )
    summary = CollectionResponse.model_validate(collection).model_dump()
    summary["resources_count"] = len(entries)
    return CollectionDetailResponse(
        **summary,
        items=[CollectionItemResponse.model_validate(entry) for entry in entries],
    )


@router.put("/{collection_id}", response_model=CollectionResponse)
async def update_collection(
    collection_id: int,
    collection_data: CollectionUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CollectionResponse:
    """Partially update a collection."""
    collection = collection_service.update_collection(
        db,
        collection_id=collection_id,
        requester=current_user,
        changes=collection_data.model_dump(exclude_unset=True),
    )
    counts = collection_service.readable_counts(db, [collection.id], current_user)
    return CollectionResponse.model_validate(collection).model_copy(
        update={"resources_count": counts[collection.id]}
    )


@router.delete("/{collection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_collection(
    collection_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Delete a collection; its resources are left untouched."""
    collection_service.delete_collection(db, collection_id=collection_id, requester=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{collection_id}/resources",
    response_model=CollectionItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_resource(
    collection_id: int,
    item_data: CollectionItemAdd,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> CollectionItemResponse:
    """Append a resource to a collection."""
    entry = collection_service.add_resource(
        db,
        collection_id=collection_id,
        resource_id=item_data.resource_id,
        requester=current_user,
    )
    return CollectionItemResponse.model_validate(entry)


@router.delete(
    "/{collection_id}/resources/{resource_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_resource(
    collection_id: int,
    resource_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Remove a resource from a collection."""
    collection_service.remove_resource(
        db,
        collection_id=collection_id,
        resource_id=resource_id,
        requester=current_user,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
