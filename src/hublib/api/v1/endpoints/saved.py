"""Saved-resource endpoints for the HubLib API.

Registered ahead of the resource router so ``/resources/saved`` is not read
as a resource id.
"""

from typing import Annotated

from fastapi import APIRouter, Query, Response, status

from hublib.core.settings import settings
from hublib.schemas.common import MessageResponse, PageMeta
from hublib.schemas.resource import ResourceListResponse, ResourceResponse
from hublib.services import saved as saved_service

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/resources", tags=["saved"])


@router.get("/saved", response_model=ResourceListResponse)
async def list_saved(
    current_user: CurrentUserDep,
    db: SessionDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = settings.default_page_size,
) -> ResourceListResponse:
    """List the caller's saved resources, most recently saved first."""
    result = saved_service.list_saved(db, user=current_user, page=page, limit=limit)
    return ResourceListResponse(
        resources=[ResourceResponse.model_validate(item) for item in result.items],
        pagination=PageMeta.build(page=result.page, limit=result.limit, total=result.total),
    )


@router.post(
    "/{resource_id}/save",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def save_resource(
    resource_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> MessageResponse:
    """Save a readable resource for later."""
    saved_service.save_resource(db, resource_id=resource_id, user=current_user)
    return MessageResponse(message="Resource saved")


@router.delete("/{resource_id}/save", status_code=status.HTTP_204_NO_CONTENT)
async def unsave_resource(
    resource_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Remove a resource from the caller's saved list."""
    saved_service.unsave_resource(db, resource_id=resource_id, user=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
