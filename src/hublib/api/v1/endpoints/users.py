"""User profile endpoints."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query

from hublib.core.settings import settings
from hublib.models import User
from hublib.schemas.common import PageMeta
from hublib.schemas.resource import ResourceListResponse, ResourceResponse
from hublib.schemas.user import UserResponse
from hublib.services.resource_query import ResourceFilters, list_resources
from hublib.services.users import get_user_or_404

from ..dependencies import CurrentUserDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserResponse)
async def read_me(current_user: CurrentUserDep) -> User:
    """Return the caller's profile."""
    return current_user


@router.get("/{user_id}", response_model=UserResponse)
async def read_user(user_id: int, db: SessionDep) -> User:
    """Return a user's public profile."""
    return get_user_or_404(db, user_id)


@router.get("/{user_id}/resources", response_model=ResourceListResponse)
async def list_user_resources(
    user_id: int,
    db: SessionDep,
    current_user: OptionalUserDep,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = settings.default_page_size,
) -> ResourceListResponse:
    """List a user's resources that the caller can see."""
    get_user_or_404(db, user_id)
    result = list_resources(
        db,
        current_user,
        ResourceFilters(owner_id=user_id, page=page, limit=limit),
    )
    return ResourceListResponse(
        resources=[ResourceResponse.model_validate(item) for item in result.items],
        pagination=PageMeta.build(page=result.page, limit=result.limit, total=result.total),
    )
