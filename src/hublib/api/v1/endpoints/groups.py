"""Group endpoints for the HubLib API."""

from fastapi import APIRouter, Response, status

from hublib.models import Group, GroupMember, Resource
from hublib.schemas.group import (
    GroupCreate,
    GroupMemberAdd,
    GroupMemberResponse,
    GroupResponse,
    GroupUpdate,
)
from hublib.schemas.resource import ResourceResponse
from hublib.services import groups as group_service

from ..dependencies import CurrentUserDep, SessionDep

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("", response_model=list[GroupResponse])
async def list_my_groups(current_user: CurrentUserDep, db: SessionDep) -> list[Group]:
    """List the groups the caller belongs to."""
    return group_service.list_my_groups(db, user=current_user)


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_data: GroupCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Group:
    """Create a group owned by the caller."""
    return group_service.create_group(
        db,
        owner=current_user,
        name=group_data.name,
        description=group_data.description,
    )


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(group_id: int, _current_user: CurrentUserDep, db: SessionDep) -> Group:
    """Get a group by ID."""
    return group_service.get_group_or_404(db, group_id)


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: int,
    group_data: GroupUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Group:
    """Rename or re-describe a group."""
    return group_service.update_group(
        db,
        group_id=group_id,
        user=current_user,
        changes=group_data.model_dump(exclude_unset=True),
    )


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(group_id: int, current_user: CurrentUserDep, db: SessionDep) -> Response:
    """Delete a group."""
    group_service.delete_group(db, group_id=group_id, user=current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{group_id}/members", response_model=list[GroupMemberResponse])
async def list_members(
    group_id: int,
    _current_user: CurrentUserDep,
    db: SessionDep,
) -> list[GroupMember]:
    """List the members of a group."""
    return group_service.list_members(db, group_id=group_id)


@router.post(
    "/{group_id}/members",
    response_model=GroupMemberResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    group_id: int,
    member_data: GroupMemberAdd,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> GroupMember:
    """Add a user to a group."""
    return group_service.add_member(
        db,
        group_id=group_id,
        actor=current_user,
        user_id=member_data.user_id,
        role=member_data.role,
    )


@router.delete("/{group_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_member(
    group_id: int,
    user_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> Response:
    """Remove a user from a group."""
    group_service.remove_member(db, group_id=group_id, actor=current_user, user_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{group_id}/resources", response_model=list[ResourceResponse])
async def list_group_resources(
    group_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> list[Resource]:
    """List the resources shared with a group; members only."""
    return group_service.list_group_resources(db, group_id=group_id, user=current_user)
