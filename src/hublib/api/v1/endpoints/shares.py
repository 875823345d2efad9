"""Share and explicit-permission endpoints nested under a resource."""

from fastapi import APIRouter, Response, status

from hublib.models import ResourcePermission, ResourceShare
from hublib.schemas.share import (
    PermissionCreate,
    PermissionResponse,
    PermissionUpdate,
    ShareCreate,
    ShareResponse,
    ShareUpdate,
)
from hublib.services import sharing

from ..dependencies import CacheDep, CurrentUserDep, SessionDep

router = APIRouter(prefix="/resources/{resource_id}", tags=["sharing"])


@router.get("/shares", response_model=list[ShareResponse])
async def list_shares(
    resource_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> list[ResourceShare]:
    """List the shares of a resource (owner only)."""
    return sharing.list_shares(db, resource_id=resource_id, owner=current_user)


@router.post("/shares", response_model=ShareResponse, status_code=status.HTTP_201_CREATED)
async def create_share(
    resource_id: int,
    share_data: ShareCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> ResourceShare:
    """Share a resource with exactly one user or one group."""
    target = share_data.target()
    return sharing.create_share(
        db,
        resource_id=resource_id,
        owner=current_user,
        target=target,
        permission=share_data.permission,
        expires_at=share_data.expires_at,
        cache=cache,
    )


@router.put("/shares/{share_id}", response_model=ShareResponse)
async def update_share(
    resource_id: int,
    share_id: int,
    share_data: ShareUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> ResourceShare:
    """Change the permission and/or expiry of a share."""
    return sharing.update_share(
        db,
        resource_id=resource_id,
        share_id=share_id,
        owner=current_user,
        changes=share_data.model_dump(exclude_unset=True),
        cache=cache,
    )


@router.delete("/shares/{share_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_share(
    resource_id: int,
    share_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Response:
    """Revoke a share."""
    sharing.delete_share(
        db, resource_id=resource_id, share_id=share_id, owner=current_user, cache=cache
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/permissions", response_model=list[PermissionResponse])
async def list_permissions(
    resource_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> list[ResourcePermission]:
    """List explicit permissions (owner or admin)."""
    return sharing.list_permissions(db, resource_id=resource_id, actor=current_user)


@router.post(
    "/permissions",
    response_model=PermissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_permission(
    resource_id: int,
    permission_data: PermissionCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> ResourcePermission:
    """Grant a labelled permission to one user or one group."""
    target = permission_data.target()
    return sharing.create_permission(
        db,
        resource_id=resource_id,
        actor=current_user,
        target=target,
        permission=permission_data.permission,
        expires_at=permission_data.expires_at,
        cache=cache,
    )


@router.put("/permissions/{permission_id}", response_model=PermissionResponse)
async def update_permission(
    resource_id: int,
    permission_id: int,
    permission_data: PermissionUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> ResourcePermission:
    """Change the label and/or expiry of a permission."""
    return sharing.update_permission(
        db,
        resource_id=resource_id,
        permission_id=permission_id,
        actor=current_user,
        changes=permission_data.model_dump(exclude_unset=True),
        cache=cache,
    )


@router.delete("/permissions/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_permission(
    resource_id: int,
    permission_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Response:
    """Revoke a permission."""
    sharing.delete_permission(
        db,
        resource_id=resource_id,
        permission_id=permission_id,
        actor=current_user,
        cache=cache,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
