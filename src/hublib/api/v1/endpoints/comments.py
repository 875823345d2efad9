"""Comment endpoints nested under a resource."""

from fastapi import APIRouter, Response, status

from hublib.models import Comment
from hublib.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from hublib.services import comments as comment_service

from ..dependencies import CacheDep, CurrentUserDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/resources/{resource_id}/comments", tags=["comments"])


@router.get("", response_model=list[CommentResponse])
async def list_comments(
    resource_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> list[Comment]:
    """List comments on a readable resource."""
    return comment_service.list_comments(db, resource_id=resource_id, requester=current_user)


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    resource_id: int,
    comment_data: CommentCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Comment:
    """Comment on a readable resource."""
    return comment_service.add_comment(
        db,
        resource_id=resource_id,
        author=current_user,
        content=comment_data.content,
        cache=cache,
    )


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    resource_id: int,
    comment_id: int,
    comment_data: CommentUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Comment:
    """Edit a comment."""
    return comment_service.update_comment(
        db,
        resource_id=resource_id,
        comment_id=comment_id,
        requester=current_user,
        content=comment_data.content,
        cache=cache,
    )


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    resource_id: int,
    comment_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Response:
    """Delete a comment."""
    comment_service.delete_comment(
        db,
        resource_id=resource_id,
        comment_id=comment_id,
        requester=current_user,
        cache=cache,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
