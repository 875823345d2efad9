# src/hublib/api/v1/endpoints/suggestions.py
"""Suggestion and vote endpoints for the HubLib API."""

from typing import Annotated, Literal

from fastapi import APIRouter, Query, Response, status

from hublib.core.settings import settings
from hublib.models import Suggestion
from hublib.schemas.common import PageMeta
from hublib.schemas.suggestion import (
    SuggestionCreate,
    SuggestionListResponse,
    SuggestionResponse,
    SuggestionStatus,
    SuggestionType,
)
from hublib.schemas.vote import VoteCreate, VoteResponse, VoteTallyResponse
from hublib.services import suggestions as suggestion_service
from hublib.services import votes as vote_service
from hublib.services.votes import VOTE_ADDED, VOTE_CHANGED, VoteOutcome

from ..dependencies import (
    CacheDep,
    CurrentUserDep,
    ModerationConfigDep,
    OptionalUserDep,
    SessionDep,
)

router = APIRouter(prefix="/suggestions", tags=["suggestions"])

_VOTE_MESSAGES = {
    VOTE_ADDED: "Vote recorded",
    VOTE_CHANGED: "Vote changed",
}


def _to_response(suggestion: Suggestion, user_vote: str | None) -> SuggestionResponse:
    return SuggestionResponse.model_validate(suggestion).model_copy(update={"user_vote": user_vote})


def _vote_response(outcome: VoteOutcome) -> VoteResponse:
    return VoteResponse(
        message=_VOTE_MESSAGES.get(outcome.action, "Vote removed"),
        suggestion=_to_response(outcome.suggestion, outcome.tally.user_vote),
        votes=VoteTallyResponse(
            total_upvotes=outcome.tally.total_upvotes,
            total_downvotes=outcome.tally.total_downvotes,
            user_vote=outcome.tally.user_vote,  # type: ignore[arg-type]
        ),
    )


@router.get("", response_model=SuggestionListResponse)
async def list_suggestions(
    db: SessionDep,
    current_user: OptionalUserDep,
    type: SuggestionType | None = None,  # noqa: A002
    status_filter: Annotated[SuggestionStatus | None, Query(alias="status")] = None,
    sort_by: Literal["votes_count", "created_at"] = "votes_count",
    sort_order: Literal["asc", "desc"] = "desc",
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = settings.default_page_size,
) -> SuggestionListResponse:
    """List suggestions, with the caller's vote when authenticated."""
    result = suggestion_service.list_suggestions(
        db,
        suggestion_type=type,
        status=status_filter,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    user_votes: dict[int, str] = {}
    if current_user is not None:
        user_votes = suggestion_service.user_votes_for(
            db, current_user.id, [item.id for item in result.items]
        )
    return SuggestionListResponse(
        suggestions=[_to_response(item, user_votes.get(item.id)) for item in result.items],
        pagination=PageMeta.build(page=result.page, limit=result.limit, total=result.total),
    )


@router.post("", response_model=SuggestionResponse, status_code=status.HTTP_201_CREATED)
async def create_suggestion(
    suggestion_data: SuggestionCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> SuggestionResponse:
    """Propose a category, tag, resource type or filter."""
    suggestion = suggestion_service.create_suggestion(
        db,
        author=current_user,
        name=suggestion_data.name,
        suggestion_type=suggestion_data.type,
        description=suggestion_data.description,
        cache=cache,
    )
    return _to_response(suggestion, None)


@router.get("/{suggestion_id}", response_model=SuggestionResponse)
async def get_suggestion(
    suggestion_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> SuggestionResponse:
    """Get a suggestion with the caller's vote."""
    suggestion = suggestion_service.get_suggestion_or_404(db, suggestion_id)
    user_vote = None
    if current_user is not None:
        user_vote = vote_service.get_user_vote(db, suggestion_id, current_user.id)
    return _to_response(suggestion, user_vote)


@router.delete("/{suggestion_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_suggestion(
    suggestion_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> Response:
    """Delete a suggestion and its votes."""
    suggestion_service.delete_suggestion(
        db, suggestion_id=suggestion_id, requester=current_user, cache=cache
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{suggestion_id}/vote", response_model=VoteResponse)
async def cast_vote(
    suggestion_id: int,
    vote_data: VoteCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
    config_provider: ModerationConfigDep,
) -> VoteResponse:
    """Vote on a suggestion; repeating the same vote retracts it."""
    outcome = vote_service.cast_vote(
        db,
        suggestion_id=suggestion_id,
        user_id=current_user.id,
        vote_type=vote_data.vote_type,
        config=config_provider.load(),
        cache=cache,
    )
    return _vote_response(outcome)


@router.delete("/{suggestion_id}/vote", response_model=VoteResponse)
async def remove_vote(
    suggestion_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
    config_provider: ModerationConfigDep,
) -> VoteResponse:
    """Retract the caller's vote."""
    outcome = vote_service.remove_vote(
        db,
        suggestion_id=suggestion_id,
        user_id=current_user.id,
        config=config_provider.load(),
        cache=cache,
    )
    return _vote_response(outcome)
