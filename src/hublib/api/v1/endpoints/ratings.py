"""Rating endpoints nested under a resource."""

from fastapi import APIRouter, status

from hublib.models import ResourceRating
from hublib.schemas.rating import RatingAggregateResponse, RatingCreate, RatingResponse
from hublib.services import ratings as rating_service

from ..dependencies import CacheDep, CurrentUserDep, OptionalUserDep, SessionDep

router = APIRouter(prefix="/resources/{resource_id}", tags=["ratings"])


def _aggregate(
    row: ResourceRating | None,
    resource_id: int,
    average: float,
    count: int,
) -> RatingAggregateResponse:
    return RatingAggregateResponse(
        resource_id=resource_id,
        average_rating=average,
        ratings_count=count,
        rating=RatingResponse.model_validate(row) if row is not None else None,
    )


@router.get("/ratings", response_model=list[RatingResponse])
async def list_ratings(
    resource_id: int,
    current_user: OptionalUserDep,
    db: SessionDep,
) -> list[ResourceRating]:
    """List ratings of a readable resource."""
    return rating_service.list_ratings(db, resource_id=resource_id, requester=current_user)


@router.post(
    "/rating",
    response_model=RatingAggregateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def rate_resource(
    resource_id: int,
    rating_data: RatingCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> RatingAggregateResponse:
    """Rate a resource once; use PUT to change the rating."""
    row = rating_service.rate_resource(
        db, resource_id=resource_id, user=current_user, rating=rating_data.rating, cache=cache
    )
    resource = row.resource
    return _aggregate(row, resource_id, resource.average_rating, resource.ratings_count)


@router.put("/rating", response_model=RatingAggregateResponse)
async def update_rating(
    resource_id: int,
    rating_data: RatingCreate,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> RatingAggregateResponse:
    """Change the caller's rating."""
    row = rating_service.update_rating(
        db, resource_id=resource_id, user=current_user, rating=rating_data.rating, cache=cache
    )
    resource = row.resource
    return _aggregate(row, resource_id, resource.average_rating, resource.ratings_count)


@router.delete("/rating", response_model=RatingAggregateResponse)
async def delete_rating(
    resource_id: int,
    current_user: CurrentUserDep,
    db: SessionDep,
    cache: CacheDep,
) -> RatingAggregateResponse:
    """Remove the caller's rating."""
    resource = rating_service.delete_rating(
        db, resource_id=resource_id, user=current_user, cache=cache
    )
    return _aggregate(None, resource_id, resource.average_rating, resource.ratings_count)
