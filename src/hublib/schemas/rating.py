"""Rating-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RatingCreate(BaseModel):
    """Schema for rating a resource, also used when changing a rating."""

    rating: int = Field(..., ge=1, le=5, description="Integer score from 1 to 5")


class RatingResponse(BaseModel):
    """One user's rating of a resource."""

    id: int
    resource_id: int
    user_id: int
    rating: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RatingAggregateResponse(BaseModel):
    """Resource aggregate after a rating mutation."""

    resource_id: int
    average_rating: float
    ratings_count: int
    rating: RatingResponse | None = None
