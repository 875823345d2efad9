"""Comment-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CommentCreate(BaseModel):
    """Schema for adding a comment to a resource."""

    content: str = Field(..., min_length=1, max_length=5000, description="Plain-text comment")


class CommentUpdate(BaseModel):
    """Schema for editing a comment."""

    content: str = Field(..., min_length=1, max_length=5000, description="Plain-text comment")


class CommentResponse(BaseModel):
    """Schema for comment information returned by the API."""

    id: int
    resource_id: int
    user_id: int
    content: str
    created_at: datetime
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)
