"""Suggestion-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import PageMeta

SuggestionType = Literal["category", "tag", "resource_type", "filter"]
SuggestionStatus = Literal["pending", "approved", "rejected"]


class SuggestionCreate(BaseModel):
    """Schema for proposing a new taxonomy item."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)
    type: SuggestionType

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        """Trim surrounding whitespace and reject blank names."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Name must not be blank")
        return stripped


class SuggestionResponse(BaseModel):
    """Schema for suggestion information returned by the API."""

    id: int
    name: str
    description: str | None
    type: str
    status: str
    suggested_by: int | None
    votes_count: int
    reviewed_at: datetime | None
    reviewed_by: int | None
    created_at: datetime
    updated_at: datetime
    user_vote: Literal["upvote", "downvote"] | None = None

    model_config = ConfigDict(from_attributes=True)


class SuggestionListResponse(BaseModel):
    """One page of suggestions."""

    suggestions: list[SuggestionResponse]
    pagination: PageMeta
