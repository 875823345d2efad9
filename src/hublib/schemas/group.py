"""Group-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class GroupCreate(BaseModel):
    """Schema for creating a new group."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)


class GroupUpdate(BaseModel):
    """Partial update of a group; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)


class GroupResponse(BaseModel):
    """Schema for group information returned by the API."""

    id: int
    name: str
    description: str | None
    owner_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupMemberAdd(BaseModel):
    """Request body for adding a user to a group."""

    user_id: int
    role: Literal["member", "admin"] = "member"


class GroupMemberResponse(BaseModel):
    """Membership row returned by the API."""

    group_id: int
    user_id: int
    role: str
    joined_at: datetime

    model_config = ConfigDict(from_attributes=True)
