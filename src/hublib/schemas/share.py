"""Share and explicit-permission schemas.

Requests carry two optional target ids for wire compatibility; handlers turn
them into a :data:`ShareTarget` before touching the database, so the
"both set" and "neither set" states never reach the service layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from hublib.core.errors import InvalidInputError


@dataclass(frozen=True)
class ForUser:
    """Grant aimed at a single user."""

    user_id: int


@dataclass(frozen=True)
class ForGroup:
    """Grant aimed at every current member of a group."""

    group_id: int


ShareTarget = ForUser | ForGroup


def resolve_target(
    user_id: int | None,
    group_id: int | None,
    *,
    user_field: str,
    group_field: str,
) -> ShareTarget:
    """Return the single target named by ``user_id`` / ``group_id``.

    Raises:
        InvalidInputError: If both or neither id is set.
    """
    if user_id is not None and group_id is not None:
        raise InvalidInputError(
            f"Specify either {user_field} or {group_field}, not both",
            field=user_field,
        )
    if user_id is not None:
        return ForUser(user_id)
    if group_id is not None:
        return ForGroup(group_id)
    raise InvalidInputError(
        f"One of {user_field} or {group_field} is required",
        field=user_field,
    )


class ShareCreate(BaseModel):
    """Schema for sharing a resource with one user or one group."""

    shared_with_user_id: int | None = None
    shared_with_group_id: int | None = None
    permission: Literal["read", "write"] = "read"
    expires_at: datetime | None = Field(None, description="ISO 8601; omitted means no expiry")

    def target(self) -> ShareTarget:
        """Return the tagged target, rejecting both/neither."""
        return resolve_target(
            self.shared_with_user_id,
            self.shared_with_group_id,
            user_field="shared_with_user_id",
            group_field="shared_with_group_id",
        )


class ShareUpdate(BaseModel):
    """Partial update; send ``expires_at: null`` to clear the expiry."""

    permission: Literal["read", "write"] | None = None
    expires_at: datetime | None = None


class ShareResponse(BaseModel):
    """Schema for share information returned by the API."""

    id: int
    resource_id: int
    shared_with_user_id: int | None
    shared_with_group_id: int | None
    permission: str
    expires_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PermissionCreate(BaseModel):
    """Schema for granting a labelled permission to a user or group."""

    user_id: int | None = None
    group_id: int | None = None
    permission: str = Field(..., min_length=3, max_length=100)
    expires_at: datetime | None = None

    def target(self) -> ShareTarget:
        """Return the tagged target, rejecting both/neither."""
        return resolve_target(
            self.user_id,
            self.group_id,
            user_field="user_id",
            group_field="group_id",
        )


class PermissionUpdate(BaseModel):
    """Partial update of a permission grant."""

    permission: str | None = Field(None, min_length=3, max_length=100)
    expires_at: datetime | None = None


class PermissionResponse(BaseModel):
    """Schema for permission information returned by the API."""

    id: int
    resource_id: int
    user_id: int | None
    group_id: int | None
    permission: str
    expires_at: datetime | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
