"""Admin configuration schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class AdminConfigEntry(BaseModel):
    """Stored admin configuration row."""

    key: str
    value: str
    description: str | None
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminConfigUpdate(BaseModel):
    """New value for one configuration key.

    Thresholds take non-negative integers, toggles take booleans. Values are
    validated against the key before they are stored.
    """

    value: bool | int | str
    description: str | None = Field(None, max_length=1000)


class ModerationConfigResponse(BaseModel):
    """Effective moderation settings after defaults are applied."""

    auto_approval_enabled: bool
    consider_downvotes: bool
    approval_thresholds: dict[str, int]
    rejection_thresholds: dict[str, int]


class AdminConfigResponse(BaseModel):
    """All stored rows plus the settings the moderation engine would use."""

    entries: list[AdminConfigEntry]
    effective: ModerationConfigResponse
