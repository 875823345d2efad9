"""Resource-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import PageMeta

ResourceType = Literal["file_upload", "external_link", "github_repo"]
Visibility = Literal["public", "private", "shared_users", "shared_groups"]

MAX_TAGS = 20


def _normalize_tags(values: list[str] | None) -> list[str] | None:
    if values is None:
        return None
    seen: dict[str, None] = {}
    for raw in values:
        tag = raw.strip()
        if not tag:
            continue
        if len(tag) > 100:
            raise ValueError("Tags must be at most 100 characters")
        seen.setdefault(tag, None)
    if len(seen) > MAX_TAGS:
        raise ValueError(f"At most {MAX_TAGS} tags are allowed")
    return list(seen)


class ResourceCreate(BaseModel):
    """Schema for publishing a new resource."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1, max_length=20000)
    category: str | None = Field(None, max_length=255)
    tags: list[str] = Field(default_factory=list, description="Free-form tags, deduplicated")
    resource_type: ResourceType = "external_link"
    visibility: Visibility = "public"
    external_url: str | None = None
    github_url: str | None = None
    file_url: str | None = None
    language: str | None = Field(None, max_length=100)
    license: str | None = Field(None, max_length=100)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str]) -> list[str]:
        """Strip, drop blanks and deduplicate tags."""
        return _normalize_tags(v) or []


class ResourceUpdate(BaseModel):
    """Partial update of a resource; omitted fields are left unchanged."""

    title: str | None = Field(None, min_length=1, max_length=500)
    description: str | None = Field(None, min_length=1, max_length=20000)
    category: str | None = Field(None, max_length=255)
    tags: list[str] | None = None
    resource_type: ResourceType | None = None
    visibility: Visibility | None = None
    external_url: str | None = None
    github_url: str | None = None
    file_url: str | None = None
    language: str | None = Field(None, max_length=100)
    license: str | None = Field(None, max_length=100)

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: list[str] | None) -> list[str] | None:
        """Strip, drop blanks and deduplicate tags."""
        return _normalize_tags(v)


class ResourceResponse(BaseModel):
    """Schema for resource information returned by the API."""

    id: int
    owner_id: int
    title: str
    description: str
    category: str | None
    tags: list[str]
    resource_type: str
    visibility: str
    external_url: str | None
    github_url: str | None
    file_url: str | None
    language: str | None
    license: str | None
    views_count: int
    downloads_count: int
    average_rating: float
    ratings_count: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ResourceListResponse(BaseModel):
    """One page of resources visible to the caller."""

    resources: list[ResourceResponse]
    pagination: PageMeta


class CounterResponse(BaseModel):
    """Counter values after a view or download was recorded."""

    id: int
    views_count: int
    downloads_count: int
