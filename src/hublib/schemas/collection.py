"""Collection-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .common import PageMeta
from .resource import ResourceResponse


class CollectionCreate(BaseModel):
    """Schema for creating a collection."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    is_public: bool = False
    cover_image_url: str | None = None


class CollectionUpdate(BaseModel):
    """Partial update of a collection; omitted fields are left unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    is_public: bool | None = None
    cover_image_url: str | None = None


class CollectionResponse(BaseModel):
    """Schema for collection information returned by the API.

    ``resources_count`` counts the entries the caller can read.
    """

    id: int
    owner_id: int
    name: str
    description: str | None
    is_public: bool
    cover_image_url: str | None
    resources_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CollectionItemAdd(BaseModel):
    """Request body for adding a resource to a collection."""

    resource_id: int


class CollectionItemResponse(BaseModel):
    """A resource listed in a collection, with its position."""

    resource: ResourceResponse
    order_index: int
    added_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CollectionDetailResponse(CollectionResponse):
    """A collection with the entries the caller can read, in order."""

    items: list[CollectionItemResponse]


class CollectionListResponse(BaseModel):
    """Paginated collection listing."""

    collections: list[CollectionResponse]
    pagination: PageMeta
