# src/hublib/schemas/__init__.py
"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .admin import AdminConfigEntry, AdminConfigResponse, AdminConfigUpdate
from .collection import (
    CollectionCreate,
    CollectionDetailResponse,
    CollectionItemAdd,
    CollectionItemResponse,
    CollectionListResponse,
    CollectionResponse,
    CollectionUpdate,
)
from .comment import CommentCreate, CommentResponse, CommentUpdate
from .common import MessageResponse, PageMeta
from .group import GroupCreate, GroupMemberAdd, GroupMemberResponse, GroupResponse, GroupUpdate
from .rating import RatingAggregateResponse, RatingCreate, RatingResponse
from .resource import ResourceCreate, ResourceListResponse, ResourceResponse, ResourceUpdate
from .share import (
    ForGroup,
    ForUser,
    PermissionCreate,
    PermissionResponse,
    PermissionUpdate,
    ShareCreate,
    ShareResponse,
    ShareTarget,
    ShareUpdate,
)
from .suggestion import SuggestionCreate, SuggestionListResponse, SuggestionResponse
from .user import UserResponse
from .vote import VoteCreate, VoteResponse, VoteTallyResponse

__all__ = [
    "AdminConfigEntry", "AdminConfigResponse", "AdminConfigUpdate",
    "CollectionCreate", "CollectionDetailResponse", "CollectionItemAdd", "CollectionItemResponse",
    "CollectionListResponse", "CollectionResponse", "CollectionUpdate",
    "CommentCreate", "CommentResponse", "CommentUpdate",
    "MessageResponse", "PageMeta",
    "GroupCreate", "GroupMemberAdd", "GroupMemberResponse", "GroupResponse", "GroupUpdate",
    "RatingAggregateResponse", "RatingCreate", "RatingResponse",
    "ResourceCreate", "ResourceListResponse", "ResourceResponse", "ResourceUpdate",
    "ForGroup", "ForUser", "ShareTarget",
    "PermissionCreate", "PermissionResponse", "PermissionUpdate",
    "ShareCreate", "ShareResponse", "ShareUpdate",
    "SuggestionCreate", "SuggestionListResponse", "SuggestionResponse",
    "UserResponse",
    "VoteCreate", "VoteResponse", "VoteTallyResponse",
]
