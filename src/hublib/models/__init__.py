# src/hublib/models/__init__.py
"""SQLAlchemy models for the HubLib application."""

from .collection import Collection, CollectionResource
from .comment import Comment
from .group import Group, GroupMember
from .rating import ResourceRating
from .resource import Resource, ResourceTag
from .saved import SavedResource
from .share import ResourcePermission, ResourceShare
from .suggestion import Suggestion
from .system import AdminConfig
from .user import User
from .vote import SuggestionVote

__all__ = [
    "AdminConfig",
    "Collection", "CollectionResource",
    "Comment",
    "Group", "GroupMember",
    "Resource", "ResourceTag",
    "ResourcePermission", "ResourceShare",
    "ResourceRating",
    "SavedResource",
    "Suggestion", "SuggestionVote",
    "User",
]
