# src/hublib/services/__init__.py
"""Business logic services for the HubLib application."""

from .cache import CacheInvalidator, NullCacheInvalidator, RedisCacheInvalidator
from .moderation import (
    DatabaseModerationConfigProvider,
    ModerationConfig,
    ModerationConfigProvider,
    ModerationService,
    decide_transition,
)
from .resource_query import ResourceFilters, list_resources, readable_resources_clause
from .visibility import can_read, can_write, ensure_readable, ensure_writable
from .votes import VoteTally, cast_vote, remove_vote, tally_votes

__all__ = [
    "CacheInvalidator", "NullCacheInvalidator", "RedisCacheInvalidator",
    "DatabaseModerationConfigProvider", "ModerationConfig", "ModerationConfigProvider",
    "ModerationService", "decide_transition",
    "ResourceFilters", "list_resources", "readable_resources_clause",
    "can_read", "can_write", "ensure_readable", "ensure_writable",
    "VoteTally", "cast_vote", "remove_vote", "tally_votes",
]
