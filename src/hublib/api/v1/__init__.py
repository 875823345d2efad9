# src/hublib/api/v1/__init__.py
"""Version 1 API endpoints."""

from .endpoints import (
    admin_router,
    collections_router,
    comments_router,
    groups_router,
    ratings_router,
    resources_router,
    saved_router,
    shares_router,
    suggestions_router,
    users_router,
)

__all__ = [
    "admin_router",
    "collections_router",
    "comments_router",
    "groups_router",
    "ratings_router",
    "resources_router",
    "saved_router",
    "shares_router",
    "suggestions_router",
    "users_router",
]
