# src/hublib/api/v1/endpoints/__init__.py
"""API endpoint modules for version 1."""

from .admin import router as admin_router
from .collections import router as collections_router
from .comments import router as comments_router
from .groups import router as groups_router
from .ratings import router as ratings_router
from .resources import router as resources_router
from .saved import router as saved_router
from .shares import router as shares_router
from .suggestions import router as suggestions_router
from .users import router as users_router

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
