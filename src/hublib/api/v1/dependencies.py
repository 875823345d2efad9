"""Shared API dependencies for authentication and common functionality."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from hublib.core.errors import AuthenticationRequiredError, ForbiddenError
from hublib.core.security import InvalidTokenError, decode_access_token
from hublib.db.session import get_db
from hublib.models import User
from hublib.services.cache import CacheInvalidator, get_cache_invalidator
from hublib.services.moderation import (
    DatabaseModerationConfigProvider,
    ModerationConfigProvider,
)

# HTTP Bearer scheme for JWT authentication; missing headers are handled below
bearer_scheme = HTTPBearer(auto_error=False)

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]
CredentialsDep = Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)]


def _resolve_user(db: Session, token: str) -> User:
    try:
        user_id = decode_access_token(token)
    except InvalidTokenError as err:
        raise AuthenticationRequiredError("Could not validate credentials") from err

    user = db.get(User, user_id)
    if user is None:
        raise AuthenticationRequiredError("User not found")
    return user


def get_current_user(credentials: CredentialsDep, db: SessionDep) -> User:
    """Get the current authenticated user from the bearer token.

    Raises:
        AuthenticationRequiredError: If the token is missing, invalid or
            names an unknown user.
    """
    if credentials is None:
        raise AuthenticationRequiredError("Authentication required")
    return _resolve_user(db, credentials.credentials)


def get_optional_user(credentials: CredentialsDep, db: SessionDep) -> User | None:
    """Return the caller when a token is sent, otherwise None.

    A token that is sent but invalid is still rejected.
    """
    if credentials is None:
        return None
    return _resolve_user(db, credentials.credentials)


CurrentUserDep = Annotated[User, Depends(get_current_user)]
OptionalUserDep = Annotated[User | None, Depends(get_optional_user)]


def get_admin_user(current_user: CurrentUserDep) -> User:
    """Require an admin-level role."""
    if not current_user.is_admin:
        raise ForbiddenError("Administrator role required", code="ADMIN_REQUIRED")
    return current_user


AdminUserDep = Annotated[User, Depends(get_admin_user)]


def get_cache() -> CacheInvalidator:
    """Return the shared cache invalidator."""
    return get_cache_invalidator()


CacheDep = Annotated[CacheInvalidator, Depends(get_cache)]


def get_moderation_config_provider(db: SessionDep) -> ModerationConfigProvider:
    """Return the per-request moderation config source."""
    return DatabaseModerationConfigProvider(db)


ModerationConfigDep = Annotated[ModerationConfigProvider, Depends(get_moderation_config_provider)]
