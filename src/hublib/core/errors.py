"""Typed errors raised by the HubLib service layer.

Every error carries a stable machine-readable ``code`` and the HTTP status the
API layer answers with. Services raise these; the exception handler installed
in :mod:`hublib.main` renders them as ``{"detail": ..., "code": ...}``.
"""

from __future__ import annotations

from fastapi import status


class HubLibError(Exception):
    """Base class for all expected business-rule failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_payload(self) -> dict[str, str]:
        """Return the JSON body for this error."""
        return {"detail": self.message, "code": self.code}


class InvalidInputError(HubLibError):
    """Malformed input rejected before any persistence access."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_INPUT"

    def __init__(self, message: str, *, field: str | None = None, code: str | None = None) -> None:
        super().__init__(message, code=code)
        self.field = field

    def to_payload(self) -> dict[str, str]:
        payload = super().to_payload()
        if self.field is not None:
            payload["field"] = self.field
        return payload


class AuthenticationRequiredError(HubLibError):
    """The operation needs an authenticated caller."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_REQUIRED"


class AccessDeniedError(HubLibError):
    """The caller may not read the requested resource."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "ACCESS_DENIED"


class ForbiddenError(HubLibError):
    """The caller lacks ownership or an admin role for a mutation."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"


class NotFoundError(HubLibError):
    """The referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"


class ConflictError(HubLibError):
    """The request collides with existing state; re-read and retry."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"


__all__ = [
    "HubLibError",
    "InvalidInputError",
    "AuthenticationRequiredError",
    "AccessDeniedError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
]
