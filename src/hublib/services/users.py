"""Profile reads."""

from sqlalchemy.orm import Session

from hublib.core.errors import NotFoundError
from hublib.models import User


def get_user_or_404(db: Session, user_id: int) -> User:
    """Load a user profile or raise :class:`NotFoundError`."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    return user
