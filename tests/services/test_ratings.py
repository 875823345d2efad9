# mypy: ignore-errors
# tests/services/test_ratings.py
"""Tests for rating aggregation."""

import pytest

from hublib.core.errors import AccessDeniedError, ConflictError, NotFoundError
from hublib.models import ResourceShare
from hublib.services.ratings import delete_rating, rate_resource, update_rating


def test_average_is_mean_of_ratings(db_session, make_user, owner, make_resource, cache):
    """average_rating and ratings_count follow the rating rows."""
    resource = make_resource(owner)
    for value in (5, 4, 2):
        rate_resource(db_session, resource_id=resource.id, user=make_user(), rating=value, cache=cache)

    db_session.refresh(resource)
    assert resource.ratings_count == 3
    assert resource.average_rating == pytest.approx(11 / 3)
    assert f"resource:{resource.id}" in cache.keys


def test_update_and_delete_recompute(db_session, owner, other_user, make_resource, cache):
    """Changing or removing a rating recomputes the aggregate."""
    resource = make_resource(owner)
    rate_resource(db_session, resource_id=resource.id, user=other_user, rating=1, cache=cache)

    update_rating(db_session, resource_id=resource.id, user=other_user, rating=5, cache=cache)
    db_session.refresh(resource)
    assert resource.average_rating == pytest.approx(5.0)

    updated = delete_rating(db_session, resource_id=resource.id, user=other_user, cache=cache)
    assert updated.ratings_count == 0
    assert updated.average_rating == 0


def test_second_rating_conflicts(db_session, owner, other_user, make_resource, cache):
    """Each user rates a resource once."""
    resource = make_resource(owner)
    rate_resource(db_session, resource_id=resource.id, user=other_user, rating=3, cache=cache)

    with pytest.raises(ConflictError) as exc_info:
        rate_resource(db_session, resource_id=resource.id, user=other_user, rating=4, cache=cache)
    assert exc_info.value.code == "ALREADY_RATED"


def test_rating_requires_read_access(db_session, owner, other_user, make_resource, cache):
    """Unreadable resources cannot be rated."""
    resource = make_resource(owner, visibility="private")
    with pytest.raises(AccessDeniedError):
        rate_resource(db_session, resource_id=resource.id, user=other_user, rating=3, cache=cache)


def test_update_missing_rating(db_session, owner, other_user, make_resource, cache):
    """Updating a rating that does not exist is a 404."""
    resource = make_resource(owner)
    with pytest.raises(NotFoundError):
        update_rating(db_session, resource_id=resource.id, user=other_user, rating=2, cache=cache)


def test_update_rating_after_share_revoked(db_session, owner, other_user, make_resource, cache):
    """Losing read access also blocks changing an earlier rating."""
    resource = make_resource(owner, visibility="shared_users")
    share = ResourceShare(resource_id=resource.id, shared_with_user_id=other_user.id)
    db_session.add(share)
    db_session.commit()
    rate_resource(db_session, resource_id=resource.id, user=other_user, rating=2, cache=cache)

    db_session.delete(share)
    db_session.commit()

    with pytest.raises(AccessDeniedError):
        update_rating(db_session, resource_id=resource.id, user=other_user, rating=5, cache=cache)
    db_session.rollback()
    db_session.refresh(resource)
    assert resource.average_rating == pytest.approx(2.0)
