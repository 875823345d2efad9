# mypy: ignore-errors
# tests/services/test_maintenance.py
"""Tests for the maintenance script helpers."""

from datetime import timedelta

from hublib.db.time import utcnow
from hublib.models import AdminConfig, ResourcePermission, ResourceShare
from hublib.scripts.maintenance import create_user, purge_expired_grants, seed_moderation_config


def test_purge_expired_grants(db_session, owner, other_user, make_resource):
    """Only grants past their expiry are removed."""
    resource = make_resource(owner, visibility="shared_users")
    past = utcnow() - timedelta(days=1)
    future = utcnow() + timedelta(days=1)
    db_session.add_all(
        [
            ResourceShare(resource_id=resource.id, shared_with_user_id=other_user.id, expires_at=past),
            ResourceShare(resource_id=resource.id, shared_with_user_id=owner.id, expires_at=future),
            ResourcePermission(
                resource_id=resource.id, user_id=other_user.id, permission="view", expires_at=past
            ),
            ResourcePermission(resource_id=resource.id, user_id=owner.id, permission="view"),
        ]
    )
    db_session.commit()

    assert purge_expired_grants(db_session, dry_run=True) == (1, 1)
    assert db_session.query(ResourceShare).count() == 2

    assert purge_expired_grants(db_session) == (1, 1)
    assert db_session.query(ResourceShare).count() == 1
    assert db_session.query(ResourcePermission).count() == 1


def test_seed_moderation_config_keeps_existing(db_session):
    """Seeding fills in missing keys without touching stored ones."""
    db_session.add(AdminConfig(key="auto_approval_vote_threshold_tag", value="9"))
    db_session.commit()

    created = seed_moderation_config(db_session)

    keys = {row.key for row in created}
    assert "auto_approval_vote_threshold_tag" not in keys
    assert "auto_approval_enabled" in keys
    stored = db_session.query(AdminConfig).filter_by(key="auto_approval_vote_threshold_tag").one()
    assert stored.value == "9"


def test_create_user(db_session):
    """Users created from the command line get the requested role."""
    user = create_user(db_session, username="ops", role="admin")
    assert user.id is not None
    assert user.is_admin
