# mypy: ignore-errors
# tests/v1/test_admin.py
"""Tests for admin configuration and moderation endpoints."""

from fastapi import status


def _suggest(client, headers, name="Quantum"):
    return client.post(
        "/api/v1/suggestions", json={"name": name, "type": "category"}, headers=headers
    ).json()


def test_admin_routes_require_admin(client, owner_headers):
    """Regular users get ADMIN_REQUIRED."""
    response = client.get("/api/v1/admin/config", headers=owner_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["code"] == "ADMIN_REQUIRED"


def test_get_config_defaults(client, admin_headers):
    """With nothing stored, the effective config shows the defaults."""
    response = client.get("/api/v1/admin/config", headers=admin_headers)

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["entries"] == []
    assert body["effective"]["approval_thresholds"]["category"] == 5
    assert body["effective"]["rejection_thresholds"]["category"] == 3


def test_set_config_and_apply(client, admin_headers, owner_headers, other_headers):
    """A lowered threshold applies to the next vote."""
    update = client.put(
        "/api/v1/admin/config/auto_approval_vote_threshold_category",
        json={"value": 1, "description": "fast track"},
        headers=admin_headers,
    )
    assert update.status_code == status.HTTP_200_OK
    assert update.json()["value"] == "1"

    suggestion = _suggest(client, owner_headers)
    vote = client.post(
        f"/api/v1/suggestions/{suggestion['id']}/vote",
        json={"vote_type": "upvote"},
        headers=other_headers,
    )
    assert vote.json()["suggestion"]["status"] == "approved"


def test_set_config_rejects_bad_values(client, admin_headers):
    """Unknown keys and mistyped values are 400s."""
    unknown = client.put(
        "/api/v1/admin/config/not_a_key", json={"value": 1}, headers=admin_headers
    )
    negative = client.put(
        "/api/v1/admin/config/auto_rejection_downvote_threshold_tag",
        json={"value": -2},
        headers=admin_headers,
    )
    assert unknown.status_code == status.HTTP_400_BAD_REQUEST
    assert negative.status_code == status.HTTP_400_BAD_REQUEST


def test_disable_auto_approval(client, admin_headers, owner_headers, make_user):
    """With automation off, votes never change the status."""
    client.put(
        "/api/v1/admin/config/auto_approval_enabled", json={"value": False}, headers=admin_headers
    )
    client.put(
        "/api/v1/admin/config/auto_approval_vote_threshold_category",
        json={"value": 1},
        headers=admin_headers,
    )
    suggestion = _suggest(client, owner_headers)

    vote = client.post(
        f"/api/v1/suggestions/{suggestion['id']}/vote",
        json={"vote_type": "upvote"},
        headers=admin_headers,
    )

    assert vote.json()["suggestion"]["status"] == "pending"


def test_manual_overrides(client, admin_user, admin_headers, owner_headers):
    """Admins approve, reject and reset regardless of votes."""
    suggestion = _suggest(client, owner_headers)
    base = f"/api/v1/admin/suggestions/{suggestion['id']}"

    approved = client.put(f"{base}/approve", headers=admin_headers).json()
    assert approved["status"] == "approved"
    assert approved["reviewed_by"] == admin_user.id

    rejected = client.put(f"{base}/reject", headers=admin_headers).json()
    assert rejected["status"] == "rejected"

    reset = client.put(f"{base}/reset", headers=admin_headers).json()
    assert reset["status"] == "pending"


def test_moderation_queue(client, admin_headers, owner_headers):
    """The queue lists pending suggestions oldest first."""
    first = _suggest(client, owner_headers, name="Alpha")
    second = _suggest(client, owner_headers, name="Beta")
    client.put(f"/api/v1/admin/suggestions/{second['id']}/approve", headers=admin_headers)

    queue = client.get("/api/v1/admin/suggestions", headers=admin_headers).json()

    assert [item["id"] for item in queue["suggestions"]] == [first["id"]]


def test_evaluate_uses_new_thresholds(client, admin_headers, owner_headers, other_headers):
    """Re-evaluation applies thresholds changed after the votes."""
    suggestion = _suggest(client, owner_headers)
    client.post(
        f"/api/v1/suggestions/{suggestion['id']}/vote",
        json={"vote_type": "upvote"},
        headers=other_headers,
    )
    client.put(
        "/api/v1/admin/config/auto_approval_vote_threshold_category",
        json={"value": 1},
        headers=admin_headers,
    )

    response = client.post(
        f"/api/v1/admin/suggestions/{suggestion['id']}/evaluate", headers=admin_headers
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "approved"
