# mypy: ignore-errors
# tests/v1/test_suggestions.py
"""Tests for suggestion and voting endpoints."""

import pytest
from fastapi import status

from hublib.core.security import create_access_token


@pytest.fixture()
def voter_headers(make_user):
    """Return a factory of bearer headers for fresh users."""

    def _make():
        user = make_user()
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _make


def _suggest(client, headers, name="Machine Learning", type="category"):
    response = client.post(
        "/api/v1/suggestions", json={"name": name, "type": type}, headers=headers
    )
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


def _vote(client, suggestion_id, headers, vote_type="upvote"):
    return client.post(
        f"/api/v1/suggestions/{suggestion_id}/vote", json={"vote_type": vote_type}, headers=headers
    )


def test_create_suggestion(client, owner, owner_headers):
    """New suggestions start pending with no votes."""
    data = _suggest(client, owner_headers, name="  Data Science  ")

    assert data["name"] == "Data Science"
    assert data["status"] == "pending"
    assert data["votes_count"] == 0
    assert data["suggested_by"] == owner.id


def test_duplicate_pending_suggestion_conflicts(client, owner_headers, other_headers):
    """The same name and type cannot be proposed twice while pending."""
    _suggest(client, owner_headers)

    response = client.post(
        "/api/v1/suggestions",
        json={"name": "Machine Learning", "type": "category"},
        headers=other_headers,
    )

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "SUGGESTION_EXISTS"


def test_rejected_suggestion_cannot_be_reproposed(client, owner_headers, admin_headers, voter_headers):
    """Proposing a rejected item again is a conflict that leaves it untouched."""
    original = _suggest(client, owner_headers)
    for _ in range(3):
        response = _vote(client, original["id"], voter_headers(), "downvote")
    assert response.json()["suggestion"]["status"] == "rejected"

    again = client.post(
        "/api/v1/suggestions",
        json={"name": "Machine Learning", "type": "category"},
        headers=voter_headers(),
    )

    assert again.status_code == status.HTTP_409_CONFLICT
    assert again.json()["code"] == "SUGGESTION_EXISTS"
    current = client.get(f"/api/v1/suggestions/{original['id']}").json()
    assert current["status"] == "rejected"
    assert current["votes_count"] == -3
    assert current["reviewed_at"] is not None

    reset = client.put(f"/api/v1/admin/suggestions/{original['id']}/reset", headers=admin_headers)
    assert reset.json()["status"] == "pending"


def test_vote_toggle_via_api(client, owner_headers, other_headers):
    """Voting the same way twice removes the vote."""
    suggestion = _suggest(client, owner_headers)

    first = _vote(client, suggestion["id"], other_headers)
    assert first.status_code == status.HTTP_200_OK
    assert first.json()["message"] == "Vote recorded"
    assert first.json()["votes"] == {"total_upvotes": 1, "total_downvotes": 0, "user_vote": "upvote"}

    second = _vote(client, suggestion["id"], other_headers)
    assert second.json()["message"] == "Vote removed"
    assert second.json()["suggestion"]["votes_count"] == 0
    assert second.json()["votes"]["user_vote"] is None


def test_vote_change_via_api(client, owner_headers, other_headers):
    """Switching direction reports a change."""
    suggestion = _suggest(client, owner_headers)
    _vote(client, suggestion["id"], other_headers, "upvote")

    response = _vote(client, suggestion["id"], other_headers, "downvote")

    assert response.json()["message"] == "Vote changed"
    assert response.json()["suggestion"]["votes_count"] == -1


def test_auto_approval_at_threshold(client, owner_headers, voter_headers):
    """Five net upvotes approve a category with default thresholds."""
    suggestion = _suggest(client, owner_headers)

    for _ in range(4):
        response = _vote(client, suggestion["id"], voter_headers())
    assert response.json()["suggestion"]["status"] == "pending"

    response = _vote(client, suggestion["id"], voter_headers())
    assert response.json()["suggestion"]["status"] == "approved"
    assert response.json()["suggestion"]["reviewed_by"] is None


def test_auto_rejection(client, owner_headers, voter_headers):
    """Three downvotes with no upvotes reject."""
    suggestion = _suggest(client, owner_headers)

    for _ in range(3):
        response = _vote(client, suggestion["id"], voter_headers(), "downvote")

    assert response.json()["suggestion"]["status"] == "rejected"


def test_remove_vote_endpoint(client, owner_headers, other_headers):
    """DELETE on the vote retracts it; a second DELETE is a 404."""
    suggestion = _suggest(client, owner_headers)
    _vote(client, suggestion["id"], other_headers)

    removed = client.delete(f"/api/v1/suggestions/{suggestion['id']}/vote", headers=other_headers)
    missing = client.delete(f"/api/v1/suggestions/{suggestion['id']}/vote", headers=other_headers)

    assert removed.status_code == status.HTTP_200_OK
    assert removed.json()["message"] == "Vote removed"
    assert missing.status_code == status.HTTP_404_NOT_FOUND


def test_vote_requires_auth(client, owner_headers):
    """Anonymous callers cannot vote."""
    suggestion = _suggest(client, owner_headers)
    response = client.post(
        f"/api/v1/suggestions/{suggestion['id']}/vote", json={"vote_type": "upvote"}
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_invalid_vote_type(client, owner_headers):
    """Unknown vote types fail validation."""
    suggestion = _suggest(client, owner_headers)
    response = _vote(client, suggestion["id"], owner_headers, "sideways")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_list_suggestions_includes_user_vote(client, owner_headers, other_headers):
    """Authenticated listings carry the caller's vote."""
    first = _suggest(client, owner_headers, name="Rust")
    _suggest(client, owner_headers, name="Go")
    _vote(client, first["id"], other_headers)

    response = client.get("/api/v1/suggestions", headers=other_headers)

    body = response.json()
    assert body["pagination"]["total"] == 2
    by_name = {item["name"]: item for item in body["suggestions"]}
    assert by_name["Rust"]["user_vote"] == "upvote"
    assert by_name["Go"]["user_vote"] is None
    assert body["suggestions"][0]["name"] == "Rust"


def test_list_suggestions_filters(client, owner_headers):
    """Type and status filters narrow the listing."""
    _suggest(client, owner_headers, name="beginner", type="tag")
    _suggest(client, owner_headers, name="Robotics", type="category")

    tags = client.get("/api/v1/suggestions", params={"type": "tag"}).json()
    approved = client.get("/api/v1/suggestions", params={"status": "approved"}).json()

    assert [item["name"] for item in tags["suggestions"]] == ["beginner"]
    assert approved["pagination"]["total"] == 0


def test_delete_suggestion_by_author_only(client, owner_headers, other_headers):
    """Only the author or an admin deletes a suggestion."""
    suggestion = _suggest(client, owner_headers)

    denied = client.delete(f"/api/v1/suggestions/{suggestion['id']}", headers=other_headers)
    allowed = client.delete(f"/api/v1/suggestions/{suggestion['id']}", headers=owner_headers)

    assert denied.status_code == status.HTTP_403_FORBIDDEN
    assert allowed.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(f"/api/v1/suggestions/{suggestion['id']}").status_code == 404
