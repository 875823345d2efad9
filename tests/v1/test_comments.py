# mypy: ignore-errors
# tests/v1/test_comments.py
"""Tests for comment endpoints."""

from fastapi import status


def test_comment_lifecycle(client, owner, make_resource, other_headers, owner_headers):
    """Readers comment; the resource owner may delete any comment."""
    resource = make_resource(owner)
    url = f"/api/v1/resources/{resource.id}/comments"

    created = client.post(url, json={"content": "Very helpful"}, headers=other_headers)
    assert created.status_code == status.HTTP_201_CREATED

    listed = client.get(url)
    assert [row["content"] for row in listed.json()] == ["Very helpful"]

    deleted = client.delete(f"{url}/{created.json()['id']}", headers=owner_headers)
    assert deleted.status_code == status.HTTP_204_NO_CONTENT
    assert client.get(url).json() == []


def test_comment_on_private_resource_denied(client, owner, make_resource, other_headers):
    """Comments need read access."""
    resource = make_resource(owner, visibility="private")
    response = client.post(
        f"/api/v1/resources/{resource.id}/comments",
        json={"content": "Let me in"},
        headers=other_headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_stranger_cannot_delete_comment(client, owner, make_resource, other_headers, third_headers):
    """Only the author, the owner or an admin deletes a comment."""
    resource = make_resource(owner)
    url = f"/api/v1/resources/{resource.id}/comments"
    created = client.post(url, json={"content": "First"}, headers=other_headers).json()

    response = client.delete(f"{url}/{created['id']}", headers=third_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_empty_comment_rejected(client, owner, make_resource, other_headers):
    """Empty comments fail validation."""
    resource = make_resource(owner)
    response = client.post(
        f"/api/v1/resources/{resource.id}/comments", json={"content": ""}, headers=other_headers
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_author_edits_comment(client, owner, make_resource, other_headers, third_headers, admin_headers):
    """Authors and admins edit comments; the edit is timestamped."""
    resource = make_resource(owner)
    url = f"/api/v1/resources/{resource.id}/comments"
    created = client.post(url, json={"content": "Typo"}, headers=other_headers).json()
    assert created["updated_at"] is None

    edited = client.put(f"{url}/{created['id']}", json={"content": "Fixed"}, headers=other_headers)
    assert edited.status_code == status.HTTP_200_OK
    assert edited.json()["content"] == "Fixed"
    assert edited.json()["updated_at"] is not None

    stranger = client.put(f"{url}/{created['id']}", json={"content": "Mine"}, headers=third_headers)
    assert stranger.status_code == status.HTTP_403_FORBIDDEN

    moderated = client.put(
        f"{url}/{created['id']}", json={"content": "[removed]"}, headers=admin_headers
    )
    assert moderated.status_code == status.HTTP_200_OK
    assert [row["content"] for row in client.get(url).json()] == ["[removed]"]


def test_edit_missing_comment(client, owner, make_resource, other_headers):
    """Editing an unknown comment is a 404."""
    resource = make_resource(owner)
    response = client.put(
        f"/api/v1/resources/{resource.id}/comments/9999",
        json={"content": "Hello"},
        headers=other_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["code"] == "COMMENT_NOT_FOUND"
