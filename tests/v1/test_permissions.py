# mypy: ignore-errors
# tests/v1/test_permissions.py
"""Tests for explicit permission endpoints."""

from fastapi import status


def _resource(client, headers):
    response = client.post(
        "/api/v1/resources",
        json={"title": "Dataset", "description": "CSV files", "visibility": "shared_users"},
        headers=headers,
    )
    return response.json()["id"]


def test_grant_view_permission(client, owner_headers, other_user, other_headers):
    """A view permission allows reading but not editing."""
    resource_id = _resource(client, owner_headers)

    response = client.post(
        f"/api/v1/resources/{resource_id}/permissions",
        json={"user_id": other_user.id, "permission": "view"},
        headers=owner_headers,
    )

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["user_id"] == other_user.id
    assert client.get(f"/api/v1/resources/{resource_id}", headers=other_headers).status_code == 200
    edit = client.put(f"/api/v1/resources/{resource_id}", json={"title": "x"}, headers=other_headers)
    assert edit.status_code == status.HTTP_403_FORBIDDEN


def test_permission_requires_exactly_one_target(client, owner_headers, other_user, owner, make_group):
    """Both or neither of user_id and group_id is a 400."""
    group = make_group(owner)
    resource_id = _resource(client, owner_headers)
    url = f"/api/v1/resources/{resource_id}/permissions"

    both = client.post(
        url,
        json={"user_id": other_user.id, "group_id": group.id, "permission": "view"},
        headers=owner_headers,
    )
    neither = client.post(url, json={"permission": "view"}, headers=owner_headers)

    assert both.status_code == status.HTTP_400_BAD_REQUEST
    assert neither.status_code == status.HTTP_400_BAD_REQUEST


def test_admin_manages_permissions(client, owner_headers, other_user, admin_headers):
    """Admins may grant and revoke permissions on any resource."""
    resource_id = _resource(client, owner_headers)

    created = client.post(
        f"/api/v1/resources/{resource_id}/permissions",
        json={"user_id": other_user.id, "permission": "update"},
        headers=admin_headers,
    )
    assert created.status_code == status.HTTP_201_CREATED

    listed = client.get(f"/api/v1/resources/{resource_id}/permissions", headers=admin_headers)
    assert [row["permission"] for row in listed.json()] == ["update"]

    deleted = client.delete(
        f"/api/v1/resources/{resource_id}/permissions/{created.json()['id']}",
        headers=admin_headers,
    )
    assert deleted.status_code == status.HTTP_204_NO_CONTENT


def test_stranger_cannot_grant(client, owner_headers, other_headers, third_user):
    """Non-owners without an admin role cannot grant permissions."""
    resource_id = _resource(client, owner_headers)

    response = client.post(
        f"/api/v1/resources/{resource_id}/permissions",
        json={"user_id": third_user.id, "permission": "view"},
        headers=other_headers,
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_update_permission_label(client, owner_headers, other_user, other_headers):
    """Relabelling a permission changes what it grants."""
    resource_id = _resource(client, owner_headers)
    created = client.post(
        f"/api/v1/resources/{resource_id}/permissions",
        json={"user_id": other_user.id, "permission": "view"},
        headers=owner_headers,
    ).json()

    response = client.put(
        f"/api/v1/resources/{resource_id}/permissions/{created['id']}",
        json={"permission": "write"},
        headers=owner_headers,
    )

    assert response.json()["permission"] == "write"
    edit = client.put(f"/api/v1/resources/{resource_id}", json={"title": "y"}, headers=other_headers)
    assert edit.status_code == status.HTTP_200_OK
