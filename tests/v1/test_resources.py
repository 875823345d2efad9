# mypy: ignore-errors
# tests/v1/test_resources.py
"""Tests for resource endpoints."""

from fastapi import status


def _create(client, headers, **fields):
    payload = {"title": "Intro to SQL", "description": "Slides and exercises", **fields}
    response = client.post("/api/v1/resources", json=payload, headers=headers)
    assert response.status_code == status.HTTP_201_CREATED, response.text
    return response.json()


def test_create_resource(client, owner, owner_headers, cache):
    """Creating a resource assigns the caller as owner and normalizes tags."""
    data = _create(client, owner_headers, tags=["sql", " sql ", "db"], visibility="private")

    assert data["owner_id"] == owner.id
    assert data["visibility"] == "private"
    assert data["tags"] == ["sql", "db"]
    assert data["views_count"] == 0
    assert "resources:list:*" in cache.patterns


def test_create_resource_requires_auth(client):
    """Anonymous callers cannot create resources."""
    response = client.post("/api/v1/resources", json={"title": "x", "description": "y"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json()["code"] == "AUTH_REQUIRED"
    assert response.headers["www-authenticate"] == "Bearer"


def test_invalid_token_rejected(client):
    """A malformed bearer token is a 401 even on public routes."""
    response = client.get("/api/v1/resources", headers={"Authorization": "Bearer nonsense"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_list_resources_anonymous(client, owner_headers):
    """Anonymous listings only include public resources."""
    _create(client, owner_headers, title="Open")
    _create(client, owner_headers, title="Closed", visibility="private")

    response = client.get("/api/v1/resources")

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert [item["title"] for item in body["resources"]] == ["Open"]
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}


def test_list_resources_tag_filter(client, owner_headers):
    """Comma-separated tags must all match."""
    _create(client, owner_headers, title="Both", tags=["python", "ml"])
    _create(client, owner_headers, title="One", tags=["python"])

    response = client.get("/api/v1/resources", params={"tags": "python,ml"})

    assert [item["title"] for item in response.json()["resources"]] == ["Both"]


def test_list_limit_capped(client):
    """Page sizes above the maximum are rejected."""
    response = client.get("/api/v1/resources", params={"limit": 101})
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_get_private_resource_denied(client, owner_headers, other_headers):
    """Reading someone else's private resource is forbidden."""
    resource = _create(client, owner_headers, visibility="private")

    response = client.get(f"/api/v1/resources/{resource['id']}", headers=other_headers)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["code"] == "ACCESS_DENIED"


def test_get_missing_resource(client):
    """Unknown ids are a 404."""
    response = client.get("/api/v1/resources/999")
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_update_resource_by_owner(client, owner_headers):
    """Owners may update their resources; omitted fields are kept."""
    resource = _create(client, owner_headers, category="databases")

    response = client.put(
        f"/api/v1/resources/{resource['id']}",
        json={"title": "Advanced SQL", "tags": ["sql"]},
        headers=owner_headers,
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["title"] == "Advanced SQL"
    assert data["category"] == "databases"
    assert data["tags"] == ["sql"]


def test_update_resource_by_stranger(client, owner_headers, other_headers):
    """Readers without write access cannot update."""
    resource = _create(client, owner_headers)

    response = client.put(
        f"/api/v1/resources/{resource['id']}", json={"title": "Mine now"}, headers=other_headers
    )

    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_delete_resource(client, owner_headers, other_headers, admin_headers):
    """Only the owner or an admin may delete."""
    first = _create(client, owner_headers)
    second = _create(client, owner_headers)

    denied = client.delete(f"/api/v1/resources/{first['id']}", headers=other_headers)
    assert denied.status_code == status.HTTP_403_FORBIDDEN

    assert client.delete(f"/api/v1/resources/{first['id']}", headers=owner_headers).status_code == 204
    assert client.delete(f"/api/v1/resources/{second['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/v1/resources/{first['id']}").status_code == status.HTTP_404_NOT_FOUND


def test_view_and_download_counters(client, owner_headers):
    """Counters increase by one per call."""
    resource = _create(client, owner_headers)

    client.post(f"/api/v1/resources/{resource['id']}/view")
    view = client.post(f"/api/v1/resources/{resource['id']}/view")
    download = client.post(f"/api/v1/resources/{resource['id']}/download")

    assert view.json()["views_count"] == 2
    assert download.json() == {"id": resource["id"], "views_count": 2, "downloads_count": 1}


def test_counters_respect_visibility(client, owner_headers):
    """Unreadable resources cannot be counted."""
    resource = _create(client, owner_headers, visibility="private")
    response = client.post(f"/api/v1/resources/{resource['id']}/view")
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_fork_resource(client, owner_headers, other_user, other_headers):
    """Forking copies a readable resource into a private one owned by the caller."""
    resource = _create(client, owner_headers, tags=["sql"])

    response = client.post(f"/api/v1/resources/{resource['id']}/fork", headers=other_headers)

    assert response.status_code == status.HTTP_201_CREATED
    fork = response.json()
    assert fork["owner_id"] == other_user.id
    assert fork["title"] == "Intro to SQL (Fork)"
    assert fork["visibility"] == "private"
    assert fork["tags"] == ["sql"]
    assert fork["views_count"] == 0
