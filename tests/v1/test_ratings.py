# mypy: ignore-errors
# tests/v1/test_ratings.py
"""Tests for rating endpoints."""

import pytest
from fastapi import status


@pytest.fixture()
def resource_id(owner, make_resource):
    return make_resource(owner).id


def test_rate_resource(client, resource_id, other_headers, third_headers):
    """Ratings update the average and count returned with them."""
    first = client.post(
        f"/api/v1/resources/{resource_id}/rating", json={"rating": 5}, headers=other_headers
    )
    second = client.post(
        f"/api/v1/resources/{resource_id}/rating", json={"rating": 2}, headers=third_headers
    )

    assert first.status_code == status.HTTP_201_CREATED
    assert first.json()["average_rating"] == 5
    assert second.json()["ratings_count"] == 2
    assert second.json()["average_rating"] == pytest.approx(3.5)
    assert second.json()["rating"]["rating"] == 2

    resource = client.get(f"/api/v1/resources/{resource_id}").json()
    assert resource["average_rating"] == pytest.approx(3.5)


def test_rating_out_of_range(client, resource_id, other_headers):
    """Ratings outside 1..5 fail validation."""
    response = client.post(
        f"/api/v1/resources/{resource_id}/rating", json={"rating": 6}, headers=other_headers
    )
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_rate_twice_conflicts(client, resource_id, other_headers):
    """A second POST by the same user is a conflict."""
    url = f"/api/v1/resources/{resource_id}/rating"
    client.post(url, json={"rating": 4}, headers=other_headers)

    response = client.post(url, json={"rating": 1}, headers=other_headers)

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["code"] == "ALREADY_RATED"


def test_update_and_delete_rating(client, resource_id, other_headers):
    """PUT changes the rating and DELETE clears the aggregate."""
    url = f"/api/v1/resources/{resource_id}/rating"
    client.post(url, json={"rating": 1}, headers=other_headers)

    updated = client.put(url, json={"rating": 4}, headers=other_headers)
    assert updated.json()["average_rating"] == 4

    deleted = client.delete(url, headers=other_headers)
    assert deleted.status_code == status.HTTP_200_OK
    assert deleted.json() == {
        "resource_id": resource_id,
        "average_rating": 0,
        "ratings_count": 0,
        "rating": None,
    }


def test_list_ratings(client, resource_id, other_user, other_headers):
    """Anyone who can read the resource can list its ratings."""
    client.post(
        f"/api/v1/resources/{resource_id}/rating", json={"rating": 3}, headers=other_headers
    )

    response = client.get(f"/api/v1/resources/{resource_id}/ratings")

    assert [(row["user_id"], row["rating"]) for row in response.json()] == [(other_user.id, 3)]
