# tests/test_health.py
from typing import Any

from fastapi import status


def test_root_responds(client: Any) -> None:
    """Verify that the root endpoint describes the service."""
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["docs"] == "/docs"


def test_health(client: Any) -> None:
    """Verify that the health endpoint reports ok."""
    r = client.get("/health")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"status": "ok"}
