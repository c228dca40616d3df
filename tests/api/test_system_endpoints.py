# tests/api/test_system_endpoints.py
"""Tests for the health check, the root banner and unknown routes."""

from fastapi import status


def test_health_reports_database_stats(client, board, create_thread):
    create_thread()
    response = client.get("/api/health")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "OK"
    assert data["timestamp"]
    assert data["database"]["status"] == "connected"
    assert data["database"]["dialect"] == "sqlite"
    assert data["database"]["stats"] == {"boards": 1, "users": 1, "threads": 1, "posts": 1}
    assert data["server"]["version"]
    assert data["server"]["uptime"] >= 0


def test_root_lists_endpoints(client):
    response = client.get("/")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "running"
    assert data["endpoints"]["boards"] == "/api/boards"
    assert data["endpoints"]["health"] == "/api/health"


def test_unknown_route(client):
    response = client.get("/api/nope")
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"error": "Route not found: /api/nope"}


def test_malformed_json_body(client, auth_headers):
    response = client.post(
        "/api/boards",
        content="{not json",
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "error" in response.json()
