from fastapi.testclient import TestClient


def test_health_check(client: TestClient) -> None:
    """Test the health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["database"] == "connected"
    assert data["status"] == "healthy"
    assert "version" in data
    assert "environment" in data


def test_unknown_route_uses_error_shape(client: TestClient) -> None:
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_wrong_method_uses_error_shape(client: TestClient) -> None:
    response = client.put("/api/messages/unread-count")
    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed"}
