"""
Integration tests for request context headers.
"""

from httpx import AsyncClient


async def test_request_id_is_generated(client: AsyncClient):
    response = await client.get("/health")

    assert response.headers["X-Request-ID"]
    assert response.headers["X-Response-Time"].endswith("ms")


async def test_request_id_is_propagated(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


async def test_request_id_in_envelope_metadata(client: AsyncClient, auth_headers):
    response = await client.get(
        "/api/v1/notes", headers={**auth_headers, "X-Request-ID": "req-456"}
    )

    assert response.json()["metadata"]["request_id"] == "req-456"


async def test_request_id_in_error_envelope(client: AsyncClient):
    response = await client.get("/api/v1/notes", headers={"X-Request-ID": "req-789"})

    assert response.status_code == 401
    assert response.headers["X-Request-ID"] == "req-789"
    assert response.json()["metadata"]["request_id"] == "req-789"
