"""
Integration Test Fixtures.

Fixtures for integration tests - the real application over a real
database (see the root conftest.py). The app receives the test Database
directly; ASGITransport does not run the lifespan.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from modules.backend.core.database import Database
from modules.backend.main import create_app
from tests.integration.helpers import API, paragraph_content, register_and_login


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def app(database: Database):
    return create_app(database=database)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTP client bound to the ASGI app.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


# =============================================================================
# Authentication Fixtures
# =============================================================================


@pytest.fixture
async def auth_headers(client: AsyncClient) -> dict[str, str]:
    """Authorization header for a freshly registered user."""
    return await register_and_login(client, "owner@example.com")


@pytest.fixture
async def other_auth_headers(client: AsyncClient) -> dict[str, str]:
    """Authorization header for a second, unrelated user."""
    return await register_and_login(client, "stranger@example.com")


# =============================================================================
# Note Helpers
# =============================================================================


@pytest.fixture
def create_note(
    client: AsyncClient,
    auth_headers: dict[str, str],
) -> Callable[..., Awaitable[dict[str, Any]]]:
    """
    Create a note for the default user and return its data.

    Usage:
        note = await create_note("Title", text="body", tags=["work"])
    """

    async def _create(
        title: str,
        text: str = "",
        tags: list[str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        response = await client.post(
            f"{API}/notes",
            json={"title": title, "content": paragraph_content(text), "tags": tags or []},
            headers=headers or auth_headers,
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> Any:
        """
        Assert API response is successful.

        Returns:
            The envelope's data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        body = response.json()
        assert body.get("success") is True, f"Response not successful: {body}"
        return body["data"]

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Returns:
            The envelope's error object
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        body = response.json()
        assert body.get("success") is False, f"Response should be error: {body}"
        assert body.get("error") is not None, f"Missing error details: {body}"

        if expected_code:
            actual_code = body["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return body["error"]

    @staticmethod
    def assert_validation_error(response: Any, field: str | None = None) -> dict[str, Any]:
        """Assert a 422 request validation error, optionally naming a field."""
        error = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = (error.get("details") or {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return error


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
