"""
Shared values and request helpers for integration tests.
"""

from typing import Any

from httpx import AsyncClient

API = "/api/v1"
PASSWORD = "correct-horse-battery"


def paragraph_content(text: str) -> dict[str, Any]:
    """Block content holding one paragraph."""
    return {
        "time": 1700000000000,
        "version": "2.31.0",
        "blocks": [{"id": "p000000001", "type": "paragraph", "data": {"text": text}}],
    }


async def register_and_login(client: AsyncClient, email: str) -> dict[str, str]:
    """Create an account and return its Authorization header."""
    response = await client.post(
        f"{API}/auth/register", json={"email": email, "password": PASSWORD}
    )
    assert response.status_code == 201, response.text
    response = await client.post(
        f"{API}/auth/login", json={"email": email, "password": PASSWORD}
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['data']['access_token']}"}
