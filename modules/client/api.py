"""
Notes API.

Typed calls over APIClient. Success envelopes are unwrapped to their
`data`; error envelopes are raised as the same ApplicationError classes
the backend uses, so callers handle one exception hierarchy.
"""

from typing import Any

import httpx

from modules.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DatabaseError,
    FormatError,
    NotFoundError,
    ValidationError,
)
from modules.client.transport import APIClient

API_PREFIX = "/api/v1"

_SIMPLE_ERRORS: dict[str, type[ApplicationError]] = {
    "RES_NOT_FOUND": NotFoundError,
    "AUTH_UNAUTHORIZED": AuthenticationError,
    "AUTHZ_FORBIDDEN": AuthorizationError,
    "RES_CONFLICT": ConflictError,
    "SYS_DATA_INTEGRITY": FormatError,
    "SYS_DATABASE_ERROR": DatabaseError,
}


def raise_for_envelope(response: httpx.Response) -> Any:
    """
    Return `data` from a success envelope or raise the matching error.

    Raises:
        ApplicationError: Subclass chosen by the envelope's error code
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if response.is_success and isinstance(body, dict) and body.get("success", True):
        return body.get("data")

    error = body.get("error") if isinstance(body, dict) else None
    if not isinstance(error, dict):
        raise ApplicationError(
            f"Unexpected response (HTTP {response.status_code})",
            code="SYS_BAD_RESPONSE",
        )

    code = error.get("code", "SYS_INTERNAL_ERROR")
    message = error.get("message", "Request failed")

    if code.startswith("VAL_"):
        raise ValidationError(message, details=error.get("details"))
    error_cls = _SIMPLE_ERRORS.get(code)
    if error_cls is not None:
        raise error_cls(message)
    raise ApplicationError(message, code=code)


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


class NotesApi:
    """
    One method per backend operation. Notes and pages are plain dicts as
    decoded from JSON.
    """

    def __init__(self, client: APIClient) -> None:
        self.client = client

    async def register(self, email: str, password: str) -> dict[str, Any]:
        response = await self.client.post(
            f"{API_PREFIX}/auth/register",
            json={"email": email, "password": password},
        )
        return raise_for_envelope(response)

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Log in and remember the token for later calls."""
        response = await self.client.post(
            f"{API_PREFIX}/auth/login",
            json={"email": email, "password": password},
        )
        data = raise_for_envelope(response)
        self.client.token = data["access_token"]
        return data

    async def me(self) -> dict[str, Any]:
        return raise_for_envelope(await self.client.get(f"{API_PREFIX}/auth/me"))

    async def create_note(
        self,
        title: str,
        content: dict[str, Any],
        tags: list[str] | None = None,
    ) -> dict[str, Any]:
        response = await self.client.post(
            f"{API_PREFIX}/notes",
            json={"title": title, "content": content, "tags": tags or []},
        )
        return raise_for_envelope(response)

    async def get_note(self, note_id: str) -> dict[str, Any]:
        return raise_for_envelope(await self.client.get(f"{API_PREFIX}/notes/{note_id}"))

    async def list_notes(
        self,
        query: str | None = None,
        tags: list[str] | None = None,
        is_archived: bool | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict[str, Any]:
        params = _drop_none(
            {
                "query": query,
                "tags": ",".join(tags) if tags else None,
                "is_archived": str(is_archived).lower() if is_archived is not None else None,
                "page": page,
                "limit": limit,
            }
        )
        return raise_for_envelope(await self.client.get(f"{API_PREFIX}/notes", params=params))

    async def update_note(self, note_id: str, **fields: Any) -> dict[str, Any]:
        """Send only the fields given (title, content, tags, is_archived)."""
        response = await self.client.patch(
            f"{API_PREFIX}/notes/{note_id}",
            json=_drop_none(fields),
        )
        return raise_for_envelope(response)

    async def delete_note(self, note_id: str) -> dict[str, Any]:
        return raise_for_envelope(await self.client.delete(f"{API_PREFIX}/notes/{note_id}"))

    async def list_tags(self) -> dict[str, Any]:
        return raise_for_envelope(await self.client.get(f"{API_PREFIX}/tags"))
