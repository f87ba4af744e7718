"""
FastAPI Dependencies.

Shared dependencies for request handling, including the auth gate that
turns a bearer token into the owning user id. Handlers never look at
credentials themselves; they declare CurrentUserId.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session
from modules.backend.core.exceptions import AuthenticationError
from modules.backend.core.logging import get_logger
from modules.backend.core.security import decode_token

logger = get_logger(__name__)

DbSession = Annotated[AsyncSession, Depends(get_db_session)]

bearer_scheme = HTTPBearer(auto_error=False)


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """Extract or generate request ID from headers."""
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def resolve_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str | None:
    """
    Resolve the caller's user id from the bearer token.

    Returns None when there is no token or the token does not verify.
    """
    if credentials is None:
        return None
    try:
        payload = decode_token(credentials.credentials)
    except AuthenticationError:
        return None
    subject = payload.get("sub")
    return subject if isinstance(subject, str) and subject else None


async def get_current_user_id(
    user_id: str | None = Depends(resolve_user_id),
) -> str:
    """Require an identity. Raises AuthenticationError (401) when absent."""
    if user_id is None:
        raise AuthenticationError()
    return user_id


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
