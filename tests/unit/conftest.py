"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_repository(mock_db_session: AsyncMock):
            repo = NoteRepository(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    session.get = AsyncMock()
    return session


# =============================================================================
# Content Fixtures
# =============================================================================


@pytest.fixture
def block_payload() -> dict[str, Any]:
    """Block content with one block of every supported type."""
    return {
        "time": 1700000000000,
        "version": "2.31.0",
        "blocks": [
            {"id": "h1aaaaaaaa", "type": "header", "data": {"text": "Weekly plan", "level": 2}},
            {"id": "p1aaaaaaaa", "type": "paragraph", "data": {"text": "Call the <b>bank</b>"}},
            {
                "id": "l1aaaaaaaa",
                "type": "list",
                "data": {"style": "unordered", "items": ["milk", "eggs"]},
            },
            {
                "id": "q1aaaaaaaa",
                "type": "quote",
                "data": {"text": "Less is more", "caption": "Mies", "alignment": "left"},
            },
            {"id": "d1aaaaaaaa", "type": "delimiter", "data": {}},
        ],
    }


# =============================================================================
# HTTP Fixtures
# =============================================================================


def envelope(data: Any, status_code: int = 200) -> httpx.Response:
    """A success envelope as the API returns it."""
    return httpx.Response(
        status_code,
        json={"success": True, "data": data, "error": None, "metadata": {}},
    )


def error_envelope(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> httpx.Response:
    """An error envelope as the API returns it."""
    return httpx.Response(
        status_code,
        json={
            "success": False,
            "data": None,
            "error": {"code": code, "message": message, "details": details},
            "metadata": {},
        },
    )


@pytest.fixture
def make_envelope():
    return envelope


@pytest.fixture
def make_error_envelope():
    return error_envelope


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        def test_logging(mock_logger):
            with patch("module.logger", mock_logger):
                ...
                mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
