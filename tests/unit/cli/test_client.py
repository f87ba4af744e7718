"""Unit tests for CLI session helpers."""

import httpx
import pytest
import typer

from modules.backend.core.exceptions import ConflictError, ValidationError
from modules.cli.client import open_synchronizer, run_guarded
from modules.client.sync import NoteSynchronizer


class TestRunGuarded:
    async def test_returns_result(self):
        async def action():
            return 42

        assert await run_guarded(action) == 42

    @pytest.mark.parametrize(
        "error",
        [
            ValidationError("bad", details={"validation_errors": [{"field": "title", "message": "x"}]}),
            ConflictError("Email already registered"),
            httpx.ConnectError("refused"),
            httpx.ReadTimeout("slow"),
        ],
    )
    async def test_errors_exit_with_1(self, error):
        async def action():
            raise error

        with pytest.raises(typer.Exit) as exc_info:
            await run_guarded(action)

        assert exc_info.value.exit_code == 1

    async def test_unexpected_errors_propagate(self):
        async def action():
            raise KeyError("bug")

        with pytest.raises(KeyError):
            await run_guarded(action)


class TestOpenSynchronizer:
    async def test_builds_synchronizer_with_configured_staleness(self):
        async with open_synchronizer(token="tok", base_url="http://test") as sync:
            assert isinstance(sync, NoteSynchronizer)
            assert sync.api.client.token == "tok"
            assert sync.cache.stale_seconds == 300
