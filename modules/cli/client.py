"""
CLI Session Helpers.

Builds the API client and synchronizer for one command invocation and
turns client-side errors into readable console output.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import httpx
import typer
from rich.console import Console

from modules.backend.core.config import get_app_config
from modules.backend.core.exceptions import ApplicationError, ValidationError
from modules.client.api import NotesApi
from modules.client.cache import QueryCache
from modules.client.sync import NoteSynchronizer
from modules.client.transport import APIClient

T = TypeVar("T")

TOKEN_ENV_VAR = "NOTES_API_TOKEN"

console = Console()


@asynccontextmanager
async def open_synchronizer(
    token: str | None = None,
    base_url: str | None = None,
) -> AsyncIterator[NoteSynchronizer]:
    """Synchronizer over a fresh client; the client is closed on exit."""
    stale_seconds = get_app_config().application.client.stale_seconds
    client = APIClient(base_url=base_url, token=token)
    try:
        yield NoteSynchronizer(NotesApi(client), QueryCache(stale_seconds=stale_seconds))
    finally:
        await client.close()


def _print_validation_details(details: dict[str, Any]) -> None:
    for error in details.get("validation_errors", []):
        console.print(f"  [dim]{error.get('field')}: {error.get('message')}[/dim]")


async def run_guarded(action: Callable[[], Awaitable[T]]) -> T:
    """
    Run a client action, exiting with status 1 on API or connection errors.

    Raises:
        typer.Exit: When the action fails
    """
    try:
        return await action()
    except ValidationError as e:
        console.print(f"[red]Invalid input: {e.message}[/red]")
        _print_validation_details(e.details)
        raise typer.Exit(1) from e
    except ApplicationError as e:
        console.print(f"[red]Error ({e.code}): {e.message}[/red]")
        raise typer.Exit(1) from e
    except httpx.ConnectError as e:
        console.print("[red]Error: Cannot connect to backend[/red]")
        console.print("[dim]Is the server running? Start with: python cli.py --service server[/dim]")
        raise typer.Exit(1) from e
    except httpx.HTTPError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e
