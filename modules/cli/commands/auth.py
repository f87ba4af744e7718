"""
Auth Commands.

Register, log in, and show the current account.
"""

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel

from modules.cli.client import TOKEN_ENV_VAR, open_synchronizer, run_guarded

app = typer.Typer(help="Account commands")
console = Console()


@app.command()
def register(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """
    Create an account.

    Examples:
        python -m modules.cli auth register me@example.com
    """
    asyncio.run(_register(email, password))


async def _register(email: str, password: str) -> None:
    async with open_synchronizer() as sync:
        user = await run_guarded(lambda: sync.api.register(email, password))
    console.print(f"[green]Registered {user['email']}[/green]")


@app.command()
def login(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """
    Log in and print a bearer token.

    Export the token to use the notes commands:
        export NOTES_API_TOKEN=<token>
    """
    asyncio.run(_login(email, password))


async def _login(email: str, password: str) -> None:
    async with open_synchronizer() as sync:
        data = await run_guarded(lambda: sync.api.login(email, password))
    console.print(Panel(data["access_token"], title=f"Token for {data['user']['email']}"))
    console.print(f"[dim]export {TOKEN_ENV_VAR}=<token>[/dim]")


@app.command()
def whoami(
    token: str = typer.Option(..., envvar=TOKEN_ENV_VAR, help="Bearer token"),
) -> None:
    """Show the account the token belongs to."""
    asyncio.run(_whoami(token))


async def _whoami(token: str) -> None:
    async with open_synchronizer(token) as sync:
        user = await run_guarded(sync.api.me)
    console.print(f"{user['email']} [dim]({user['id']})[/dim]")
