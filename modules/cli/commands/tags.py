"""
Tag Commands.
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from modules.cli.client import TOKEN_ENV_VAR, open_synchronizer, run_guarded

app = typer.Typer(help="Tag commands")
console = Console()


@app.command("list")
def list_tags(
    token: str = typer.Option(..., envvar=TOKEN_ENV_VAR, help="Bearer token"),
) -> None:
    """List tags with the number of notes using each."""
    asyncio.run(_list(token))


async def _list(token: str) -> None:
    async with open_synchronizer(token) as sync:
        result = await run_guarded(sync.api.list_tags)

    table = Table(title=f"Tags ({result['total']})")
    table.add_column("Name", style="cyan")
    table.add_column("Notes", justify="right")
    for tag in result["tags"]:
        table.add_row(tag["name"], str(tag["note_count"]))
    console.print(table)
