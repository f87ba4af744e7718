"""
Note Commands.

List, show, create, edit, archive, and delete notes. All calls go through
the NoteSynchronizer.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from modules.backend.core.content import (
    create_empty_content,
    create_simple_content,
    extract_text,
    validate_content,
)
from modules.backend.core.exceptions import ValidationError
from modules.cli.client import TOKEN_ENV_VAR, open_synchronizer, run_guarded

app = typer.Typer(help="Note commands")
console = Console()

TokenOption = typer.Option(..., envvar=TOKEN_ENV_VAR, help="Bearer token")


def _load_content(body: str | None, content_file: Path | None) -> dict[str, Any] | None:
    """Block content from a JSON file, a plain-text body, or neither."""
    if content_file is not None:
        try:
            raw = json.loads(content_file.read_text(encoding="utf-8"))
            return validate_content(raw).model_dump(mode="json", exclude_none=True)
        except (ValueError, ValidationError) as e:
            console.print(f"[red]Invalid content file {content_file}: {e}[/red]")
            raise typer.Exit(1) from e
    if body is not None:
        return create_simple_content(body).model_dump(mode="json", exclude_none=True)
    return None


def _print_note(note: dict[str, Any]) -> None:
    status = "[yellow]archived[/yellow]" if note["is_archived"] else "[green]active[/green]"
    console.print(f"[bold]{note['title']}[/bold]  {status}")
    console.print(f"[dim]id: {note['id']}  edited: {note['last_edited']}[/dim]")
    if note["tags"]:
        console.print("tags: " + ", ".join(note["tags"]))
    text = extract_text(validate_content(note["content"]))
    if text:
        console.print()
        console.print(text)


@app.command("list")
def list_notes(
    token: str = TokenOption,
    query: Optional[str] = typer.Option(None, "--query", "-q", help="Text in title or body"),
    tag: Optional[list[str]] = typer.Option(None, "--tag", "-t", help="Tag name (repeat for any-of)"),
    archived: Optional[bool] = typer.Option(None, "--archived/--active", help="Archive status"),
    page: int = typer.Option(1, "--page", "-p", min=1),
    limit: int = typer.Option(20, "--limit", "-l", min=1, max=100),
) -> None:
    """
    List notes, most recently edited first.

    Examples:
        python -m modules.cli notes list --tag work --tag home
        python -m modules.cli notes list --query meeting --active
    """
    asyncio.run(_list(token, query, tag or None, archived, page, limit))


async def _list(
    token: str,
    query: str | None,
    tags: list[str] | None,
    archived: bool | None,
    page: int,
    limit: int,
) -> None:
    async with open_synchronizer(token) as sync:
        result = await run_guarded(
            lambda: sync.list_notes(
                query=query, tags=tags, is_archived=archived, page=page, limit=limit
            )
        )

    table = Table(title=f"Notes (page {result['page']}, {result['total']} total)")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Tags")
    table.add_column("Archived")
    table.add_column("Last edited")

    for note in result["notes"]:
        table.add_row(
            note["id"],
            note["title"],
            ", ".join(note["tags"]) or "-",
            "yes" if note["is_archived"] else "no",
            note["last_edited"],
        )
    console.print(table)


@app.command()
def show(
    note_id: str = typer.Argument(..., help="Note id"),
    token: str = TokenOption,
) -> None:
    """Show a note's title, tags, and text."""
    asyncio.run(_show(token, note_id))


async def _show(token: str, note_id: str) -> None:
    async with open_synchronizer(token) as sync:
        note = await run_guarded(lambda: sync.get_note(note_id))
    _print_note(note)


@app.command()
def new(
    title: str = typer.Argument(..., help="Note title"),
    token: str = TokenOption,
    body: Optional[str] = typer.Option(None, "--body", "-b", help="Plain text, stored as one paragraph"),
    content_file: Optional[Path] = typer.Option(
        None, "--content-file", "-f", exists=True, dir_okay=False, help="Block content JSON"
    ),
    tag: Optional[list[str]] = typer.Option(None, "--tag", "-t", help="Tag name (repeatable)"),
) -> None:
    """
    Create a note.

    Examples:
        python -m modules.cli notes new "Groceries" -b "milk, eggs" -t home
    """
    content = _load_content(body, content_file)
    if content is None:
        content = create_empty_content().model_dump(mode="json", exclude_none=True)
    asyncio.run(_new(token, title, content, tag or []))


async def _new(token: str, title: str, content: dict[str, Any], tags: list[str]) -> None:
    async with open_synchronizer(token) as sync:
        note = await run_guarded(lambda: sync.create_note(title, content, tags))
    console.print(f"[green]Created note {note['id']}[/green]")


@app.command()
def edit(
    note_id: str = typer.Argument(..., help="Note id"),
    token: str = TokenOption,
    title: Optional[str] = typer.Option(None, "--title", help="New title"),
    body: Optional[str] = typer.Option(None, "--body", "-b", help="Replace body with plain text"),
    content_file: Optional[Path] = typer.Option(
        None, "--content-file", "-f", exists=True, dir_okay=False, help="Replace body with block content JSON"
    ),
    tag: Optional[list[str]] = typer.Option(None, "--tag", "-t", help="Replace tags (repeatable)"),
    clear_tags: bool = typer.Option(False, "--clear-tags", help="Remove all tags"),
) -> None:
    """
    Update a note. Only the options given are changed.

    Examples:
        python -m modules.cli notes edit <id> --title "Renamed" -t work
    """
    tags = [] if clear_tags else (tag or None)
    content = _load_content(body, content_file)
    asyncio.run(_edit(token, note_id, title=title, content=content, tags=tags))


async def _edit(token: str, note_id: str, **fields: Any) -> None:
    async with open_synchronizer(token) as sync:
        note = await run_guarded(lambda: sync.update_note(note_id, **fields))
    console.print(f"[green]Updated note {note['id']}[/green]")


@app.command()
def archive(
    note_id: str = typer.Argument(..., help="Note id"),
    token: str = TokenOption,
) -> None:
    """Archive a note."""
    asyncio.run(_set_archived(token, note_id, True))


@app.command()
def unarchive(
    note_id: str = typer.Argument(..., help="Note id"),
    token: str = TokenOption,
) -> None:
    """Restore an archived note."""
    asyncio.run(_set_archived(token, note_id, False))


async def _set_archived(token: str, note_id: str, archived: bool) -> None:
    async with open_synchronizer(token) as sync:
        if archived:
            await run_guarded(lambda: sync.archive_note(note_id))
        else:
            await run_guarded(lambda: sync.unarchive_note(note_id))
    console.print(f"[green]Note {note_id} {'archived' if archived else 'unarchived'}[/green]")


@app.command()
def delete(
    note_id: str = typer.Argument(..., help="Note id"),
    token: str = TokenOption,
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Permanently delete a note. Its tags are kept."""
    if not yes:
        typer.confirm(f"Delete note {note_id}?", abort=True)
    asyncio.run(_delete(token, note_id))


async def _delete(token: str, note_id: str) -> None:
    async with open_synchronizer(token) as sync:
        await run_guarded(lambda: sync.delete_note(note_id))
    console.print(f"[green]Deleted note {note_id}[/green]")
