"""
Notes CLI.

Command-line client for the notes backend, built with Typer for commands
and Rich for output.

Usage:
    python -m modules.cli --help
    python -m modules.cli auth register me@example.com
    python -m modules.cli auth login me@example.com
    export NOTES_API_TOKEN=<token>
    python -m modules.cli notes new "Title" --body "text" --tag work
    python -m modules.cli notes list --tag work
    python -m modules.cli tags list

Options:
    --verbose, -v     INFO level logging
    --debug, -d       DEBUG level logging
"""

import structlog
import typer

from modules.backend.core.config import validate_project_root
from modules.backend.core.logging import setup_logging
from modules.cli.commands import auth_app, notes_app, tags_app

app = typer.Typer(
    name="notes",
    help="Notes CLI - accounts, notes, and tags.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(auth_app, name="auth")
app.add_typer(notes_app, name="notes")
app.add_typer(tags_app, name="tags")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="INFO level logging"),
    debug: bool = typer.Option(False, "--debug", "-d", help="DEBUG level logging"),
) -> None:
    """Notes CLI."""
    validate_project_root()

    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    else:
        level = "WARNING"
    setup_logging(level=level, format_type="console", enable_file_logging=False)
    structlog.contextvars.bind_contextvars(source="cli")
