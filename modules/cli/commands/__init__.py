"""
CLI Commands.

Organized by domain/feature area.
"""

from modules.cli.commands.auth import app as auth_app
from modules.cli.commands.notes import app as notes_app
from modules.cli.commands.tags import app as tags_app

__all__ = [
    "auth_app",
    "notes_app",
    "tags_app",
]
