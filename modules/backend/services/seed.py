"""
Seed Service.

Fills a development database with two demo accounts and a handful of
tagged notes. Everything goes through AuthService and NoteService, so
passwords are bcrypt-hashed and tags are reconciled exactly as they are
for API requests. Accounts whose email is already registered are skipped
together with their notes, which makes seeding safe to repeat.

Demo credentials:
    demo@example.com / password123
    john@example.com / password456
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.content import BLOCK_ID_LENGTH, create_simple_content
from modules.backend.core.exceptions import ConflictError
from modules.backend.core.utils import random_alphanumeric
from modules.backend.schemas.note import NoteCreate
from modules.backend.services.auth import AuthService
from modules.backend.services.base import BaseService
from modules.backend.services.note import NoteService


@dataclass(frozen=True)
class DemoNote:
    title: str
    text: str
    tags: list[str]
    items: list[str] = field(default_factory=list)
    archived: bool = False


@dataclass(frozen=True)
class DemoAccount:
    email: str
    password: str
    notes: list[DemoNote]


DEMO_ACCOUNTS = [
    DemoAccount(
        email="demo@example.com",
        password="password123",
        notes=[
            DemoNote(
                title="Welcome to Notes",
                text="This is your first note! You can edit, delete, and organize your notes here.",
                tags=["welcome", "getting-started"],
            ),
            DemoNote(
                title="Project Ideas",
                text="Things to build next:",
                items=["Build a todo app", "Learn TypeScript", "Deploy the API", "Add authentication"],
                tags=["projects", "ideas", "development"],
            ),
            DemoNote(
                title="Meeting Notes",
                text="Team meeting on 2024-01-15:",
                items=["Discussed new features", "Set deployment timeline", "Assigned tasks"],
                tags=["meetings", "work"],
                archived=True,
            ),
        ],
    ),
    DemoAccount(
        email="john@example.com",
        password="password456",
        notes=[
            DemoNote(
                title="Recipe Collection",
                text="Favorite recipes to try:",
                items=["Pasta carbonara", "Chicken tikka masala", "Chocolate chip cookies"],
                tags=["recipes", "cooking", "food"],
            ),
            DemoNote(
                title="Travel Plans",
                text="Places to visit:",
                items=["Japan (Tokyo, Kyoto)", "Iceland (Northern Lights)", "New Zealand (Hiking)"],
                tags=["travel", "vacation", "bucket-list"],
            ),
        ],
    ),
]


@dataclass
class SeedSummary:
    users_created: int = 0
    users_skipped: int = 0
    notes_created: int = 0


def _demo_content(note: DemoNote) -> dict[str, Any]:
    """A paragraph, followed by a bulleted list when the note has items."""
    content = create_simple_content(note.text).model_dump(mode="json", exclude_none=True)
    if note.items:
        content["blocks"].append(
            {
                "id": random_alphanumeric(BLOCK_ID_LENGTH),
                "type": "list",
                "data": {"style": "unordered", "items": list(note.items)},
            }
        )
    return content


class SeedService(BaseService):
    """
    Usage:
        async with database.session() as session:
            summary = await SeedService(session).seed()
            await session.commit()
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.auth = AuthService(session)
        self.notes = NoteService(session)

    async def seed(self, accounts: list[DemoAccount] = DEMO_ACCOUNTS) -> SeedSummary:
        """
        Create the demo accounts and their notes. The caller commits.

        Raises:
            AuthorizationError: If registration is switched off in features.yaml
        """
        summary = SeedSummary()
        for account in accounts:
            try:
                user = await self.auth.register(account.email, account.password)
            except ConflictError:
                self._log_operation("Seed account exists, skipped", email=account.email)
                summary.users_skipped += 1
                continue
            summary.users_created += 1

            for demo in account.notes:
                note = await self.notes.create_note(
                    user.id,
                    NoteCreate(title=demo.title, content=_demo_content(demo), tags=demo.tags),
                )
                if demo.archived:
                    await self.notes.archive_note(user.id, note.id)
                summary.notes_created += 1

        self._log_operation(
            "Seed completed",
            users_created=summary.users_created,
            users_skipped=summary.users_skipped,
            notes_created=summary.notes_created,
        )
        return summary
