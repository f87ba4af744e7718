"""
Integration tests for demo data seeding against a real database session.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.security import verify_password
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.user import UserRepository
from modules.backend.schemas.note import NoteSearch
from modules.backend.services.auth import AuthService
from modules.backend.services.note import NoteService
from modules.backend.services.seed import DEMO_ACCOUNTS, SeedService
from modules.backend.services.tag import TagService


async def test_seed_creates_accounts_and_notes(db_session: AsyncSession):
    summary = await SeedService(db_session).seed()

    assert summary.users_created == 2
    assert summary.users_skipped == 0
    assert summary.notes_created == 5
    assert await UserRepository(db_session).count() == 2
    assert await NoteRepository(db_session).count() == 5


async def test_seeded_passwords_are_hashed(db_session: AsyncSession):
    await SeedService(db_session).seed()

    user = await UserRepository(db_session).get_by_email("demo@example.com")

    assert user.hashed_password != "password123"
    assert verify_password("password123", user.hashed_password)
    token = await AuthService(db_session).authenticate("demo@example.com", "password123")
    assert token.user.id == user.id


async def test_seeded_notes_carry_tags_and_archive_state(db_session: AsyncSession):
    await SeedService(db_session).seed()
    user = await UserRepository(db_session).get_by_email("demo@example.com")
    service = NoteService(db_session)

    active = await service.list_notes(user.id, NoteSearch(is_archived=False))
    archived = await service.list_notes(user.id, NoteSearch(is_archived=True))

    assert sorted(n.title for n in active.notes) == ["Project Ideas", "Welcome to Notes"]
    assert [n.title for n in archived.notes] == ["Meeting Notes"]
    assert archived.notes[0].tags == ["meetings", "work"]

    ideas = next(n for n in active.notes if n.title == "Project Ideas")
    assert [block.type for block in ideas.content.blocks] == ["paragraph", "list"]

    found = await service.list_notes(user.id, NoteSearch(query="typescript"))
    assert [n.title for n in found.notes] == ["Project Ideas"]


async def test_seeded_tags_are_per_account(db_session: AsyncSession):
    await SeedService(db_session).seed()
    john = await UserRepository(db_session).get_by_email("john@example.com")

    tags = await TagService(db_session).list_tags(john.id)

    expected = sorted(tag for note in DEMO_ACCOUNTS[1].notes for tag in note.tags)
    assert [t.name for t in tags.tags] == expected
    assert all(t.note_count == 1 for t in tags.tags)


async def test_seeding_twice_skips_existing_accounts(db_session: AsyncSession):
    await SeedService(db_session).seed()

    summary = await SeedService(db_session).seed()

    assert summary.users_created == 0
    assert summary.users_skipped == 2
    assert summary.notes_created == 0
    assert await NoteRepository(db_session).count() == 5
