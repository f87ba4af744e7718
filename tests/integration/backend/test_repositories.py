"""
Integration tests for the repositories against a real database session.
"""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.utils import utc_now
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.tag import TagRepository
from modules.backend.repositories.user import UserRepository


@pytest.fixture
async def user_id(db_session: AsyncSession) -> str:
    user = await UserRepository(db_session).create(email="repo@example.com", hashed_password="x")
    return user.id


async def make_note(session: AsyncSession, user_id: str, title: str, minutes: int, **fields):
    stamp = utc_now() - timedelta(minutes=minutes)
    return await NoteRepository(session).create(
        user_id=user_id,
        title=title,
        content='{"time":1,"blocks":[],"version":"2.31.0"}',
        created_at=stamp,
        updated_at=stamp,
        last_edited=stamp,
        **fields,
    )


async def tag_note(session: AsyncSession, user_id: str, note_id: str, *names: str) -> None:
    repo = TagRepository(session)
    for position, name in enumerate(names):
        tag = await repo.get_by_name(user_id, name) or await repo.create(user_id=user_id, name=name)
        await repo.add_note_tag(note_id, tag.id, position=position)


class TestUserRepository:
    async def test_lookup_by_email(self, db_session: AsyncSession, user_id: str):
        repo = UserRepository(db_session)

        assert (await repo.get_by_email("repo@example.com")).id == user_id
        assert await repo.exists_by_email("repo@example.com") is True
        assert await repo.get_by_email("other@example.com") is None


class TestNoteRepository:
    async def test_get_owned_scopes_to_user(self, db_session: AsyncSession, user_id: str):
        note = await make_note(db_session, user_id, "mine", 0)
        repo = NoteRepository(db_session)

        assert await repo.get_owned(user_id, note.id) is note
        assert await repo.get_owned("someone-else", note.id) is None

    async def test_list_orders_by_last_edited(self, db_session: AsyncSession, user_id: str):
        await make_note(db_session, user_id, "old", 30)
        await make_note(db_session, user_id, "new", 1)
        await make_note(db_session, user_id, "middle", 10)

        notes = await NoteRepository(db_session).list_filtered(user_id)

        assert [n.title for n in notes] == ["new", "middle", "old"]

    async def test_limit_and_offset(self, db_session: AsyncSession, user_id: str):
        for i in range(5):
            await make_note(db_session, user_id, f"n{i}", i)
        repo = NoteRepository(db_session)

        page = await repo.list_filtered(user_id, limit=2, offset=2)

        assert [n.title for n in page] == ["n2", "n3"]
        assert await repo.count_filtered(user_id) == 5

    async def test_archive_and_tag_filters(self, db_session: AsyncSession, user_id: str):
        work = await make_note(db_session, user_id, "work", 3)
        home = await make_note(db_session, user_id, "home", 2, is_archived=True)
        await make_note(db_session, user_id, "none", 1)
        await tag_note(db_session, user_id, work.id, "work")
        await tag_note(db_session, user_id, home.id, "home", "work")
        repo = NoteRepository(db_session)

        assert await repo.count_filtered(user_id, tags=["work"]) == 2
        assert await repo.count_filtered(user_id, tags=["work"], is_archived=False) == 1
        archived = await repo.list_filtered(user_id, is_archived=True)
        assert [n.title for n in archived] == ["home"]


class TestTagRepository:
    async def test_names_keep_write_order(self, db_session: AsyncSession, user_id: str):
        note = await make_note(db_session, user_id, "n", 0)
        await tag_note(db_session, user_id, note.id, "zeta", "alpha")

        names = await TagRepository(db_session).names_for_notes([note.id])

        assert names == {note.id: ["zeta", "alpha"]}

    async def test_clear_keeps_tags_with_zero_count(self, db_session: AsyncSession, user_id: str):
        note = await make_note(db_session, user_id, "n", 0)
        await tag_note(db_session, user_id, note.id, "keep")
        repo = TagRepository(db_session)

        await repo.clear_note_tags(note.id)

        rows = await repo.list_with_counts(user_id)
        assert [(tag.name, count) for tag, count in rows] == [("keep", 0)]
        assert await repo.names_for_notes([note.id]) == {}

    async def test_names_for_no_notes(self, db_session: AsyncSession):
        assert await TagRepository(db_session).names_for_notes([]) == {}
