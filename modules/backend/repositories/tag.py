"""
Tag Repository.

Tags and the note/tag association. Associations are written with plain
INSERT/DELETE statements and read as (note id, name) rows, so NoteTag rows
never sit in the session identity map.
"""

from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.tag import NoteTag, Tag
from modules.backend.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    model = Tag

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_by_name(self, user_id: str, name: str) -> Tag | None:
        """Exact, case-sensitive lookup within one user's tags."""
        result = await self.session.execute(
            select(Tag).where(Tag.user_id == user_id, Tag.name == name)
        )
        return result.scalar_one_or_none()

    async def list_with_counts(self, user_id: str) -> list[tuple[Tag, int]]:
        """All of the user's tags by name, each with its note count (0 for orphans)."""
        result = await self.session.execute(
            select(Tag, func.count(NoteTag.note_id))
            .outerjoin(NoteTag, NoteTag.tag_id == Tag.id)
            .where(Tag.user_id == user_id)
            .group_by(Tag.id)
            .order_by(Tag.name)
        )
        return [(tag, count) for tag, count in result.all()]

    async def clear_note_tags(self, note_id: str) -> None:
        """Remove every association of the note."""
        await self.session.execute(
            delete(NoteTag)
            .where(NoteTag.note_id == note_id)
            .execution_options(synchronize_session=False)
        )

    async def add_note_tag(self, note_id: str, tag_id: str, position: int) -> None:
        await self.session.execute(
            insert(NoteTag).values(note_id=note_id, tag_id=tag_id, position=position)
        )

    async def names_for_notes(self, note_ids: Sequence[str]) -> dict[str, list[str]]:
        """Current tag names per note id, in the order they were written."""
        if not note_ids:
            return {}
        result = await self.session.execute(
            select(NoteTag.note_id, Tag.name)
            .join(Tag, Tag.id == NoteTag.tag_id)
            .where(NoteTag.note_id.in_(list(note_ids)))
            .order_by(NoteTag.note_id, NoteTag.position)
        )
        names: dict[str, list[str]] = defaultdict(list)
        for note_id, name in result.all():
            names[note_id].append(name)
        return dict(names)
