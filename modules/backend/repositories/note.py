"""
Note Repository.

Data access layer for notes. Every query is scoped to one owning user.
"""

from collections.abc import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.note import Note
from modules.backend.models.tag import NoteTag, Tag
from modules.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    List ordering is `last_edited` descending with `id` as tie-breaker, so
    pages never overlap or skip rows.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_owned(self, user_id: str, note_id: str) -> Note | None:
        """The note if it exists and belongs to the user, else None."""
        result = await self.session.execute(
            select(Note).where(Note.id == note_id, Note.user_id == user_id)
        )
        return result.scalar_one_or_none()

    def _filtered(
        self,
        user_id: str,
        tags: Sequence[str] | None = None,
        is_archived: bool | None = None,
    ) -> Select:
        stmt = select(Note).where(Note.user_id == user_id)
        if is_archived is not None:
            stmt = stmt.where(Note.is_archived == is_archived)
        if tags:
            tagged = (
                select(NoteTag.note_id)
                .join(Tag, Tag.id == NoteTag.tag_id)
                .where(Tag.user_id == user_id, Tag.name.in_(list(tags)))
            )
            stmt = stmt.where(Note.id.in_(tagged))
        return stmt

    async def list_filtered(
        self,
        user_id: str,
        tags: Sequence[str] | None = None,
        is_archived: bool | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Note]:
        """
        Notes matching archive status and any of the tag names, newest edit first.

        Args:
            user_id: Owning user
            tags: Match notes with at least one of these tag names
            is_archived: Exact archive status, or None for both
            limit: Page size, or None for every matching note
            offset: Rows to skip
        """
        stmt = self._filtered(user_id, tags, is_archived).order_by(
            Note.last_edited.desc(),
            Note.id.desc(),
        )
        if limit is not None:
            stmt = stmt.limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count_filtered(
        self,
        user_id: str,
        tags: Sequence[str] | None = None,
        is_archived: bool | None = None,
    ) -> int:
        """Size of the set list_filtered would return without a limit."""
        subquery = self._filtered(user_id, tags, is_archived).subquery()
        result = await self.session.execute(
            select(func.count()).select_from(subquery)
        )
        return result.scalar_one()
