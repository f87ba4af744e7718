"""
Tag Service.

Resolves a note's tag names into per-user Tag rows and rewrites the
note's associations. Reconciliation is a full replace: all associations
are deleted, then one is inserted per distinct name. Both steps run in the
caller's transaction, so a failure part-way leaves the previous tag set.
"""

from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.repositories.tag import TagRepository
from modules.backend.schemas.tag import TagList, TagResponse
from modules.backend.services.base import BaseService

TAG_NAME_MAX_LENGTH = 100


class TagService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = TagRepository(session)

    def validate_names(self, tag_names: Sequence[str]) -> None:
        """
        Check every name before anything is written.

        Raises:
            ValidationError: If a name is empty or too long
        """
        for name in tag_names:
            self._validate_string_length(
                name, "tags", min_length=1, max_length=TAG_NAME_MAX_LENGTH
            )

    async def reconcile(
        self,
        user_id: str,
        note_id: str,
        tag_names: Sequence[str],
    ) -> list[str]:
        """
        Replace the note's tags with `tag_names`.

        Names are matched exactly (case-sensitive) against the user's tags
        and created when missing. Repeated names are kept once, at their
        first position. An empty list clears the note's tags.

        Returns:
            Tag names now on the note, in processing order
        """
        self._require_user(user_id)
        self.validate_names(tag_names)
        return await self._execute_db_operation(
            "reconcile_tags",
            self._replace(user_id, note_id, tag_names),
        )

    async def _replace(
        self,
        user_id: str,
        note_id: str,
        tag_names: Sequence[str],
    ) -> list[str]:
        await self.repo.clear_note_tags(note_id)

        applied: list[str] = []
        for name in tag_names:
            if name in applied:
                continue
            tag = await self.repo.get_by_name(user_id, name)
            if tag is None:
                tag = await self.repo.create(user_id=user_id, name=name)
                self._log_debug("Tag created", tag_id=tag.id)
            await self.repo.add_note_tag(note_id, tag.id, position=len(applied))
            applied.append(name)

        self._log_debug("Tags reconciled", note_id=note_id, count=len(applied))
        return applied

    async def names_for_notes(self, note_ids: Sequence[str]) -> dict[str, list[str]]:
        """Current tag names for each note id (notes without tags are absent)."""
        return await self.repo.names_for_notes(note_ids)

    async def list_tags(self, user_id: str) -> TagList:
        """All of the user's tags ordered by name, orphans included."""
        self._require_user(user_id)
        rows = await self.repo.list_with_counts(user_id)
        tags = [
            TagResponse(
                id=tag.id,
                name=tag.name,
                note_count=count,
                created_at=tag.created_at,
                updated_at=tag.updated_at,
            )
            for tag, count in rows
        ]
        return TagList(tags=tags, total=len(tags))
