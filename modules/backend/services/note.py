"""
Note Service.

Business logic for notes: ownership checks, content validation and
storage, tag reconciliation on writes, and the search/filter/pagination
pipeline for listing.

A note that belongs to someone else is reported exactly like a missing
note.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.content import (
    deserialize_content,
    extract_text,
    serialize_content,
    validate_content,
)
from modules.backend.core.exceptions import NotFoundError
from modules.backend.core.pagination import paginate
from modules.backend.core.utils import next_timestamp, utc_now
from modules.backend.models.note import Note
from modules.backend.repositories.note import NoteRepository
from modules.backend.schemas.note import (
    NoteCreate,
    NotePage,
    NoteResponse,
    NoteSearch,
    NoteUpdate,
)
from modules.backend.services.base import BaseService
from modules.backend.services.tag import TagService


class NoteService(BaseService):
    """
    Service for note business logic.

    Every public method takes the resolved owner id first and raises
    AuthenticationError when it is missing, before any query runs.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)
        self.tags = TagService(session)

    @staticmethod
    def _to_response(note: Note, tags: list[str]) -> NoteResponse:
        return NoteResponse(
            id=note.id,
            title=note.title,
            content=deserialize_content(note.content),
            tags=tags,
            is_archived=note.is_archived,
            created_at=note.created_at,
            updated_at=note.updated_at,
            last_edited=note.last_edited,
        )

    async def _get_owned(self, user_id: str, note_id: str) -> Note:
        note = await self.repo.get_owned(user_id, note_id)
        if note is None:
            raise NotFoundError("Note not found")
        return note

    async def _current_tags(self, note_id: str) -> list[str]:
        names = await self.tags.names_for_notes([note_id])
        return names.get(note_id, [])

    async def create_note(self, user_id: str, data: NoteCreate) -> NoteResponse:
        """
        Create a note and attach its tags.

        Raises:
            AuthenticationError: If user_id is missing
            ValidationError: If the title is blank, content or a tag name is invalid
        """
        self._require_user(user_id)
        self._validate_required({"title": data.title}, ["title"])
        content = validate_content(data.content)
        self.tags.validate_names(data.tags)

        self._log_operation("Creating note", title=data.title)

        now = utc_now()
        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                user_id=user_id,
                title=data.title,
                content=serialize_content(content),
                is_archived=False,
                created_at=now,
                updated_at=now,
                last_edited=now,
            ),
        )
        tags = await self.tags.reconcile(user_id, note.id, data.tags)

        self._log_debug("Note created", note_id=note.id, tag_count=len(tags))
        return self._to_response(note, tags)

    async def get_note(self, user_id: str, note_id: str) -> NoteResponse:
        """
        Get one of the user's notes.

        Raises:
            NotFoundError: If the note is missing or not the user's
        """
        self._require_user(user_id)
        note = await self._get_owned(user_id, note_id)
        return self._to_response(note, await self._current_tags(note.id))

    async def update_note(
        self,
        user_id: str,
        note_id: str,
        data: NoteUpdate,
    ) -> NoteResponse:
        """
        Apply the supplied fields to a note.

        Fields left out (or sent as null) are unchanged. `updated_at` and
        `last_edited` move forward on every call, even an empty one. When
        `tags` is supplied the tag list is replaced; otherwise the current
        tags are returned untouched.

        Raises:
            NotFoundError: If the note is missing or not the user's
            ValidationError: If a supplied field is invalid
        """
        self._require_user(user_id)
        if data.title is not None:
            self._validate_required({"title": data.title}, ["title"])
        content = validate_content(data.content) if data.content is not None else None
        if data.tags is not None:
            self.tags.validate_names(data.tags)

        note = await self._get_owned(user_id, note_id)

        changed = [
            name
            for name in ("title", "content", "tags", "is_archived")
            if getattr(data, name) is not None
        ]
        self._log_operation("Updating note", note_id=note_id, fields=changed)

        if data.title is not None:
            note.title = data.title
        if content is not None:
            note.content = serialize_content(content)
        if data.is_archived is not None:
            note.is_archived = data.is_archived

        stamp = next_timestamp(max(note.updated_at, note.last_edited))
        note.updated_at = stamp
        note.last_edited = stamp

        await self._execute_db_operation("update_note", self.repo.save(note))

        if data.tags is not None:
            tags = await self.tags.reconcile(user_id, note.id, data.tags)
        else:
            tags = await self._current_tags(note.id)
        return self._to_response(note, tags)

    async def archive_note(self, user_id: str, note_id: str) -> NoteResponse:
        """Archive a note. Same errors as update_note."""
        return await self.update_note(user_id, note_id, NoteUpdate(is_archived=True))

    async def unarchive_note(self, user_id: str, note_id: str) -> NoteResponse:
        """Unarchive a note. Same errors as update_note."""
        return await self.update_note(user_id, note_id, NoteUpdate(is_archived=False))

    async def delete_note(self, user_id: str, note_id: str) -> None:
        """
        Permanently delete a note and its tag associations.

        The tags themselves are kept.

        Raises:
            NotFoundError: If the note is missing or not the user's
        """
        self._require_user(user_id)
        note = await self._get_owned(user_id, note_id)

        self._log_operation("Deleting note", note_id=note_id)

        await self._execute_db_operation(
            "delete_note_tags",
            self.tags.repo.clear_note_tags(note.id),
        )
        await self._execute_db_operation("delete_note", self.repo.delete(note))

    async def list_notes(self, user_id: str, search: NoteSearch) -> NotePage:
        """
        One page of the user's notes, most recently edited first.

        Archive status and tags (any of) narrow the set in SQL. A text
        query then keeps notes whose title or body text contains it,
        ignoring case; that step scans every remaining candidate, so with
        a query the count and slice happen here instead of in SQL.

        Raises:
            FormatError: If a candidate's stored content cannot be read
        """
        self._require_user(user_id)
        tags = search.tags or None

        if search.query:
            candidates = await self.repo.list_filtered(
                user_id, tags=tags, is_archived=search.is_archived
            )
            needle = search.query.lower()
            matched = [
                note
                for note in candidates
                if needle in note.title.lower()
                or needle in extract_text(deserialize_content(note.content)).lower()
            ]
            total = len(matched)
            notes = paginate(matched, search.page, search.limit)
        else:
            total = await self.repo.count_filtered(
                user_id, tags=tags, is_archived=search.is_archived
            )
            notes = await self.repo.list_filtered(
                user_id,
                tags=tags,
                is_archived=search.is_archived,
                limit=search.limit,
                offset=(search.page - 1) * search.limit,
            )

        self._log_debug(
            "Notes listed",
            total=total,
            page=search.page,
            returned=len(notes),
            has_query=bool(search.query),
        )

        names = await self.tags.names_for_notes([note.id for note in notes])
        return NotePage(
            notes=[self._to_response(note, names.get(note.id, [])) for note in notes],
            total=total,
            page=search.page,
            limit=search.limit,
        )
