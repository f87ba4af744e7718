"""
Note Synchronizer.

Keeps a QueryCache consistent with the server across reads and writes.

Edits and deletes are applied to the cached note before the request
returns, then confirmed from the server response or rolled back. Several
mutations on the same note may be in flight at once; only the most recent
one owns the detail entry. An older mutation that finishes while
superseded never writes the entry. Instead it hands what it learned to the
next pending mutation as that mutation's rollback target: the server
response if it succeeded, its own pre-mutation snapshot if it failed. A
later rollback therefore lands on server-confirmed state, never on a
change the server rejected.

Errors are always re-raised after the cache is fixed up. Nothing is
retried.
"""

import itertools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from modules.backend.core.logging import get_logger, log_with_source
from modules.backend.core.utils import utc_now
from modules.client.api import NotesApi
from modules.client.cache import LIST_PREFIX, QueryCache, detail_key, list_key

logger = get_logger(__name__)


@dataclass
class PendingMutation:
    """
    One in-flight mutation of a note.

    `snapshot` is the note to restore on failure (None: no cached note).
    `settled_by` is the token of the newest earlier mutation whose outcome
    has been folded into the snapshot (0: taken from the cache).
    """

    token: int
    snapshot: dict[str, Any] | None
    settled_by: int = 0


class NoteSynchronizer:
    """
    Cached, optimistic access to notes.

    Usage:
        sync = NoteSynchronizer(NotesApi(client), QueryCache(stale_seconds=300))
        note = await sync.get_note(note_id)
        note = await sync.update_note(note_id, title="New title")
    """

    def __init__(
        self,
        api: NotesApi,
        cache: QueryCache,
        now: Callable[[], datetime] = utc_now,
    ) -> None:
        self.api = api
        self.cache = cache
        self._now = now
        self._tokens = itertools.count(1)
        self._pending: dict[str, list[PendingMutation]] = {}
        self._latest: dict[str, int] = {}

    # Reads

    async def get_note(self, note_id: str) -> dict[str, Any]:
        """Fresh cached note, or fetch and cache it."""
        key = detail_key(note_id)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        note = await self.api.get_note(note_id)
        self.cache.set(key, note)
        return note

    async def list_notes(
        self,
        query: str | None = None,
        tags: list[str] | None = None,
        is_archived: bool | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> dict[str, Any]:
        """Fresh cached page for these exact parameters, or fetch and cache it."""
        key = list_key(query=query, tags=tags, is_archived=is_archived, page=page, limit=limit)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        result = await self.api.list_notes(
            query=query, tags=tags, is_archived=is_archived, page=page, limit=limit
        )
        self.cache.set(key, result)
        return result

    # Mutations

    async def create_note(
        self,
        title: str,
        content: dict[str, Any],
        tags: list[str] | None = None,
    ) -> dict[str, Any]:
        """Create on the server, then cache the new note. No optimistic entry."""
        note = await self.api.create_note(title, content, tags)
        self.cache.set(detail_key(note["id"]), note)
        self.cache.invalidate(LIST_PREFIX)
        return note

    async def update_note(self, note_id: str, **fields: Any) -> dict[str, Any]:
        """
        Show the edit immediately, then confirm or roll back.

        Fields are any of title, content, tags, is_archived. None values
        are ignored.
        """
        changes = {name: value for name, value in fields.items() if value is not None}
        key = detail_key(note_id)
        current = self.cache.peek(key)
        mutation = self._begin(note_id, current)

        if current is not None:
            stamp = self._now().isoformat()
            self.cache.set(key, {**current, **changes, "updated_at": stamp, "last_edited": stamp})

        return await self._settle(note_id, mutation, self.api.update_note(note_id, **changes))

    async def archive_note(self, note_id: str) -> dict[str, Any]:
        return await self.update_note(note_id, is_archived=True)

    async def unarchive_note(self, note_id: str) -> dict[str, Any]:
        return await self.update_note(note_id, is_archived=False)

    async def delete_note(self, note_id: str) -> None:
        """Drop the cached note immediately; restore it if the server refuses."""
        key = detail_key(note_id)
        mutation = self._begin(note_id, self.cache.peek(key))
        self.cache.remove(key)
        await self._settle(note_id, mutation, self._delete(note_id))

    async def _delete(self, note_id: str) -> None:
        await self.api.delete_note(note_id)

    # Single-flight bookkeeping

    def _begin(self, note_id: str, snapshot: dict[str, Any] | None) -> PendingMutation:
        mutation = PendingMutation(token=next(self._tokens), snapshot=snapshot)
        self._pending.setdefault(note_id, []).append(mutation)
        self._latest[note_id] = mutation.token
        return mutation

    def _restore(self, note_id: str, snapshot: dict[str, Any] | None) -> None:
        key = detail_key(note_id)
        if snapshot is None:
            self.cache.remove(key)
        else:
            self.cache.set(key, snapshot)

    async def _settle(self, note_id: str, mutation: PendingMutation, call: Awaitable[Any]) -> Any:
        try:
            result = await call
        except Exception as e:
            self._finish(note_id, mutation, succeeded=False, result=None)
            log_with_source(
                logger,
                "cli",
                "warning",
                "Mutation failed, cache rolled back",
                note_id=note_id,
                error=str(e),
            )
            raise
        self._finish(note_id, mutation, succeeded=True, result=result)
        return result

    def _finish(
        self,
        note_id: str,
        mutation: PendingMutation,
        succeeded: bool,
        result: dict[str, Any] | None,
    ) -> None:
        pending = self._pending[note_id]
        pending.remove(mutation)

        if mutation.token == self._latest[note_id]:
            if succeeded:
                self._restore(note_id, result)
            else:
                self._restore(note_id, mutation.snapshot)
        else:
            successor = next((m for m in pending if m.token > mutation.token), None)
            if successor is None:
                # Newer mutations already settled the entry; let the next read refetch.
                self.cache.invalidate(detail_key(note_id))
            elif successor.settled_by < mutation.token:
                successor.snapshot = result if succeeded else mutation.snapshot
                successor.settled_by = mutation.token

        if not pending:
            del self._pending[note_id]
            del self._latest[note_id]

        if succeeded:
            self.cache.invalidate(LIST_PREFIX)

    def pending_count(self, note_id: str) -> int:
        """Mutations of this note still waiting for the server."""
        return len(self._pending.get(note_id, []))
