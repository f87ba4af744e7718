"""
Query Cache.

Keyed store for list and detail query results. An entry is fresh for
`stale_seconds` after it was written; invalidation marks entries stale
but keeps the value, so an optimistic update can still merge onto the
last known note.

Keys:
    ("notes", "list", <sorted params tuple>)
    ("notes", "detail", note_id)
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

CacheKey = tuple[Any, ...]

NOTES_PREFIX: CacheKey = ("notes",)
LIST_PREFIX: CacheKey = ("notes", "list")
DETAIL_PREFIX: CacheKey = ("notes", "detail")


def detail_key(note_id: str) -> CacheKey:
    return (*DETAIL_PREFIX, note_id)


def list_key(**params: Any) -> CacheKey:
    """Key for a list query. None values are dropped and lists become tuples."""
    normalized = []
    for name, value in sorted(params.items()):
        if value is None:
            continue
        if isinstance(value, list):
            value = tuple(value)
        normalized.append((name, value))
    return (*LIST_PREFIX, tuple(normalized))


@dataclass
class CacheEntry:
    value: Any
    stored_at: float
    stale: bool = False


class QueryCache:
    """
    Args:
        stale_seconds: How long a written entry counts as fresh.
        clock: Monotonic clock in seconds; injectable for tests.
    """

    def __init__(
        self,
        stale_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.stale_seconds = stale_seconds
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}

    def _is_fresh(self, entry: CacheEntry) -> bool:
        return not entry.stale and self._clock() - entry.stored_at < self.stale_seconds

    def get(self, key: CacheKey) -> Any | None:
        """The value if present and fresh, else None."""
        entry = self._entries.get(key)
        if entry is None or not self._is_fresh(entry):
            return None
        return entry.value

    def peek(self, key: CacheKey) -> Any | None:
        """The last stored value, fresh or not."""
        entry = self._entries.get(key)
        return entry.value if entry is not None else None

    def set(self, key: CacheKey, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, stored_at=self._clock())

    def remove(self, key: CacheKey) -> None:
        self._entries.pop(key, None)

    def invalidate(self, prefix: CacheKey) -> int:
        """Mark every entry whose key starts with `prefix` stale. Returns how many."""
        marked = 0
        for key, entry in self._entries.items():
            if key[: len(prefix)] == prefix:
                entry.stale = True
                marked += 1
        return marked

    def is_stale(self, key: CacheKey) -> bool:
        """True if the entry exists but would not be served by get()."""
        entry = self._entries.get(key)
        return entry is not None and not self._is_fresh(entry)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries
