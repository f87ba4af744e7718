"""
Pagination Utilities.

Page-number pagination for list endpoints: page starts at 1, limit is
bounded to 1..100. Out-of-range values are rejected with a 422
rather than clamped.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TypeVar

from fastapi import Query

T = TypeVar("T")

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageParams:
    """Page and limit extracted from the query string."""

    page: int = 1
    limit: int = DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def get_page_params(
    page: int = Query(
        default=1,
        ge=1,
        description="Page number, starting at 1",
    ),
    limit: int = Query(
        default=DEFAULT_LIMIT,
        ge=1,
        le=MAX_LIMIT,
        description="Maximum number of items per page",
    ),
) -> PageParams:
    """
    FastAPI dependency for page parameters.

    Usage:
        @router.get("/notes")
        async def list_notes(paging: PageParams = Depends(get_page_params)):
            ...
    """
    return PageParams(page=page, limit=limit)


def page_bounds(page: int, limit: int) -> tuple[int, int]:
    """Start (inclusive) and end (exclusive) indexes of a page."""
    start = (page - 1) * limit
    return start, start + limit


def paginate(items: Sequence[T], page: int, limit: int) -> list[T]:
    """Slice one page out of an already ordered sequence."""
    start, end = page_bounds(page, limit)
    return list(items[start:end])
