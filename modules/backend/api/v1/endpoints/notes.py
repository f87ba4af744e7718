"""
Notes API Endpoints.

REST API endpoints for note management. Every route requires a bearer
token; notes of other users answer 404.
"""

from fastapi import APIRouter, Depends, Query

from modules.backend.core.dependencies import CurrentUserId, DbSession, RequestId
from modules.backend.core.pagination import PageParams, get_page_params
from modules.backend.schemas.base import ApiResponse, MessageResponse, ResponseMetadata
from modules.backend.schemas.note import (
    NoteCreate,
    NotePage,
    NoteResponse,
    NoteSearch,
    NoteUpdate,
)
from modules.backend.services.note import NoteService

router = APIRouter()


def _split_tags(tags: str | None) -> list[str] | None:
    """`a,b` -> ["a", "b"]. Empty entries are dropped; names are kept as sent."""
    if tags is None:
        return None
    return [name for name in tags.split(",") if name] or None


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note with block content and optional tags.",
)
async def create_note(
    data: NoteCreate,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    service = NoteService(db)
    note = await service.create_note(user_id, data)
    return ApiResponse(data=note, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "",
    response_model=ApiResponse[NotePage],
    summary="List notes",
    description=(
        "Page through notes, most recently edited first. Filter by archive "
        "status, by tags (comma-separated, any match) and by text in the "
        "title or body."
    ),
)
async def list_notes(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
    paging: PageParams = Depends(get_page_params),
    query: str | None = Query(
        default=None,
        max_length=200,
        description="Case-insensitive text to find in title or body",
    ),
    tags: str | None = Query(
        default=None,
        description="Comma-separated tag names; a note matches if it has any",
    ),
    is_archived: bool | None = Query(
        default=None,
        description="Exact archive status; omit to include both",
    ),
) -> ApiResponse[NotePage]:
    search = NoteSearch(
        query=query or None,
        tags=_split_tags(tags),
        is_archived=is_archived,
        page=paging.page,
        limit=paging.limit,
    )
    page = await NoteService(db).list_notes(user_id, search)
    return ApiResponse(data=page, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
async def get_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).get_note(user_id, note_id)
    return ApiResponse(data=note, metadata=ResponseMetadata(request_id=request_id))


@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Only provided fields are updated. Sending `tags` replaces the tag list.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).update_note(user_id, note_id, data)
    return ApiResponse(data=note, metadata=ResponseMetadata(request_id=request_id))


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[MessageResponse],
    summary="Delete a note",
    description="Permanently delete a note. Its tags are kept.",
)
async def delete_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[MessageResponse]:
    await NoteService(db).delete_note(user_id, note_id)
    return ApiResponse(
        data=MessageResponse(message="Note deleted successfully"),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/{note_id}/archive",
    response_model=ApiResponse[NoteResponse],
    summary="Archive a note",
)
async def archive_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).archive_note(user_id, note_id)
    return ApiResponse(data=note, metadata=ResponseMetadata(request_id=request_id))


@router.post(
    "/{note_id}/unarchive",
    response_model=ApiResponse[NoteResponse],
    summary="Unarchive a note",
)
async def unarchive_note(
    note_id: str,
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    note = await NoteService(db).unarchive_note(user_id, note_id)
    return ApiResponse(data=note, metadata=ResponseMetadata(request_id=request_id))
