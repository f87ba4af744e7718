"""
Tags API Endpoints.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUserId, DbSession, RequestId
from modules.backend.schemas.base import ApiResponse, ResponseMetadata
from modules.backend.schemas.tag import TagList
from modules.backend.services.tag import TagService

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[TagList],
    summary="List tags",
    description="All of the caller's tags ordered by name, with note counts. Unused tags are included.",
)
async def list_tags(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[TagList]:
    tags = await TagService(db).list_tags(user_id)
    return ApiResponse(data=tags, metadata=ResponseMetadata(request_id=request_id))
