"""
Auth API Endpoints.

Registration and password login. Login returns a bearer token for the
Authorization header of every other v1 route.
"""

from fastapi import APIRouter

from modules.backend.core.dependencies import CurrentUserId, DbSession, RequestId
from modules.backend.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from modules.backend.schemas.base import ApiResponse, ResponseMetadata
from modules.backend.services.auth import AuthService

router = APIRouter()


@router.post(
    "/register",
    response_model=ApiResponse[UserResponse],
    status_code=201,
    summary="Register an account",
)
async def register(
    data: RegisterRequest,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    user = await AuthService(db).register(data.email, data.password)
    return ApiResponse(data=user, metadata=ResponseMetadata(request_id=request_id))


@router.post(
    "/login",
    response_model=ApiResponse[TokenResponse],
    summary="Log in with email and password",
)
async def login(
    data: LoginRequest,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TokenResponse]:
    token = await AuthService(db).authenticate(data.email, data.password)
    return ApiResponse(data=token, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "/me",
    response_model=ApiResponse[UserResponse],
    summary="Current user",
)
async def me(
    db: DbSession,
    user_id: CurrentUserId,
    request_id: RequestId,
) -> ApiResponse[UserResponse]:
    user = await AuthService(db).get_user(user_id)
    return ApiResponse(data=user, metadata=ResponseMetadata(request_id=request_id))
