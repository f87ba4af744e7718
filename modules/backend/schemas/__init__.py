# Pydantic schemas package
from modules.backend.schemas.base import (
    ApiResponse,
    ErrorDetail,
    ErrorResponse,
    MessageResponse,
    ResponseMetadata,
)

__all__ = [
    "ApiResponse",
    "ErrorDetail",
    "ErrorResponse",
    "MessageResponse",
    "ResponseMetadata",
]
