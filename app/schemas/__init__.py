"""Pydantic schemas for request/response validation."""

from app.schemas.token import TokenClaims
from app.schemas.user import (
    AuthResponse,
    BulkDeleteRequest,
    BulkOperationResponse,
    BulkStatusRequest,
    MessageResponse,
    UserListResponse,
    UserLogin,
    UserPublic,
    UserRegister,
)

__all__ = [
    "TokenClaims",
    "AuthResponse",
    "BulkDeleteRequest",
    "BulkOperationResponse",
    "BulkStatusRequest",
    "MessageResponse",
    "UserListResponse",
    "UserLogin",
    "UserPublic",
    "UserRegister",
]
