"""
User API schemas.

Pydantic models for user-related request/response validation.

Request bodies accept camelCase (``firstName``, ``userIds``) as well as
snake_case field names.  Presence and format checks are done by the
service layer so that every operation reports the same error shape.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.models.user import UserStatus


class RequestSchema(BaseModel):
    """Base for request bodies: camelCase aliases, snake_case names."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# Request schemas
class UserRegister(RequestSchema):
    """Schema for user registration."""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    job_title: Optional[str] = None
    company: Optional[str] = None


class UserLogin(RequestSchema):
    """Schema for user login."""
    email: Optional[str] = None
    password: Optional[str] = None


class BulkDeleteRequest(RequestSchema):
    """Schema for bulk deletion; ids are coerced by the service."""
    user_ids: Any = None


class BulkStatusRequest(BulkDeleteRequest):
    """Schema for bulk status update."""
    status: Any = None


# Response schemas
class UserPublic(BaseModel):
    """Schema for user data in API responses (no password digest)."""
    id: int
    email: str
    first_name: str
    last_name: str
    job_title: Optional[str] = None
    company: Optional[str] = None
    status: UserStatus
    registration_date: datetime
    last_login_date: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


class AuthResponse(MessageResponse):
    """Returned by login; register extends it."""
    token: str
    user: UserPublic


class RegisterResponse(AuthResponse):
    """Returned by register; repeats the new id at the top level."""
    user_id: int = Field(serialization_alias="userId")


class UserListResponse(MessageResponse):
    count: int
    users: list[UserPublic]


class BulkOperationResponse(MessageResponse):
    affected_rows: int
