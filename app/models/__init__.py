"""SQLModel database models."""

from app.models.user import User, UserStatus

__all__ = [
    "User",
    "UserStatus",
]
