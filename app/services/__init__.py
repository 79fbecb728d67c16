"""Business logic services."""

from app.services.auth_guard import AuthGuard
from app.services.user_service import UserService

__all__ = [
    "AuthGuard",
    "UserService",
]
