"""Database repositories."""

from app.db.repositories.user import UserRepository, UserSort

__all__ = [
    "UserRepository",
    "UserSort",
]
