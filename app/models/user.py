"""
User database model.

Defines the users table backing authentication and the admin directory.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class UserStatus(str, Enum):
    """Account status flag."""
    active = "active"
    blocked = "blocked"


class User(SQLModel, table=True):
    """
    User model for authentication.

    Stores user credentials and profile information.  ``password_hash`` is
    only ever read on the login path; every other read goes through the
    public projection.
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255, nullable=False)
    password_hash: str = Field(nullable=False, max_length=255)

    # Profile
    first_name: str = Field(nullable=False, max_length=255)
    last_name: str = Field(nullable=False, max_length=255)
    job_title: Optional[str] = Field(default=None, max_length=255)
    company: Optional[str] = Field(default=None, max_length=255)
    status: UserStatus = Field(default=UserStatus.active, nullable=False)

    # Timestamps (UTC, timezone-aware)
    registration_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc),
                                        sa_type=DateTime(timezone=True), nullable=False)
    last_login_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
