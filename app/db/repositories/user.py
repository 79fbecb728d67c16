"""
User repository.

Handles database operations for User model.  Methods never commit: they
run inside whatever transaction the calling service has opened.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Sequence

from sqlalchemy import delete, func, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from app.core.errors import Conflict
from app.models.user import User, UserStatus
from app.schemas.user import UserPublic


class SortField(str, Enum):
    """Columns the user list may be ordered by."""
    id = "id"
    first_name = "first_name"
    last_name = "last_name"
    email = "email"
    last_login_date = "last_login_date"
    registration_date = "registration_date"
    status = "status"


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


_SORT_ALIASES = {
    "firstName": SortField.first_name,
    "lastName": SortField.last_name,
    "lastLoginDate": SortField.last_login_date,
    "registrationDate": SortField.registration_date,
}

# Projection returned everywhere except the login path
_PUBLIC_COLUMNS = (
    User.id,
    User.email,
    User.first_name,
    User.last_name,
    User.job_title,
    User.company,
    User.status,
    User.registration_date,
    User.last_login_date,
)


@dataclass(frozen=True)
class UserSort:
    """Resolved ordering for the user list."""
    field: SortField = SortField.last_login_date
    order: SortOrder = SortOrder.DESC

    @classmethod
    def resolve(cls, sort_by: Optional[str], sort_order: Optional[str]) -> "UserSort":
        """
        Build a sort from raw query values.

        Unknown columns fall back to ``last_login_date``; anything other
        than ``ASC`` (case-insensitive) means ``DESC``.
        """
        field = SortField.last_login_date
        if sort_by in _SORT_ALIASES:
            field = _SORT_ALIASES[sort_by]
        elif sort_by in SortField.__members__:
            field = SortField(sort_by)

        order = SortOrder.DESC
        if sort_order and sort_order.upper() == SortOrder.ASC.value:
            order = SortOrder.ASC
        return cls(field=field, order=order)

    def order_by(self) -> list:
        """ORDER BY clauses implementing the list ordering policy."""
        column = col(getattr(User, self.field.value))
        registration = col(User.registration_date)
        if self.field is SortField.last_login_date:
            # Users who never logged in sink to the bottom in both directions
            if self.order is SortOrder.DESC:
                return [column.is_(None), column.desc(), registration.desc()]
            return [column.is_(None), column.asc(), registration.asc()]
        direction = column.asc() if self.order is SortOrder.ASC else column.desc()
        return [direction, registration.desc()]


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def find_by_email(self, email: str) -> Optional[User]:
        """
        Get user by exact email, including the password digest.

        Args:
            email: User email

        Returns:
            User instance if found, None otherwise
        """
        statement = select(User).where(User.email == email)
        return self.session.exec(statement).first()

    def find_by_id(self, user_id: int) -> Optional[UserPublic]:
        """
        Get the public projection of a user by ID.

        Args:
            user_id: User ID

        Returns:
            UserPublic if found, None otherwise
        """
        statement = select(*_PUBLIC_COLUMNS).where(User.id == user_id)
        row = self.session.exec(statement).first()
        return UserPublic.model_validate(dict(row._mapping)) if row else None

    def email_exists(self, email: str) -> bool:
        """
        Check if a user with the given email exists.

        Args:
            email: Email to check

        Returns:
            True if user exists, False otherwise
        """
        statement = select(func.count()).select_from(User).where(User.email == email)
        return self.session.exec(statement).one() > 0

    def insert(self, user: User) -> int:
        """
        Add a new user and flush to obtain its id.

        Args:
            user: User instance to create

        Returns:
            Generated user id

        Raises:
            Conflict: If the unique email constraint rejects the row
        """
        self.session.add(user)
        try:
            self.session.flush()
        except IntegrityError as exc:
            raise Conflict("Email already registered.") from exc
        return user.id

    def update_last_login(self, user_id: int) -> None:
        statement = update(User).where(col(User.id) == user_id).values(last_login_date=datetime.now(timezone.utc))
        self.session.exec(statement)

    def list_all(self, sort: UserSort) -> list[UserPublic]:
        """
        Get all users in the requested order.

        Args:
            sort: Resolved ordering

        Returns:
            Public projections of every user
        """
        statement = select(*_PUBLIC_COLUMNS).order_by(*sort.order_by())
        return [UserPublic.model_validate(dict(row._mapping)) for row in self.session.exec(statement).all()]

    def update_status_bulk(self, user_ids: Sequence[int], status: UserStatus) -> int:
        """
        Set the status of every listed user in one statement.

        Returns:
            Number of matched rows (0 for an empty id list, without querying)
        """
        if not user_ids:
            return 0
        statement = update(User).where(col(User.id).in_(user_ids)).values(status=status)
        return self.session.exec(statement).rowcount

    def delete_bulk(self, user_ids: Sequence[int]) -> int:
        """
        Physically delete every listed user in one statement.

        Returns:
            Number of deleted rows (0 for an empty id list, without querying)
        """
        if not user_ids:
            return 0
        statement = delete(User).where(col(User.id).in_(user_ids))
        return self.session.exec(statement).rowcount
