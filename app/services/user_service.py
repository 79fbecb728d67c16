"""
User service.

Account operations: registration, login, listing and the admin bulk
mutations.  Every mutating operation validates its input first, then
runs as a single transaction that is rolled back on any failure.
"""

import math
import re
from typing import Any, Iterable, Optional

from pydantic.alias_generators import to_camel
from sqlmodel import Session

from app.core.errors import Conflict, Forbidden, NotFound, Unauthenticated, ValidationFailed
from app.core.security import PasswordHasher, TokenService
from app.db.repositories.user import UserRepository, UserSort
from app.db.session import transaction
from app.models.user import User, UserStatus
from app.schemas.user import AuthResponse, BulkOperationResponse, RegisterResponse, UserListResponse, UserLogin, \
    UserPublic, UserRegister

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)")

INVALID_CREDENTIALS = "Invalid email or password."


class UserService:
    """Service for user-related business logic."""

    def __init__(self, session: Session, hasher: PasswordHasher, tokens: TokenService):
        """
        Initialize service with database session and security primitives.

        Args:
            session: SQLModel database session
            hasher: Password hashing capability
            tokens: Bearer token service
        """
        self.session = session
        self.repository = UserRepository(session)
        self.hasher = hasher
        self.tokens = tokens

    def register(self, data: UserRegister) -> RegisterResponse:
        """
        Register a new user and log them in.

        Args:
            data: User registration data

        Returns:
            Fresh token and the created user

        Raises:
            ValidationFailed: Missing field or malformed email
            Conflict: If email already exists
        """
        _ensure_required_fields(data, ("first_name", "last_name", "email", "password"))
        _validate_email_format(data.email)

        with transaction(self.session):
            if self.repository.email_exists(data.email):
                raise Conflict("Email already registered.")

            user = User(email=data.email, password_hash=self.hasher.hash(data.password),
                        first_name=data.first_name, last_name=data.last_name,
                        job_title=data.job_title or None, company=data.company or None, )
            user_id = self.repository.insert(user)
            # Registration counts as the first login
            self.repository.update_last_login(user_id)

        token = self.tokens.issue(user_id, user.email)
        return RegisterResponse(message="User registered successfully!", token=token, user_id=user_id,
                            user=UserPublic.model_validate(user))

    def login(self, data: UserLogin) -> AuthResponse:
        """
        Authenticate user and return access token.

        Unknown email and wrong password produce the same message.

        Raises:
            ValidationFailed: Missing field or malformed email
            Unauthenticated: If credentials are invalid
            Forbidden: If the account is blocked
        """
        _ensure_required_fields(data, ("email", "password"))
        _validate_email_format(data.email)

        with transaction(self.session):
            user = self.repository.find_by_email(data.email)
            if user is None or not self.hasher.verify(data.password, user.password_hash):
                raise Unauthenticated(INVALID_CREDENTIALS)
            if user.status == UserStatus.blocked:
                raise Forbidden("Account is blocked. Please contact support.")
            self.repository.update_last_login(user.id)

        token = self.tokens.issue(user.id, user.email)
        return AuthResponse(message="Login successful!", token=token, user=UserPublic.model_validate(user))

    def list_users(self, sort_by: Optional[str] = None, sort_order: Optional[str] = None) -> UserListResponse:
        users = self.repository.list_all(UserSort.resolve(sort_by, sort_order))
        return UserListResponse(message="Users retrieved successfully!", count=len(users), users=users)

    def update_status(self, user_ids: Any, status: Any) -> BulkOperationResponse:
        """
        Set the status of several users at once.

        A statement matching no rows is still committed before reporting
        NotFound.

        Raises:
            ValidationFailed: Bad id list or status
            NotFound: No user matched
        """
        if not isinstance(user_ids, list) or not user_ids:
            raise ValidationFailed("Please provide a non-empty array of user IDs.")
        if not isinstance(status, str) or status.lower() not in UserStatus.__members__:
            raise ValidationFailed("Invalid status provided. Must be 'active' or 'blocked'.")
        new_status = UserStatus(status.lower())
        valid_ids = coerce_user_ids(user_ids)
        if not valid_ids:
            raise ValidationFailed("No valid user IDs provided for status update.")

        with transaction(self.session):
            affected = self.repository.update_status_bulk(valid_ids, new_status)

        if affected == 0:
            raise NotFound("No users found matching the provided IDs for status update.")
        return BulkOperationResponse(
            message=f"Successfully updated status to '{new_status.value}' for {affected} user(s).",
            affected_rows=affected, )

    def delete_users(self, user_ids: Any) -> BulkOperationResponse:
        """
        Physically delete several users at once.

        Unlike status updates, a delete matching no rows is rolled back.

        Raises:
            ValidationFailed: Bad id list
            NotFound: No user matched
        """
        if not isinstance(user_ids, list) or not user_ids:
            raise ValidationFailed("Please provide a non-empty array of user IDs.")
        valid_ids = coerce_user_ids(user_ids)
        if not valid_ids:
            raise ValidationFailed("No valid user IDs provided for deletion.")

        with transaction(self.session):
            affected = self.repository.delete_bulk(valid_ids)
            if affected == 0:
                raise NotFound("No users found matching the provided IDs for deletion.")

        return BulkOperationResponse(message=f"Successfully deleted {affected} user(s).", affected_rows=affected)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------

def _ensure_required_fields(data: Any, fields: Iterable[str]) -> None:
    """Empty strings count as missing."""
    for field in fields:
        if not getattr(data, field):
            raise ValidationFailed(f"Please provide {to_camel(field)}.")


def _validate_email_format(email: str) -> None:
    if not EMAIL_PATTERN.fullmatch(email):
        raise ValidationFailed("Invalid email format.")


def coerce_user_ids(raw_ids: Iterable[Any]) -> list[int]:
    """
    Coerce raw ids to positive integers, dropping anything invalid.

    Integers are kept, floats truncated, strings parsed by their leading
    integer (``"12abc"`` -> 12).  Duplicates are collapsed, order kept.
    """
    ids: list[int] = []
    for raw in raw_ids:
        if isinstance(raw, bool):
            continue
        if isinstance(raw, int):
            value = raw
        elif isinstance(raw, float):
            if not math.isfinite(raw):
                continue
            value = int(raw)
        elif isinstance(raw, str):
            match = LEADING_INT_PATTERN.match(raw)
            if not match:
                continue
            value = int(match.group(1))
        else:
            continue
        if value > 0 and value not in ids:
            ids.append(value)
    return ids
