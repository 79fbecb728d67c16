"""Shared fixtures.

Every test runs against a fresh in-memory SQLite database.  The settings
object reads the environment at import time, so the variables below are
set before anything from ``app`` is imported.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlalchemy import func  # noqa: E402
from sqlmodel import SQLModel, create_engine, select  # noqa: E402

import app.db.base  # noqa: E402,F401
from app.core.security import PasswordHasher, TokenService, get_token_service  # noqa: E402
from app.db.session import create_session_factory  # noqa: E402
from app.models.user import User, UserStatus  # noqa: E402
from app.services.user_service import UserService  # noqa: E402

DEFAULT_PASSWORD = "correct-horse"


@pytest.fixture
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def session(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def hasher() -> PasswordHasher:
    # Minimum bcrypt cost keeps the suite fast
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenService:
    return get_token_service()


@pytest.fixture
def service(session, hasher, tokens) -> UserService:
    return UserService(session, hasher, tokens)


@pytest.fixture
def make_user(session_factory, hasher):
    """Insert a committed user row and return it."""

    def _make_user(
        email: str,
        password: str = DEFAULT_PASSWORD,
        first_name: str = "Ada",
        last_name: str = "Lovelace",
        status: UserStatus = UserStatus.active,
        registration_date: datetime | None = None,
        last_login_date: datetime | None = None,
    ) -> User:
        user = User(
            email=email,
            password_hash=hasher.hash(password),
            first_name=first_name,
            last_name=last_name,
            status=status,
            last_login_date=last_login_date,
        )
        if registration_date is not None:
            user.registration_date = registration_date
        with session_factory() as db:
            db.add(user)
            db.commit()
            db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user_count(session_factory):
    """Count user rows through a fresh session."""

    def _user_count() -> int:
        with session_factory() as db:
            return db.exec(select(func.count()).select_from(User)).one()

    return _user_count
