"""Tests for the bearer token guard."""

from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest
from jose import jwt

from app.core.errors import Forbidden, Unauthenticated
from app.core.security import TokenError, TokenService
from app.models.user import UserStatus
from app.schemas.user import UserPublic
from app.services.auth_guard import AuthGuard


class SessionTracker:
    """Session factory wrapper counting acquisitions and releases."""

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self.opened = 0
        self.closed = 0

    @contextmanager
    def __call__(self):
        self.opened += 1
        try:
            with self.session_factory() as session:
                yield session
        finally:
            self.closed += 1


@pytest.fixture
def tracker(session_factory):
    return SessionTracker(session_factory)


@pytest.fixture
def guard(tracker, tokens):
    return AuthGuard(tracker, tokens)


def _bearer(token: str) -> str:
    return f"Bearer {token}"


# ======================================================================
# Header handling
# ======================================================================


class TestHeader:
    @pytest.mark.parametrize("header", [None, "", "Basic dXNlcjpwYXNz", "bearer abc", "Token abc"])
    def test_missing_or_wrong_scheme(self, guard, tracker, header):
        with pytest.raises(Unauthenticated, match="No bearer token provided."):
            guard.authenticate(header)
        assert tracker.opened == 0

    def test_scheme_without_token_is_invalid(self, guard):
        with pytest.raises(Unauthenticated, match="Invalid token."):
            guard.authenticate("Bearer")


# ======================================================================
# Token verification
# ======================================================================


class TestTokenFailures:
    def test_malformed(self, guard, tracker):
        with pytest.raises(Unauthenticated, match="Invalid token."):
            guard.authenticate(_bearer("garbage"))
        assert tracker.opened == 0

    def test_foreign_signature(self, guard, make_user):
        user = make_user("ada@example.com")
        token = TokenService(secret_key="not-our-secret").issue(user.id, user.email)
        with pytest.raises(Unauthenticated, match="Invalid token."):
            guard.authenticate(_bearer(token))

    def test_expired_reports_expiry(self, guard, tokens, make_user):
        user = make_user("ada@example.com")
        token = tokens.issue(user.id, user.email, ttl=timedelta(0))
        expired_at = datetime.fromtimestamp(jwt.get_unverified_claims(token)["exp"], tz=timezone.utc)

        with pytest.raises(Unauthenticated) as exc_info:
            guard.authenticate(_bearer(token))

        assert exc_info.value.message == f"Token expired at {expired_at.isoformat()}."

    def test_other_verification_failure_is_generic(self, tracker):
        tokens = Mock(spec=TokenService)
        tokens.verify.side_effect = TokenError("algorithm not allowed")
        with pytest.raises(Unauthenticated) as exc_info:
            AuthGuard(tracker, tokens).authenticate(_bearer("whatever"))
        assert exc_info.value.message == "Token verification failed."


# ======================================================================
# Live account checks
# ======================================================================


class TestAccountChecks:
    def test_valid_token_returns_public_user(self, guard, tokens, make_user):
        user = make_user("ada@example.com")
        current = guard.authenticate(_bearer(tokens.issue(user.id, user.email)))
        assert isinstance(current, UserPublic)
        assert current.id == user.id
        assert "password_hash" not in current.model_dump()

    def test_unknown_user(self, guard, tokens, tracker):
        with pytest.raises(Unauthenticated, match="User not found."):
            guard.authenticate(_bearer(tokens.issue(4242, "ghost@example.com")))
        assert tracker.opened == tracker.closed == 1

    def test_blocked_user_with_valid_token(self, guard, tokens, tracker, make_user):
        user = make_user("ada@example.com", status=UserStatus.blocked)
        token = tokens.issue(user.id, user.email)
        # the token itself is still fine
        assert tokens.verify(token).user_id == user.id

        with pytest.raises(Forbidden, match="Account is blocked."):
            guard.authenticate(_bearer(token))
        assert tracker.opened == tracker.closed == 1

    def test_session_released_on_success(self, guard, tokens, tracker, make_user):
        user = make_user("ada@example.com")
        guard.authenticate(_bearer(tokens.issue(user.id, user.email)))
        assert tracker.opened == tracker.closed == 1

    def test_session_released_when_lookup_fails(self, tokens, tracker, make_user, monkeypatch):
        user = make_user("ada@example.com")
        monkeypatch.setattr("app.services.auth_guard.UserRepository.find_by_id",
                            Mock(side_effect=RuntimeError("connection lost")))
        with pytest.raises(RuntimeError):
            AuthGuard(tracker, tokens).authenticate(_bearer(tokens.issue(user.id, user.email)))
        assert tracker.opened == tracker.closed == 1
