"""
Bearer token guard.

Gates every operation except register/login: verifies the token, then
re-checks the live account so that blocking a user takes effect even
while their token is still valid.
"""

from typing import Optional

from app.core.errors import Forbidden, Unauthenticated
from app.core.security import TokenError, TokenExpired, TokenMalformed, TokenService
from app.db.repositories.user import UserRepository
from app.db.session import SessionFactory
from app.models.user import UserStatus
from app.schemas.user import UserPublic

BEARER_PREFIX = "Bearer"


class AuthGuard:
    """Read-only gate resolving an ``Authorization`` header to a user."""

    def __init__(self, session_factory: SessionFactory, tokens: TokenService):
        self.session_factory = session_factory
        self.tokens = tokens

    def authenticate(self, authorization: Optional[str]) -> UserPublic:
        """
        Resolve the authenticated user for a request.

        Args:
            authorization: Raw ``Authorization`` header value, if any

        Returns:
            Public projection of the authenticated user

        Raises:
            Unauthenticated: No/invalid/expired token, or unknown user
            Forbidden: The account is blocked
        """
        if not authorization or not authorization.startswith(BEARER_PREFIX):
            raise Unauthenticated("No bearer token provided.")

        token = authorization.partition(" ")[2]
        try:
            claims = self.tokens.verify(token)
        except TokenMalformed:
            raise Unauthenticated("Invalid token.")
        except TokenExpired as exc:
            raise Unauthenticated(f"Token expired at {exc.expired_at.isoformat()}.")
        except TokenError:
            raise Unauthenticated("Token verification failed.")

        # Session is released on every exit path, rejections included
        with self.session_factory() as session:
            user = UserRepository(session).find_by_id(claims.user_id)

        if user is None:
            raise Unauthenticated("User not found.")
        if user.status == UserStatus.blocked:
            raise Forbidden("Account is blocked.")
        return user
