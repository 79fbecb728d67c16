"""
Security primitives.

Password hashing (bcrypt) and bearer token signing/verification (JWT via
python-jose).  Both are plain classes so the API layer can inject them.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from jose.exceptions import JWTClaimsError
from pydantic import ValidationError

from app.core.config import settings
from app.schemas.token import TokenClaims


class TokenError(Exception):
    """Token could not be verified."""


class TokenMalformed(TokenError):
    """Token is structurally invalid or its signature does not match."""


class TokenExpired(TokenError):
    """Token signature is valid but its expiry has passed."""

    def __init__(self, expired_at: datetime):
        super().__init__(f"Token expired at {expired_at.isoformat()}")
        self.expired_at = expired_at


# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """bcrypt hashing capability."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
        except ValueError:
            # Stored digest is not a bcrypt hash
            return False


def _password_bytes(password: str) -> bytes:
    """Encode and cut to the bytes bcrypt actually hashes."""
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class TokenService:
    """
    Stateless signing and verification of bearer tokens.

    Tokens carry ``{userId, email, iat, exp}``.  There is no revocation:
    a token stays valid until ``exp``.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256",
                 ttl: timedelta = timedelta(minutes=10)):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, user_id: int, email: str, ttl: Optional[timedelta] = None) -> str:
        """
        Sign a token for the given user.

        Args:
            user_id: User ID
            email: User email
            ttl: Lifetime override; defaults to the service TTL

        Returns:
            Encoded JWT
        """
        issued_at = int(datetime.now(timezone.utc).timestamp())
        lifetime = self.ttl if ttl is None else ttl
        claims = {
            "userId": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + int(lifetime.total_seconds()),
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry of a token.

        Raises:
            TokenMalformed: bad structure, bad signature or missing claims
            TokenExpired: ``exp`` is not in the future
            TokenError: any other rejection
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm],
                                 options={"verify_exp": False})
        except JWTClaimsError as exc:
            raise TokenError(str(exc)) from exc
        except JWTError as exc:
            raise TokenMalformed(str(exc)) from exc

        try:
            claims = TokenClaims.model_validate(payload)
        except ValidationError as exc:
            raise TokenMalformed("Token claims are incomplete") from exc

        # exp == now counts as expired, so a zero TTL never verifies
        now = int(datetime.now(timezone.utc).timestamp())
        if claims.exp <= now:
            raise TokenExpired(datetime.fromtimestamp(claims.exp, tz=timezone.utc))
        return claims


def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


def get_token_service() -> TokenService:
    return TokenService(secret_key=settings.SECRET_KEY, algorithm=settings.ALGORITHM,
                        ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
