"""
Account error taxonomy.

Every failure an account operation reports to its caller is one of the
variants below.  Variants are told apart by ``kind``; the HTTP layer maps
each kind to a status code (see ``app.api.errors``).
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure kinds."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class AccountError(Exception):
    """Base class for caller-facing account errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(AccountError):
    """Missing or malformed input."""

    kind = ErrorKind.VALIDATION


class Conflict(AccountError):
    """Uniqueness violation (e.g. email already registered)."""

    kind = ErrorKind.CONFLICT


class Unauthenticated(AccountError):
    """Missing, invalid or expired token, or bad credentials."""

    kind = ErrorKind.UNAUTHENTICATED


class Forbidden(AccountError):
    """Authenticated but not allowed (blocked account)."""

    kind = ErrorKind.FORBIDDEN


class NotFound(AccountError):
    """A bulk operation matched no rows."""

    kind = ErrorKind.NOT_FOUND


class Internal(AccountError):
    """Unanticipated failure."""

    kind = ErrorKind.INTERNAL
