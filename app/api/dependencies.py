"""
Shared API dependencies.

Reusable FastAPI dependencies for authentication and service wiring.
"""

from typing import Optional

from fastapi import Depends, Header, Request
from sqlmodel import Session

from app.core.security import PasswordHasher, TokenService, get_password_hasher, get_token_service
from app.db.session import SessionFactory, get_db, get_session_factory
from app.schemas.user import UserPublic
from app.services.auth_guard import AuthGuard
from app.services.user_service import UserService


def get_user_service(db: Session = Depends(get_db), hasher: PasswordHasher = Depends(get_password_hasher),
                     tokens: TokenService = Depends(get_token_service), ) -> UserService:
    return UserService(db, hasher, tokens)


def get_current_user(request: Request, authorization: Optional[str] = Header(None),
                     session_factory: SessionFactory = Depends(get_session_factory),
                     tokens: TokenService = Depends(get_token_service), ) -> UserPublic:
    """Validate the bearer token and attach the current user to the request."""
    user = AuthGuard(session_factory, tokens).authenticate(authorization)
    request.state.user = user
    return user
