"""
User endpoints.

Registration and login are public; everything else requires a bearer
token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_current_user, get_user_service
from app.schemas.user import AuthResponse, BulkDeleteRequest, BulkOperationResponse, BulkStatusRequest, \
    MessageResponse, RegisterResponse, UserListResponse, UserLogin, UserPublic, UserRegister
from app.services.user_service import UserService

router = APIRouter()


@router.post("/register", summary="User registration endpoint.", response_model=RegisterResponse,
             status_code=status.HTTP_201_CREATED, )
def register(data: UserRegister, service: UserService = Depends(get_user_service)):
    """
    Register a new user.

    Returns a token straight away: registration counts as the first login.

    Raises:
        400: Missing field or invalid email
        409: If email already registered
    """
    return service.register(data)


@router.post("/login", summary="User login endpoint.", response_model=AuthResponse)
def login(data: UserLogin, service: UserService = Depends(get_user_service)):
    """
    Authenticate user via JSON body.

    Raises:
        401: Unknown email or wrong password (same message for both)
        403: Account blocked
    """
    return service.login(data)


@router.post("/logout", summary="Logout acknowledgement.", response_model=MessageResponse)
def logout(user: UserPublic = Depends(get_current_user)):
    """Tokens are not revoked; the client is expected to discard its token."""
    return MessageResponse(message="Logout successful. Discard the token on the client.")


@router.get("/me", summary="Current user info.", response_model=UserPublic)
def me(user: UserPublic = Depends(get_current_user)):
    return user


@router.get("/dashboard", summary="List all users.", response_model=UserListResponse)
def list_users(sort_by: Optional[str] = Query(None, alias="sortBy", description="Column to sort by"),
               sort_order: Optional[str] = Query(None, alias="sortOrder", description="ASC or DESC"),
               user: UserPublic = Depends(get_current_user), service: UserService = Depends(get_user_service), ):
    """
    List every user.

    Defaults to most recent login first; users who never logged in come
    last.
    """
    return service.list_users(sort_by, sort_order)


@router.post("/bulk-status", summary="Set the status of several users.", response_model=BulkOperationResponse)
def bulk_status(data: BulkStatusRequest, user: UserPublic = Depends(get_current_user),
                service: UserService = Depends(get_user_service), ):
    return service.update_status(data.user_ids, data.status)


@router.post("/bulk-delete", summary="Delete several users.", response_model=BulkOperationResponse)
def bulk_delete(data: BulkDeleteRequest, user: UserPublic = Depends(get_current_user),
                service: UserService = Depends(get_user_service), ):
    return service.delete_users(data.user_ids)
