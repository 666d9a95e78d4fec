"""Authentication routes"""

from fastapi import APIRouter, Depends, Header, Response, status
from typing import Optional

from app.core.deadline import Deadline
from app.core.security import get_bearer_token
from app.schemas.user import UserLogin, LoginResponse, TokenResponse
from app.services.session_service import SessionService
from app.api.deps import get_deadline, get_session_service

router = APIRouter()


@router.post("/login", response_model=LoginResponse, status_code=status.HTTP_200_OK)
def login(
    credentials: UserLogin,
    sessions: SessionService = Depends(get_session_service),
    deadline: Deadline = Depends(get_deadline),
):
    """
    Login endpoint - authenticate user and return an access/refresh token pair

    Args:
        credentials: Email and password
        sessions: Session service

    Returns:
        User profile with both tokens
    """
    result = sessions.login(credentials.email, credentials.password, deadline)
    return LoginResponse(
        id=result.user.id,
        email=result.user.email,
        created_at=result.user.created_at,
        updated_at=result.user.updated_at,
        token=result.access_token,
        refresh_token=result.refresh_token,
    )


@router.post("/refresh", response_model=TokenResponse)
def refresh_token(
    authorization: Optional[str] = Header(default=None),
    sessions: SessionService = Depends(get_session_service),
    deadline: Deadline = Depends(get_deadline),
):
    """
    Exchange the refresh token in the Authorization header for a new access token

    Returns:
        New access token
    """
    token = get_bearer_token(authorization)
    return TokenResponse(token=sessions.refresh(token, deadline))


@router.post("/revoke", status_code=status.HTTP_204_NO_CONTENT)
def revoke_token(
    authorization: Optional[str] = Header(default=None),
    sessions: SessionService = Depends(get_session_service),
    deadline: Deadline = Depends(get_deadline),
):
    """
    Revoke the refresh token in the Authorization header

    Responds 204 whether or not the token was known.
    """
    token = get_bearer_token(authorization)
    sessions.revoke(token, deadline)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
