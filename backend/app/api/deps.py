"""API dependencies - session services, deadlines and authentication"""

from datetime import timedelta
from typing import Optional
import uuid

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from app.config import settings
from app.core.database import get_db
from app.core.deadline import Deadline
from app.core.security import password_hasher
from app.core.tokens import AccessTokenService
from app.services.metrics import FileserverMetrics
from app.services.refresh_token_service import RefreshTokenService
from app.services.session_service import SessionService
from app.services.stores import SqlRefreshTokenStore, SqlUserStore


def get_access_token_service(request: Request) -> AccessTokenService:
    """Shared, immutable token service built at startup"""
    return request.app.state.access_tokens


def get_fileserver_metrics(request: Request) -> FileserverMetrics:
    return request.app.state.fileserver_metrics


def get_deadline() -> Deadline:
    """Fresh deadline for every request"""
    return Deadline.after(settings.REQUEST_TIMEOUT_SECONDS)


def get_session_service(
    access_tokens: AccessTokenService = Depends(get_access_token_service),
    db: Session = Depends(get_db),
) -> SessionService:
    """
    Assemble the session service around this request's database session

    Args:
        access_tokens: Shared access token service
        db: Database session

    Returns:
        SessionService bound to SQL-backed stores
    """
    refresh_tokens = RefreshTokenService(
        SqlRefreshTokenStore(db),
        ttl=timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )
    return SessionService(
        users=SqlUserStore(db),
        access_tokens=access_tokens,
        refresh_tokens=refresh_tokens,
        hasher=password_hasher,
        access_ttl=timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS),
    )


def get_current_user_id(
    authorization: Optional[str] = Header(default=None),
    sessions: SessionService = Depends(get_session_service),
    deadline: Deadline = Depends(get_deadline),
) -> uuid.UUID:
    """
    Authenticated caller from the ``Authorization: Bearer <access token>`` header

    Raises:
        UnauthenticatedError: If the header or token is invalid
    """
    return sessions.authorize_request(authorization, deadline)
