"""Session service - login, request authorization, refresh and revoke flows"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional
import logging
import uuid

from app.core.deadline import Deadline, check_deadline
from app.core.exceptions import (
    AccessTokenError,
    RefreshTokenError,
    UnauthenticatedError,
    UnauthorizedError,
)
from app.core.security import PasswordHasher, get_bearer_token
from app.core.tokens import AccessTokenService
from app.models.user import User
from app.services.refresh_token_service import RefreshTokenService
from app.services.stores import UserStore

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(hours=1)


@dataclass(frozen=True)
class LoginResult:
    user: User
    access_token: str
    refresh_token: str


class SessionService:
    """
    Compose password checks and the two token services into the four
    session operations.

    Every failure cause (unknown user, wrong password, bad signature,
    expired, revoked, ...) is collapsed into one error kind per operation
    so callers cannot probe which accounts or tokens exist.
    """

    def __init__(
        self,
        users: UserStore,
        access_tokens: AccessTokenService,
        refresh_tokens: RefreshTokenService,
        hasher: PasswordHasher,
        access_ttl: timedelta = ACCESS_TOKEN_TTL,
    ):
        self.users = users
        self.access_tokens = access_tokens
        self.refresh_tokens = refresh_tokens
        self.hasher = hasher
        self.access_ttl = access_ttl

    def login(self, email: str, password: str, deadline: Optional[Deadline] = None) -> LoginResult:
        """
        Authenticate by email and password and open a session

        Args:
            email: Account email
            password: Plain text password
            deadline: Optional request deadline

        Returns:
            LoginResult: The user plus a new access token and refresh token

        Raises:
            UnauthorizedError: Unknown email or wrong password
            OperationCancelledError: Deadline passed before the refresh token was stored
        """
        check_deadline(deadline)
        user = self.users.get_by_email(email)
        if user is None:
            self.hasher.verify_dummy(password)
            logger.info("Login rejected")
            raise UnauthorizedError()
        if not self.hasher.verify(password, user.hashed_password):
            logger.info("Login rejected")
            raise UnauthorizedError()

        access_token = self.access_tokens.issue(user.id, self.access_ttl)

        check_deadline(deadline)
        record = self.refresh_tokens.issue_for(user.id)

        logger.info(f"User logged in: {user.id}")
        return LoginResult(user=user, access_token=access_token, refresh_token=record.token)

    def authorize_request(self, authorization: Optional[str], deadline: Optional[Deadline] = None) -> uuid.UUID:
        """
        Resolve the caller of a request from its Authorization header

        Stateless: never reads the refresh token store.

        Raises:
            UnauthenticatedError: Header missing or malformed, or token invalid
        """
        check_deadline(deadline)
        token = get_bearer_token(authorization)
        try:
            return self.access_tokens.verify(token)
        except AccessTokenError as exc:
            logger.info(f"Access token rejected: {exc.__class__.__name__}")
            raise UnauthenticatedError() from exc

    def refresh(self, refresh_token: str, deadline: Optional[Deadline] = None) -> str:
        """
        Exchange a refresh token for a new access token

        The refresh token itself is left untouched.

        Raises:
            UnauthenticatedError: Token unknown, revoked or expired
        """
        check_deadline(deadline)
        try:
            user_id = self.refresh_tokens.resolve(refresh_token)
        except RefreshTokenError as exc:
            logger.info(f"Refresh token rejected: {exc.__class__.__name__}")
            raise UnauthenticatedError("Invalid refresh token") from exc

        access_token = self.access_tokens.issue(user_id, self.access_ttl)
        check_deadline(deadline)
        return access_token

    def revoke(self, refresh_token: str, deadline: Optional[Deadline] = None) -> None:
        """Revoke a refresh token; unknown and already-revoked tokens succeed silently"""
        check_deadline(deadline)
        self.refresh_tokens.revoke(refresh_token)
