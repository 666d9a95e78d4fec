"""Security utilities - password hashing, bearer header parsing"""

from functools import cached_property
from typing import Optional
import logging

import bcrypt

from app.config import settings
from app.core.exceptions import HashingError, UnauthenticatedError

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes of input
BCRYPT_MAX_PASSWORD_BYTES = 72

BEARER_PREFIX = "Bearer "


class PasswordHasher:
    """Salted bcrypt hashing with a configurable cost."""

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds or settings.BCRYPT_ROUNDS

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode('utf-8')[:BCRYPT_MAX_PASSWORD_BYTES]

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt

        Args:
            password: Plain text password

        Returns:
            str: Hashed password

        Raises:
            HashingError: If bcrypt rejects the input
        """
        try:
            hashed = bcrypt.hashpw(self._encode(password), bcrypt.gensalt(rounds=self.rounds))
        except (ValueError, TypeError) as exc:
            logger.error(f"Password hashing failed: {exc}")
            raise HashingError() from exc
        return hashed.decode('utf-8')

    def verify(self, password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash

        Args:
            password: Plain text password
            hashed_password: Stored bcrypt hash

        Returns:
            bool: True if password matches

        Raises:
            HashingError: If the stored hash is malformed
        """
        try:
            return bcrypt.checkpw(self._encode(password), hashed_password.encode('utf-8'))
        except (ValueError, TypeError) as exc:
            logger.error(f"Stored password hash is malformed: {exc}")
            raise HashingError("Stored password hash is malformed") from exc

    @cached_property
    def _dummy_hash(self) -> bytes:
        return bcrypt.hashpw(b"chirpy-dummy-password", bcrypt.gensalt(rounds=self.rounds))

    def verify_dummy(self, password: str) -> bool:
        """
        Spend the same bcrypt work as ``verify`` for a login with no account

        Returns:
            bool: Always False
        """
        bcrypt.checkpw(self._encode(password), self._dummy_hash)
        return False


password_hasher = PasswordHasher()


def get_bearer_token(authorization: Optional[str]) -> str:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header

    Args:
        authorization: Raw header value, None when absent

    Returns:
        str: The token with surrounding whitespace removed

    Raises:
        UnauthenticatedError: Header missing, wrong scheme or empty token
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise UnauthenticatedError("Missing or malformed authorization header")

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise UnauthenticatedError("Missing or malformed authorization header")
    return token
