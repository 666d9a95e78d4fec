"""Refresh token issuance, resolution and revocation."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable
import logging
import secrets
import uuid

from app.core.exceptions import (
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
    RefreshTokenRevokedError,
)
from app.services.stores import RefreshTokenRecord, RefreshTokenStore, as_utc

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 32


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RefreshTokenService:
    """
    Server-tracked opaque refresh tokens.

    A token is exchangeable iff its row exists, ``revoked_at`` is null and
    ``now < expires_at``. Revocation is monotonic, so a single read of the
    row is enough to decide.
    """

    def __init__(
        self,
        store: RefreshTokenStore,
        ttl: timedelta = timedelta(days=60),
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.store = store
        self.ttl = ttl
        self._clock = clock

    @staticmethod
    def generate() -> str:
        """256 bits from the OS CSPRNG, hex-encoded (64 chars)"""
        return secrets.token_hex(REFRESH_TOKEN_BYTES)

    def persist(
        self,
        token: str,
        user_id: uuid.UUID,
        issued_at: datetime,
        expires_at: datetime,
    ) -> RefreshTokenRecord:
        record = RefreshTokenRecord(
            token=token,
            user_id=user_id,
            issued_at=issued_at,
            expires_at=expires_at,
        )
        self.store.insert(record)
        return record

    def issue_for(self, user_id: uuid.UUID) -> RefreshTokenRecord:
        """Generate and persist a fresh token for a user"""
        now = self._clock()
        return self.persist(self.generate(), user_id, now, now + self.ttl)

    def resolve(self, token: str) -> uuid.UUID:
        """
        Look up the owner of a refresh token

        Raises:
            RefreshTokenNotFoundError: No row for this value
            RefreshTokenRevokedError: Row has been revoked
            RefreshTokenExpiredError: now >= expires_at
        """
        record = self.store.find_by_value(token)
        if record is None:
            raise RefreshTokenNotFoundError()
        if record.revoked_at is not None:
            raise RefreshTokenRevokedError()
        if self._clock() >= as_utc(record.expires_at):
            raise RefreshTokenExpiredError()
        return record.user_id

    def revoke(self, token: str) -> bool:
        """Mark a token revoked; returns whether it existed"""
        found = self.store.mark_revoked(token, self._clock())
        if not found:
            logger.info("Revoke requested for unknown refresh token")
        return found
