"""Persistence collaborators used by the session services.

The session layer only sees the two protocols below. ``SqlUserStore`` and
``SqlRefreshTokenStore`` back them with a request-scoped SQLAlchemy
session; tests substitute in-memory fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol
import logging
import uuid

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceError
from app.models.security import RefreshToken
from app.models.user import User

logger = logging.getLogger(__name__)


def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """SQLite drops tzinfo on the way back; stored values are always UTC."""
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


@dataclass(frozen=True)
class RefreshTokenRecord:
    token: str
    user_id: uuid.UUID
    issued_at: datetime
    expires_at: datetime
    revoked_at: Optional[datetime] = None


class UserStore(Protocol):
    def get_by_email(self, email: str) -> Optional[User]: ...

    def get_by_id(self, user_id: uuid.UUID) -> Optional[User]: ...


class RefreshTokenStore(Protocol):
    def insert(self, record: RefreshTokenRecord) -> None: ...

    def find_by_value(self, token: str) -> Optional[RefreshTokenRecord]: ...

    def mark_revoked(self, token: str, at: datetime) -> bool: ...


class SqlUserStore:
    """User lookups over a SQLAlchemy session"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        try:
            return self.db.query(User).filter(User.email == email).first()
        except SQLAlchemyError as exc:
            logger.error(f"User lookup by email failed: {exc}")
            raise PersistenceError() from exc

    def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        try:
            return self.db.get(User, user_id)
        except SQLAlchemyError as exc:
            logger.error(f"User lookup by id failed: {exc}")
            raise PersistenceError() from exc


class SqlRefreshTokenStore:
    """Refresh token rows over a SQLAlchemy session; each write commits on its own"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _to_record(row: RefreshToken) -> RefreshTokenRecord:
        return RefreshTokenRecord(
            token=row.token,
            user_id=row.user_id,
            issued_at=as_utc(row.created_at),
            expires_at=as_utc(row.expires_at),
            revoked_at=as_utc(row.revoked_at),
        )

    def insert(self, record: RefreshTokenRecord) -> None:
        row = RefreshToken(
            token=record.token,
            user_id=record.user_id,
            created_at=record.issued_at,
            updated_at=record.issued_at,
            expires_at=record.expires_at,
            revoked_at=record.revoked_at,
        )
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Refresh token insert failed: {exc}")
            raise PersistenceError() from exc

    def find_by_value(self, token: str) -> Optional[RefreshTokenRecord]:
        try:
            row = self.db.get(RefreshToken, token)
        except SQLAlchemyError as exc:
            logger.error(f"Refresh token lookup failed: {exc}")
            raise PersistenceError() from exc
        return self._to_record(row) if row else None

    def mark_revoked(self, token: str, at: datetime) -> bool:
        """
        Set revoked_at on an unrevoked row

        Rows already revoked keep their original timestamp.

        Returns:
            bool: True if a row with this value exists
        """
        try:
            result = self.db.execute(
                update(RefreshToken)
                .where(RefreshToken.token == token, RefreshToken.revoked_at.is_(None))
                .values(revoked_at=at, updated_at=at)
            )
            self.db.commit()
            if result.rowcount:
                return True
            return self.db.get(RefreshToken, token) is not None
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Refresh token revoke failed: {exc}")
            raise PersistenceError() from exc
