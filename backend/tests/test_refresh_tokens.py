import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.database import Base
from app.core.exceptions import (
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
    RefreshTokenRevokedError,
)
from app.models.user import User
from app.services.refresh_token_service import RefreshTokenService
from app.services.stores import SqlRefreshTokenStore

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime = T0):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _make_session():
    engine = create_engine("sqlite:///:memory:")
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return SessionLocal()


def test_generated_tokens_are_64_hex_chars_and_unique():
    tokens = {RefreshTokenService.generate() for _ in range(50)}

    assert len(tokens) == 50
    for token in tokens:
        assert len(token) == 64
        int(token, 16)


def test_issue_then_resolve_returns_owner(token_store):
    service = RefreshTokenService(token_store)
    user_id = uuid.uuid4()

    record = service.issue_for(user_id)

    assert record.expires_at - record.issued_at == timedelta(days=60)
    assert service.resolve(record.token) == user_id


def test_resolve_unknown_token(token_store):
    with pytest.raises(RefreshTokenNotFoundError):
        RefreshTokenService(token_store).resolve("missing")


def test_resolve_revoked_token(token_store):
    service = RefreshTokenService(token_store)
    record = service.issue_for(uuid.uuid4())

    assert service.revoke(record.token) is True
    with pytest.raises(RefreshTokenRevokedError):
        service.resolve(record.token)


def test_resolve_expired_token(token_store):
    clock = FakeClock()
    service = RefreshTokenService(token_store, ttl=timedelta(days=60), clock=clock)
    record = service.issue_for(uuid.uuid4())

    clock.now = T0 + timedelta(days=60) - timedelta(seconds=1)
    service.resolve(record.token)

    clock.now = T0 + timedelta(days=60)
    with pytest.raises(RefreshTokenExpiredError):
        service.resolve(record.token)


def test_revoke_unknown_token_reports_not_found(token_store):
    assert RefreshTokenService(token_store).revoke("missing") is False


def test_users_may_hold_several_live_tokens(token_store):
    service = RefreshTokenService(token_store)
    user_id = uuid.uuid4()
    first = service.issue_for(user_id)
    second = service.issue_for(user_id)

    service.revoke(first.token)

    assert service.resolve(second.token) == user_id


def test_sql_store_round_trip_and_idempotent_revoke():
    db = _make_session()
    try:
        user = User(email="a@b.com", hashed_password="hash")
        db.add(user)
        db.commit()

        clock = FakeClock()
        service = RefreshTokenService(SqlRefreshTokenStore(db), clock=clock)
        record = service.issue_for(user.id)

        assert service.resolve(record.token) == user.id

        clock.now = T0 + timedelta(minutes=5)
        assert service.revoke(record.token) is True
        clock.now = T0 + timedelta(minutes=10)
        assert service.revoke(record.token) is True

        stored = SqlRefreshTokenStore(db).find_by_value(record.token)
        assert stored.revoked_at == T0 + timedelta(minutes=5)
        assert stored.expires_at == T0 + timedelta(days=60)
        with pytest.raises(RefreshTokenRevokedError):
            service.resolve(record.token)

        assert service.revoke("never-issued") is False
    finally:
        db.close()
