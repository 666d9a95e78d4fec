import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.database import Base
from app.core.exceptions import PersistenceError
from app.models.user import User
from app.services.stores import RefreshTokenRecord, SqlRefreshTokenStore, SqlUserStore, as_utc


@pytest.fixture
def db():
    engine = create_engine("sqlite:///:memory:")
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def user(db):
    user = User(email="a@b.com", hashed_password="hash")
    db.add(user)
    db.commit()
    return user


def test_user_lookups(db, user):
    store = SqlUserStore(db)

    assert store.get_by_email("a@b.com").id == user.id
    assert store.get_by_id(user.id).email == "a@b.com"
    assert store.get_by_email("nobody@b.com") is None
    assert store.get_by_id(uuid.uuid4()) is None


def test_duplicate_refresh_token_is_a_persistence_error(db, user):
    store = SqlRefreshTokenStore(db)
    now = datetime.now(timezone.utc)
    record = RefreshTokenRecord(token="t" * 64, user_id=user.id, issued_at=now, expires_at=now + timedelta(days=1))

    store.insert(record)
    with pytest.raises(PersistenceError):
        store.insert(record)

    # session is usable again after the rollback
    assert store.find_by_value(record.token).user_id == user.id


def test_as_utc_only_fills_missing_zone():
    naive = datetime(2026, 1, 1)
    aware = datetime(2026, 1, 1, tzinfo=timezone(timedelta(hours=2)))

    assert as_utc(naive).tzinfo is timezone.utc
    assert as_utc(aware) is aware
    assert as_utc(None) is None
