import os
import sys
import tempfile
import uuid
from pathlib import Path
from typing import Dict, Optional

# Settings are read once at import time, so the test environment must be
# in place before anything under ``app`` is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DB_INIT_MODE"] = "create_all"
os.environ["PLATFORM"] = "dev"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-signing-secret"
os.environ["LOG_FILE"] = str(Path(tempfile.gettempdir()) / "chirpy-tests.log")

BACKEND = Path(__file__).resolve().parents[1]
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.core.exceptions import PersistenceError  # noqa: E402
from app.core.security import PasswordHasher  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services.stores import RefreshTokenRecord  # noqa: E402

TEST_SECRET = "test-signing-secret"


class FakeUserStore:
    """In-memory UserStore"""

    def __init__(self):
        self.by_email: Dict[str, User] = {}

    def add(self, email: str, hashed_password: str) -> User:
        user = User(id=uuid.uuid4(), email=email, hashed_password=hashed_password)
        self.by_email[email] = user
        return user

    def get_by_email(self, email: str) -> Optional[User]:
        return self.by_email.get(email)

    def get_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        for user in self.by_email.values():
            if user.id == user_id:
                return user
        return None


class FakeRefreshTokenStore:
    """In-memory RefreshTokenStore"""

    def __init__(self):
        self.records: Dict[str, RefreshTokenRecord] = {}
        self.fail_inserts = False

    def insert(self, record: RefreshTokenRecord) -> None:
        if self.fail_inserts:
            raise PersistenceError()
        if record.token in self.records:
            raise PersistenceError("duplicate refresh token")
        self.records[record.token] = record

    def find_by_value(self, token: str) -> Optional[RefreshTokenRecord]:
        return self.records.get(token)

    def mark_revoked(self, token: str, at) -> bool:
        record = self.records.get(token)
        if record is None:
            return False
        if record.revoked_at is None:
            self.records[token] = RefreshTokenRecord(
                token=record.token,
                user_id=record.user_id,
                issued_at=record.issued_at,
                expires_at=record.expires_at,
                revoked_at=at,
            )
        return True


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def user_store():
    return FakeUserStore()


@pytest.fixture
def token_store():
    return FakeRefreshTokenStore()


@pytest.fixture
def client():
    """HTTP client against a freshly created in-memory database"""
    from app.core.database import Base, engine
    from app.main import app

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    app.state.fileserver_metrics.reset()
    with TestClient(app) as test_client:
        yield test_client
    Base.metadata.drop_all(bind=engine)


def register_and_login(client, email="walt@breakingbad.com", password="04234"):
    """Create an account and return the login response body"""
    created = client.post("/api/users", json={"email": email, "password": password})
    assert created.status_code == 201, created.text
    response = client.post("/api/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
