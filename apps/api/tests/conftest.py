from __future__ import annotations

import os
import tempfile
from typing import Callable, Generator

# Configure before the application module reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="pastoral-uploads-"))
os.environ.setdefault("ENABLE_METRICS", "false")
os.environ.setdefault("LOG_FORMAT", "text")

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pastoral.main import app
from pastoral.auth.identity import IdentityProvider, get_identity_provider
from pastoral.common.db import get_db
from pastoral.common.models import Base, User
from pastoral.uploads.storage import LocalBlobStore, get_blob_store

TEST_JWT_SECRET = "test-identity-secret"
TEST_IDENTITY_API = "https://identity.test/v1"

# Use in-memory SQLite for tests; foreign keys are switched on by the
# connect listener in pastoral.common.db
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def identity_profiles() -> dict[str, dict]:
    """Provider-side user records served by the fake identity API."""
    return {}


@pytest.fixture
def identity_provider(identity_profiles: dict[str, dict]) -> IdentityProvider:
    """IdentityProvider verifying HS256 test tokens against a mocked user API."""

    def handler(request: httpx.Request) -> httpx.Response:
        user_id = request.url.path.rsplit("/", 1)[-1]
        if request.headers.get("Authorization") != "Bearer sk_test":
            return httpx.Response(401, json={"errors": [{"code": "unauthorized"}]})
        if user_id not in identity_profiles:
            return httpx.Response(404, json={"errors": [{"code": "resource_not_found"}]})
        return httpx.Response(200, json={"id": user_id, **identity_profiles[user_id]})

    return IdentityProvider(
        jwt_key=TEST_JWT_SECRET,
        algorithms=["HS256"],
        api_url=TEST_IDENTITY_API,
        secret_key="sk_test",
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def blob_store(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(tmp_path / "uploads", "/uploads")


@pytest.fixture
def client(
    db: Session,
    identity_provider: IdentityProvider,
    blob_store: LocalBlobStore,
) -> Generator[TestClient, None, None]:
    """Create a test client with dependency overrides."""

    def get_test_db():
        yield db

    app.dependency_overrides[get_db] = get_test_db
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_token(user_id: str, secret: str = TEST_JWT_SECRET) -> str:
    return jwt.encode({"sub": user_id}, secret, algorithm="HS256")


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    """Build an Authorization header for a local member."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user.id)}"}

    return _headers


def _make_user(db: Session, user_id: str, name: str, role: str) -> User:
    user = User(
        id=user_id,
        name=name,
        email=f"{user_id}@paroquia.org.br",
        role=role,
        status="ativo",
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db: Session) -> User:
    return _make_user(db, "user_admin", "Padre Antônio", "ADMIN")


@pytest.fixture
def secretary_user(db: Session) -> User:
    return _make_user(db, "user_secretary", "Maria Secretária", "SECRETARY")


@pytest.fixture
def finance_user(db: Session) -> User:
    return _make_user(db, "user_finance", "João Tesoureiro", "FINANCE")


@pytest.fixture
def member_user(db: Session) -> User:
    return _make_user(db, "user_member", "Ana Voluntária", "MEMBER")


@pytest.fixture
def celebrant_user(db: Session) -> User:
    return _make_user(db, "user_celebrant", "Diácono Carlos", "CELEBRANTE")
