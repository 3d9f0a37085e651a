"""Shared fixtures: in-memory database, settings, service, app and clients."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

import models.blog_post  # noqa: F401  (registers the table on Base.metadata)
import models.user  # noqa: F401
from auth.service import AuthService, seed_admin
from core.config import Settings
from core.security import TokenIssuer
from database import Base, create_session_factory
from main import create_app

ADMIN_EMAIL = "admin@zamanix.com"
ADMIN_PASSWORD = "zamanix_admin"


@pytest.fixture
def settings():
    """Settings with a cheap hash and no startup back-off."""
    return Settings(
        database_url="sqlite://",
        secret_key="test-secret-key-which-is-long-enough-for-hs256",
        password_hash_rounds=1000,
        passphrase_words=24,
        require_passphrase=False,
        admin_email=ADMIN_EMAIL,
        first_admin_password=ADMIN_PASSWORD,
        db_connect_retries=0,
        db_connect_delay=0,
    )


@pytest.fixture
def engine():
    """In-memory SQLite shared across threads (TestClient runs sync routes in a pool)."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def tokens(settings):
    return TokenIssuer.from_settings(settings)


@pytest.fixture
def service(db, settings, tokens):
    return AuthService(db, settings, tokens)


@pytest.fixture
def app(settings, engine):
    return create_app(settings, engine)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin(db, settings):
    user, _ = seed_admin(db, settings)
    return user


@pytest.fixture
def register(client):
    """POST /api/users/register and return the decoded response."""

    def _register(email="jane@example.com", password="s3cret-Pass", name="Jane Doe", phone="+15550100"):
        return client.post(
            "/api/users/register",
            json={"name": name, "email": email, "phone": phone, "password": password},
        )

    return _register
