# tests/conftest.py
#
# Shared fixtures. Environment defaults are set before anything imports
# config, so a missing .env never breaks collection.

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient

from config import Settings
from core.credentials import CredentialService, build_password_context
from core.store import DocumentStore, StoreError
from core.tokens import TokenService
from database import create_db_engine, create_session_factory, init_db
from main import create_app
from models.product import Product
from models.user import User


@pytest.fixture
def settings():
    # Lowest bcrypt cost keeps the suite fast
    return Settings(
        JWT_SECRET_KEY="test-secret-key",
        DATABASE_URL="sqlite:///:memory:",
        BCRYPT_ROUNDS=4,
        LOG_LEVEL="WARNING",
        _env_file=None,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db(settings):
    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)
    session = create_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def users(db):
    return DocumentStore(db, User)


@pytest.fixture
def products(db):
    return DocumentStore(db, Product)


@pytest.fixture
def credentials(users):
    return CredentialService(users, build_password_context(4))


@pytest.fixture
def token_service(settings):
    return TokenService.from_settings(settings)


def signup(client, username="alice", email="alice@example.com", password="secret123"):
    return client.post(
        "/api/signup",
        json={"username": username, "email": email, "password": password},
    )


def login(client, username="alice", password="secret123"):
    return client.post("/api/login", json={"username": username, "password": password})


@pytest.fixture
def auth_headers(client):
    signup(client)
    token = login(client).json()["token"]
    return {"Authorization": f"Bearer {token}"}


class FailingStore:
    """Every store call fails as if the database were unreachable."""

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise StoreError("connection refused")
        return fail
