"""Shared fixtures: an in-memory database and a fake identity service."""

import sys
from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from serenity import create_app
from serenity.core.config import AppSettings
from serenity.db.session import Base
from serenity.services.identity import AuthTokens, IdentityError, InvalidCredentials, User

# Ensure models are registered so metadata tables are created
from serenity import models  # noqa: F401


class FakeIdentity:
    """In-memory stand-in for the hosted identity service."""

    def __init__(self) -> None:
        self.accounts: dict[str, tuple[str, User]] = {}
        self.tokens: dict[str, User] = {}
        self.signed_out: list[str] = []
        self.get_user_calls = 0
        self.fail = False

    def add_account(self, email: str, password: str, display_name: str | None = None) -> User:
        user = User.from_claims(f"user-{uuid4().hex[:8]}", email, {"display_name": display_name} if display_name else {})
        self.accounts[email] = (password, user)
        return user

    def get_user(self, access_token: str) -> User | None:
        self.get_user_calls += 1
        if self.fail:
            raise IdentityError("identity service unreachable")
        return self.tokens.get(access_token)

    def sign_in(self, email: str, password: str) -> tuple[User, AuthTokens]:
        if self.fail:
            raise IdentityError("identity service unreachable")
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise InvalidCredentials("Invalid login credentials")
        token = f"access-{uuid4().hex}"
        self.tokens[token] = account[1]
        return account[1], AuthTokens(access_token=token)

    def sign_up(self, email: str, password: str, display_name: str | None = None):
        if email in self.accounts:
            raise InvalidCredentials("User already registered")
        self.add_account(email, password, display_name)
        return self.sign_in(email, password)

    def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)
        self.tokens.pop(access_token, None)


@pytest.fixture()
def engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def db_session(engine):
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def settings_overrides():
    return {}


@pytest.fixture()
def settings(settings_overrides):
    values = {"APP_SECRET": "test-secret", "DB_URL": "sqlite://", "SUPABASE_URL": "", "SUPABASE_JWT_SECRET": ""}
    values.update(settings_overrides)
    return AppSettings(_env_file=None, **values)


@pytest.fixture()
def identity():
    return FakeIdentity()


@pytest.fixture()
def app(settings, identity, engine):
    return create_app(settings, identity_factory=lambda: identity, engine=engine)


@pytest.fixture()
def client(app):
    with TestClient(app, follow_redirects=False) as test_client:
        yield test_client


@pytest.fixture()
def signed_in(client, identity):
    """Log a user in through the real form and return it."""

    user = identity.add_account("ada@example.com", "correct horse", display_name="Ada")
    response = client.post("/login", data={"email": "ada@example.com", "password": "correct horse"})
    assert response.status_code == 302
    return user
