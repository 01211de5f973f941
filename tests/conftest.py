"""Shared fixtures: an in-memory SQLite database with the full schema."""

import secrets
from datetime import datetime, timedelta, timezone

import pytest
from sqlmodel import Session, SQLModel

import app.db.base  # noqa: F401
from app.db.repositories.user import UserRepository, hash_token
from app.db.session import create_db_engine
from app.models.token import SCOPE_AUTHENTICATION, TokenTable
from app.models.user import User

DEFAULT_PASSWORD = "correct horse battery"


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def repo(session):
    return UserRepository(session)


@pytest.fixture
def make_user(repo):
    """Insert a user and return it with id, created_at and version filled in."""

    def _make(name="Alice", email="alice@example.com", password=DEFAULT_PASSWORD, activated=False) -> User:
        user = User(name=name, email=email, activated=activated)
        user.password.set(password)
        repo.insert(user)
        return user

    return _make


@pytest.fixture
def make_token(session):
    """Store a token for a user and return its plaintext."""

    def _make(user_id: int, scope: str = SCOPE_AUTHENTICATION, ttl: timedelta = timedelta(hours=1)) -> str:
        plaintext = secrets.token_urlsafe(20)
        session.add(TokenTable(hash=hash_token(plaintext), user_id=user_id,
                               expiry=datetime.now(timezone.utc) + ttl, scope=scope))
        session.commit()
        return plaintext

    return _make
