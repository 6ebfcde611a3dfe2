import os

# Set test environment variables BEFORE importing app modules
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["DEFAULT_PAGE_SIZE"] = "10"
os.environ["MAX_PAGE_SIZE"] = "100"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, create_engine

from unconv.config import settings
from unconv.database import create_db_and_tables, get_session
from unconv.main import app
from unconv.services import AuthService

USERNAME = "username"
PASSWORD = "password"


@pytest.fixture
def engine():
    """A fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine):
    def _get_session():
        with Session(engine) as s:
            yield s

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def registered_user(session):
    AuthService(session).register(USERNAME, PASSWORD)
    return USERNAME, PASSWORD


@pytest.fixture
def auth_client(client, registered_user):
    """Client sending Basic credentials of a `USER` and a valid CSRF token."""
    client.auth = registered_user
    token = client.get("/csrf").json()["token"]
    client.headers[settings.CSRF_HEADER_NAME] = token
    return client


@pytest.fixture
def persist(session):
    """Return a helper that adds, commits and refreshes rows."""
    def _persist(*entities):
        for e in entities:
            session.add(e)
        session.commit()
        for e in entities:
            session.refresh(e)
        return list(entities)
    return _persist
