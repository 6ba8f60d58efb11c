"""Shared test fixtures and configuration."""
import os

# Must be set before rangevote reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CLOSE_ENABLED", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-rangevote-suite")

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from rangevote.main import app
from rangevote.db.base import Base
from rangevote.api.deps import get_db
from rangevote.core.rate_limit import limiter
from rangevote.core.security import create_access_token
from rangevote.core.utils import utcnow
from rangevote.db.models import BallotStatus
from rangevote.services.ballots import create_ballot
from rangevote.services.users import create_user


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Disable rate limiting for all tests except rate limiting tests."""
    limiter.reset()
    if "rate_limit" in request.keywords:
        yield
    else:
        limiter.enabled = False
        yield
        limiter.enabled = True
    limiter.reset()


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh database for each test."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Create a new database session for a test."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with a test database."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory creating users with unique emails."""
    counter = {"n": 0}

    def _make_user(email=None, display_name=None):
        counter["n"] += 1
        return create_user(db_session, email or f"user{counter['n']}@example.com", display_name)

    return _make_user


@pytest.fixture
def owner(make_user):
    return make_user("owner@example.com", "Owner")


@pytest.fixture
def voter(make_user):
    return make_user("voter@example.com", "Voter")


@pytest.fixture
def make_ballot(db_session, owner):
    """Factory creating an open ballot with two candidates owned by ``owner``."""

    def _make_ballot(owner_id=None, name="Best Fruit", candidates=("Apple", "Banana"), **kwargs):
        kwargs.setdefault("status", BallotStatus.OPEN)
        return create_ballot(
            db_session,
            owner_id=owner_id or owner.id,
            name=name,
            candidates=[{"name": c} for c in candidates],
            **kwargs,
        )

    return _make_ballot


@pytest.fixture
def ballot(make_ballot):
    return make_ballot()


@pytest.fixture
def auth_headers():
    """Build a Bearer header carrying a signed token for a user id."""
    def _auth_headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}
    return _auth_headers


@pytest.fixture
def owner_headers(owner, auth_headers):
    return auth_headers(owner.id)


@pytest.fixture
def voter_headers(voter, auth_headers):
    return auth_headers(voter.id)


@pytest.fixture
def in_days():
    """Aware UTC datetime ``days`` from now."""
    def _in_days(days: float):
        return utcnow() + timedelta(days=days)
    return _in_days
