"""Test configuration and fixtures for the Mingle backend tests."""

import os
import sys
import pathlib

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

BACKEND_DIR = pathlib.Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

# Set test environment before importing backend modules
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SESSION_SECRET_KEY"] = "test_secret_key"
os.environ["TESTING_MODE"] = "True"
os.environ["SEARCH_RESULTS_LIMIT"] = "20"


@pytest.fixture
def test_engine():
    """Create a test database engine."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    # Ensure models are imported so tables are registered in SQLModel.metadata
    import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def test_session(test_engine):
    """Create a test database session."""
    with Session(test_engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def store(test_engine):
    from services.relationship_store import RelationshipStore

    return RelationshipStore(test_engine)


@pytest.fixture
def directory(test_engine):
    from services.users import UserDirectory

    return UserDirectory(test_engine)


@pytest.fixture
def service(store, directory):
    from services.relationships import RelationshipService

    return RelationshipService(store, directory, search_limit=20)


@pytest.fixture
def make_user(test_session):
    """Factory storing users: make_user("alice", name="Alice")"""
    from models.auth import User

    def _make_user(user_id: str, name: str | None = None, **kwargs) -> User:
        name = name or user_id.capitalize()
        user = User(
            id=user_id,
            name=name,
            email=kwargs.pop("email", f"{user_id}@example.com"),
            username=kwargs.pop("username", user_id),
            picture=kwargs.pop("picture", f"https://cdn.example.com/{user_id}.jpg"),
            **kwargs,
        )
        test_session.add(user)
        test_session.commit()
        return user

    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice", "Alice Liddell")


@pytest.fixture
def bob(make_user):
    return make_user("bob", "Bob Builder")


@pytest.fixture
def carol(make_user):
    return make_user("carol", "Carol Danvers")


@pytest.fixture
def admin(make_user):
    return make_user("root", "Site Admin", is_admin=True)


@pytest.fixture
def test_app(test_engine):
    """Create a test FastAPI application sharing the test engine."""
    from app import create_app

    app = create_app(engine=test_engine)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Create a test client."""
    with TestClient(test_app) as client:
        yield client


@pytest.fixture
def login(test_app):
    """Act as the given user on subsequent requests; None logs out."""
    from fastapi import Depends

    from routes.deps import get_current_user, get_user_directory

    def _login(user):
        user_id = user.id if user is not None else None

        def _current(users=Depends(get_user_directory)):
            return users.get(user_id) if user_id else None

        test_app.dependency_overrides[get_current_user] = _current

    return _login
