"""
Shared fixtures: in-memory database, key allocator and API client.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import activitybook.models  # noqa: F401
from activitybook.core.keys import PrimaryKeyAllocator
from activitybook.db.base import Base
from activitybook.db.session import get_db, get_primary_keys
from activitybook.main import app


@pytest.fixture
def allocator():
    return PrimaryKeyAllocator()


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session, allocator):
    """API client bound to the test database and allocator."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_primary_keys] = lambda: allocator
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
