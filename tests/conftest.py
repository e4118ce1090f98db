"""
Pytest fixtures for the ERP back-office tests.

Provides both repository implementations (in-memory and SQLite-backed) and a
FastAPI test client over an unseeded in-memory store.
"""
import os

# Configure environment before config.py is imported
os.environ['DATABASE_URL'] = 'sqlite:///:memory:'
os.environ['STORAGE_BACKEND'] = 'memory'
os.environ['SEED_DEMO_DATA'] = 'false'

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from app.core import Base, make_engine, make_sessionmaker
from app.main import create_app
from app.models import models  # noqa: F401
from app.storage.database import DatabaseRepository
from app.storage.memory import InMemoryRepository, MemoryStore


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = make_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = make_sessionmaker(engine)()
    yield session
    session.close()


@pytest.fixture
def memory_repo():
    return InMemoryRepository(MemoryStore(), seed=False)


@pytest.fixture
def db_repo(db_session):
    return DatabaseRepository(db_session)


@pytest.fixture(params=["memory", "database"])
def repo(request):
    """Run a test once against each repository implementation."""
    if request.param == "memory":
        return InMemoryRepository(MemoryStore(), seed=False)
    return DatabaseRepository(request.getfixturevalue("db_session"))


@pytest.fixture
def client():
    app = create_app(storage_backend="memory", store=MemoryStore(), seed=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db_client(engine):
    app = create_app(storage_backend="database", bind=engine, seed=False)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(params=["memory", "database"])
def api_client(request):
    """Run an HTTP test once against each storage backend."""
    if request.param == "memory":
        return request.getfixturevalue("client")
    return request.getfixturevalue("db_client")
