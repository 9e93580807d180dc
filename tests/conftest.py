"""Shared test fixtures and configuration."""
import os
from unittest.mock import Mock

import pytest
import yaml
from fastapi import Response
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app
os.environ.setdefault("ADMIN_PASSWORD", "test-admin-password")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("RESTAURANT_NAME", "Test Restaurant")

from bistro.main import create_app
from bistro.api import auth
from bistro.core.config import Settings
from bistro.db.database import get_db
from bistro.db.models import Base
from bistro.services.cart.store import CartStore
from bistro.services.catalog.models import Document, MenuItem
from bistro.services.catalog.store import DocumentStore, DocumentStoreError
from bistro.services.catalog.yaml_store import YamlDocumentStore


# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_MENU = {
    "menu": [
        {"id": "a", "name": "Burger", "price": 5, "isAvailable": True, "category": "mains"},
        {"id": "b", "name": "Soda", "price": 2},
        {"id": "c", "name": "Margherita Pizza", "price": 12.5, "isPopular": True, "isNew": True},
        {"id": "d", "name": "Pepperoni Pizza", "price": 14, "isAvailable": False, "category": "mains"},
        {"id": "e", "name": "Garlic Bread"},
    ]
}


class StaticDocumentStore(DocumentStore):
    """In-memory document store for tests."""

    def __init__(self, collections=None, error=None):
        self.collections = {
            name: [Document(id=doc["id"], data={k: v for k, v in doc.items() if k != "id"}) for doc in docs]
            for name, docs in (collections or {}).items()
        }
        self.error = error
        self.list_calls = 0

    async def list_documents(self, collection):
        self.list_calls += 1
        if self.error:
            raise self.error
        return list(self.collections.get(collection, []))

    async def get_document(self, collection, doc_id):
        for document in self.collections.get(collection, []):
            if document.id == doc_id:
                return document
        return None

    async def set_document(self, collection, doc_id, data):
        document = Document(id=doc_id, data=dict(data))
        docs = self.collections.setdefault(collection, [])
        docs[:] = [d for d in docs if d.id != doc_id] + [document]
        return document

    async def delete_document(self, collection, doc_id):
        docs = self.collections.get(collection, [])
        before = len(docs)
        docs[:] = [d for d in docs if d.id != doc_id]
        return len(docs) != before


@pytest.fixture
def menu_store():
    """Document store holding the test menu."""
    return StaticDocumentStore(TEST_MENU)


@pytest.fixture
def failing_store():
    """Document store whose reads always fail."""
    return StaticDocumentStore(error=DocumentStoreError("connection refused"))


@pytest.fixture
def cart():
    """An empty cart."""
    return CartStore()


@pytest.fixture
def burger():
    return MenuItem(id="a", name="Burger", price=5, isAvailable=True)


@pytest.fixture
def soda():
    return MenuItem(id="b", name="Soda", price=2)


@pytest.fixture
def test_menu_path(tmp_path):
    """Write the test menu to a YAML file and return its path."""
    path = tmp_path / "menu.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(TEST_MENU, f, default_flow_style=False, sort_keys=False)
    return path


@pytest.fixture
def yaml_store(test_menu_path):
    """YAML document store over the test menu."""
    return YamlDocumentStore(str(test_menu_path))


@pytest.fixture
def test_settings(test_menu_path):
    """Override settings for testing."""
    return Settings(
        admin_password="testpass123",
        database_url=TEST_DATABASE_URL,
        restaurant_name="Test Restaurant",
        menu_backend="yaml",
        menu_seed_file=str(test_menu_path),
    )


@pytest.fixture
async def test_db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_db(test_db_engine):
    """Create test database session."""
    async_session = async_sessionmaker(
        test_db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def override_get_db():
    """Override get_db with an in-memory database created on first use.

    Tables are created lazily so the engine is only ever used from the
    test client's event loop.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    state = {"ready": False}

    async def _override_get_db():
        if not state["ready"]:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            state["ready"] = True
        async with async_session() as session:
            yield session

    return _override_get_db


@pytest.fixture
def test_app(test_settings, override_get_db):
    """Create an application wired to the test settings and database."""
    app = create_app(test_settings)
    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def test_client(test_app, clean_auth_sessions):
    """Create FastAPI test client."""
    with TestClient(test_app) as client:
        yield client


@pytest.fixture
def authenticated_client(test_client, test_settings):
    """Create test client with valid admin session cookie."""
    response = test_client.post(
        "/api/auth/login",
        json={"password": test_settings.admin_password}
    )
    assert response.status_code == 200

    # Session cookie is automatically stored in test_client
    return test_client


@pytest.fixture
def mock_response():
    """Mock response that records cookies."""
    response = Mock(spec=Response)
    response.set_cookie = Mock()
    return response


@pytest.fixture
def clean_auth_sessions():
    """Clean up authentication sessions before and after tests."""
    auth._sessions.clear()
    yield
    auth._sessions.clear()
