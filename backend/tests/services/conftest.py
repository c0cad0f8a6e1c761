"""Service test fixtures — fresh registry, async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh OnsRegistry (owner "owner", authorizer "writer")
    - Every persistence test gets a fresh in-memory SQLite database
    - get_registry / get_snapshot_store dependencies overridden per test

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Two clients: `client` runs without persistence (the default configuration),
      `persistent_client` saves a snapshot after every mutation
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import onsregistry.models  # noqa: F401
from onsregistry.api.dependencies import get_registry, get_snapshot_store
from onsregistry.core.access_gate import StaticAccessGate
from onsregistry.db.base import Base
from onsregistry.infrastructure.snapshot_store import RegistrySnapshotStore
from onsregistry.main import app
from onsregistry.services.ons_registry import OnsRegistry


@pytest.fixture
def registry():
    return OnsRegistry(
        StaticAccessGate(owner="owner", authorizers=frozenset({"writer"})),
    )


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(registry):
    """FastAPI test client with the registry overridden, persistence off."""
    async def no_store():
        yield None

    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_snapshot_store] = no_store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
async def persistent_client(registry, test_session_factory):
    """FastAPI test client that persists snapshots to the test DB."""
    async def override_store():
        async with test_session_factory() as session:
            yield RegistrySnapshotStore(session)

    app.dependency_overrides[get_registry] = lambda: registry
    app.dependency_overrides[get_snapshot_store] = override_store

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
