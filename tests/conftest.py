from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from provisioner.api.deps import get_credential_cache, get_db_session
from provisioner.api.main import app
from provisioner.domain.services.credentials import CredentialCache
from provisioner.infrastructure.db.base import Base

from tests.utils import FakeClock, FakeGenesysClient


@pytest.fixture()
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture()
async def db(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    """Provide a database session for tests that need direct DB access."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def genesys() -> FakeGenesysClient:
    return FakeGenesysClient()


@pytest.fixture()
def credential_cache(genesys: FakeGenesysClient, clock: FakeClock) -> CredentialCache:
    return CredentialCache(genesys, clock=clock)


@pytest.fixture()
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
    credential_cache: CredentialCache,
) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the test database and the fake Genesys platform."""

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_credential_cache] = lambda: credential_cache
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
