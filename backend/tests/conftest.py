"""Pytest configuration and fixtures for AgriDesk tests.

Tests run against an in-memory SQLite database (aiosqlite) with the
in-process change broker standing in for Redis.  HTTP integrations are
pointed at fake hosts and mocked with respx.
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.auth.jwt import create_access_token
from app.database import create_tables
from app.main import app
from app.repositories.organizations import OrganizationRepository
from app.services.geocoding import GeocodingClient
from app.services.lifecycle import AppServices, build_services, install
from app.services.storage import StorageClient
from app.store.client import StoreClient
from app.store.realtime import LocalChangeBroker
from app.tenancy import OrganizationContext, OrgRole
from app.utils.cache import QueryCache

MAPBOX_URL = "https://mapbox.test"
STORAGE_URL = "https://storage.test"


# ── Database ─────────────────────────────────────────────────────

@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory database per test (one shared connection)."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def broker() -> LocalChangeBroker:
    return LocalChangeBroker()


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache(stale_after=30.0, gc_after=300.0)


@pytest.fixture
def store(session_factory, broker) -> StoreClient:
    return StoreClient(session_factory, broker)


# ── Organizations ────────────────────────────────────────────────

@pytest_asyncio.fixture
async def org_a(store):
    return await OrganizationRepository(store).create(
        {"name": "Green Acres Cooperative", "email": "admin@greenacres.test"}
    )


@pytest_asyncio.fixture
async def org_b(store):
    return await OrganizationRepository(store).create(
        {"name": "Savannah Growers", "email": "admin@savannah.test"}
    )


@pytest.fixture
def ctx_a(org_a) -> OrganizationContext:
    return OrganizationContext(organization_id=org_a.id, role=OrgRole.ADMIN, user_id="user-a")


@pytest.fixture
def ctx_b(org_b) -> OrganizationContext:
    return OrganizationContext(organization_id=org_b.id, role=OrgRole.ADMIN, user_id="user-b")


# ── Services / HTTP ──────────────────────────────────────────────

@pytest_asyncio.fixture
async def services(session_factory, broker, cache) -> AsyncGenerator[AppServices, None]:
    """Everything the app wires in its lifespan, built for tests."""
    services = build_services(
        session_factory=session_factory,
        broker=broker,
        cache=cache,
        geocoding=GeocodingClient(access_token="pk.test", base_url=MAPBOX_URL, retry_delay=0),
        storage=StorageClient(base_url=STORAGE_URL, service_key="service-key", bucket="images"),
    )
    await services.invalidator.start()
    yield services
    await services.close()


@pytest_asyncio.fixture
async def client(services) -> AsyncGenerator[AsyncClient, None]:
    install(app, services)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def _headers(organization_id: str, role: OrgRole) -> dict:
    token = create_access_token(
        user_id=f"user-{role.value}",
        organization_id=organization_id,
        role=role.value,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(org_a) -> dict:
    return _headers(org_a.id, OrgRole.ADMIN)


@pytest.fixture
def officer_headers(org_a) -> dict:
    return _headers(org_a.id, OrgRole.EXTENSION_OFFICER)


@pytest.fixture
def farmer_headers(org_a) -> dict:
    return _headers(org_a.id, OrgRole.FARMER)


@pytest.fixture
def other_org_headers(org_b) -> dict:
    return _headers(org_b.id, OrgRole.ADMIN)


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "cache: Query cache tests")
    config.addinivalue_line("markers", "realtime: Change notification tests")
