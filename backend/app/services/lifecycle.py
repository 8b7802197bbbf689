"""Application lifespan: wire the store, cache and integrations on startup.

Usage:
    from app.services.lifecycle import lifespan
    app = FastAPI(lifespan=lifespan, ...)

Everything a request needs hangs off `app.state` (see app.dependencies).
Tests build their own `AppServices` against SQLite and a local broker and
assign it with `install(app, services)` instead of running the lifespan.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import settings
from app.database import async_session, create_tables
from app.repositories.applications import ApplicationRepository
from app.repositories.crops import CropRepository
from app.repositories.extension_services import ExtensionServiceRepository
from app.repositories.farmers import FarmerRepository
from app.repositories.financial_services import FinancialServiceRepository
from app.repositories.growth_records import GrowthRecordRepository
from app.repositories.livestock import LivestockRepository
from app.repositories.organizations import OrganizationRepository
from app.services.geocoding import GeocodingClient
from app.services.realtime import CacheInvalidator
from app.services.storage import StorageClient
from app.store.client import StoreClient
from app.store.realtime import ChangeBroker, LocalChangeBroker, RedisChangeBroker
from app.utils.cache import QueryCache

logger = logging.getLogger(__name__)


@dataclass
class AppServices:
    store: StoreClient
    cache: QueryCache
    invalidator: CacheInvalidator
    organizations: OrganizationRepository
    farmers: FarmerRepository
    livestock: LivestockRepository
    crops: CropRepository
    financial_services: FinancialServiceRepository
    extension_services: ExtensionServiceRepository
    applications: ApplicationRepository
    growth_records: GrowthRecordRepository
    geocoding: GeocodingClient
    storage: StorageClient

    async def close(self) -> None:
        await self.invalidator.stop()
        await self.cache.close()
        await self.geocoding.close()
        await self.storage.close()
        await self.store.broker.close()


def make_broker(backend: str | None = None) -> ChangeBroker:
    backend = backend or settings.realtime_backend
    if backend == "redis":
        return RedisChangeBroker(settings.redis_url)
    if backend == "local":
        return LocalChangeBroker()
    raise ValueError(f"Unknown realtime backend: {backend!r}")


def build_services(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    broker: ChangeBroker | None = None,
    cache: QueryCache | None = None,
    geocoding: GeocodingClient | None = None,
    storage: StorageClient | None = None,
    nested_storage: str | None = None,
) -> AppServices:
    store = StoreClient(session_factory or async_session, broker or make_broker())
    cache = cache or QueryCache(
        stale_after=settings.query_cache_stale_seconds,
        gc_after=settings.query_cache_gc_seconds,
    )
    return AppServices(
        store=store,
        cache=cache,
        invalidator=CacheInvalidator(store.broker, cache),
        organizations=OrganizationRepository(store, cache),
        farmers=FarmerRepository(store, cache),
        livestock=LivestockRepository(store, cache, storage=nested_storage),
        crops=CropRepository(store, cache),
        financial_services=FinancialServiceRepository(store, cache),
        extension_services=ExtensionServiceRepository(store, cache),
        applications=ApplicationRepository(store, cache),
        growth_records=GrowthRecordRepository(store, cache),
        geocoding=geocoding or GeocodingClient(),
        storage=storage or StorageClient(),
    )


def install(app: FastAPI, services: AppServices) -> None:
    app.state.services = services


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan: build services and start invalidation; tear down on exit."""
    if settings.auto_create_tables:
        await create_tables()

    services = build_services()
    install(app, services)
    await services.invalidator.start()
    logger.info(
        "AgriDesk started (realtime=%s, nested records=%s)",
        settings.realtime_backend,
        services.livestock.records.mode,
    )
    try:
        yield
    finally:
        await services.close()
        logger.info("AgriDesk stopped")
