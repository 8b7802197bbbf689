"""Database engine, session factory, and declarative base.

All tenant data lives in shared tables; isolation is by the
`organization_id` column, which every repository call filters on.

  - Base             → declarative base for every model
  - async_session    → session factory handed to the StoreClient
  - create_tables()  → create_all for development / tests
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def build_engine(url: str | None = None, **kwargs) -> AsyncEngine:
    """Create an async engine; pool sizing only applies to server databases."""
    url = url or settings.database_url
    if not url.startswith("sqlite"):
        kwargs.setdefault("pool_size", 20)
        kwargs.setdefault("max_overflow", 10)
    return create_async_engine(url, echo=settings.debug and settings.log_level == "DEBUG", **kwargs)


engine = build_engine()

async_session = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


# ── Base class ──────────────────────────────────────────────

class Base(DeclarativeBase):
    """Models for all AgriDesk tables."""
    pass


async def create_tables(bind: AsyncEngine | None = None) -> None:
    """Create any missing tables (idempotent)."""
    import app.models  # noqa: F401  (register all mappers)

    async with (bind or engine).begin() as conn:
        await conn.run_sync(lambda sync_conn: Base.metadata.create_all(sync_conn, checkfirst=True))
