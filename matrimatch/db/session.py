import logging
import time
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from matrimatch.config import settings


logger = logging.getLogger(__name__)


def async_database_url(url: str) -> str:
    """Rewrite plain postgres URLs for the asyncpg driver; other URLs pass through."""
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+asyncpg://" + url[len(prefix):]
    return url


def engine_options(url: str) -> dict:
    options = {"echo": settings.DEBUG, "pool_pre_ping": True}
    # SQLite (tests, local runs) has no connection pool to size
    if not url.startswith("sqlite"):
        options.update(pool_size=5, max_overflow=10)
    return options


database_url = async_database_url(settings.DATABASE_URL)
engine = create_async_engine(database_url, **engine_options(database_url))

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Declarative base for the match tables."""


async def init_db():
    """Create the match tables if they are missing."""
    import matrimatch.models  # noqa: F401  registers tables on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready (%s)", ", ".join(sorted(Base.metadata.tables)))


async def close_db():
    await engine.dispose()
    logger.info("Database connections disposed")


async def ping_database() -> float:
    """Round-trip a trivial query and return the latency in milliseconds."""
    start = time.perf_counter()
    async with async_session_maker() as session:
        await session.execute(text("SELECT 1"))
    return round((time.perf_counter() - start) * 1000, 2)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session: commits on success, rolls back on error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
