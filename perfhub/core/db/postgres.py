"""
Performance database connection.

The export service only reads from the product's Postgres instance
(Supabase in production); it never owns or migrates the schema. A single
async engine is created per process and every repository call opens its
own short-lived session from it.

Connection settings come from DATABASE_URL, or from the DB_HOST, DB_PORT,
DB_USER, DB_PASS and DB_NAME parts when no URL is given.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from perfhub.core.config import settings
from perfhub.core.logging import setup_logger

logger = setup_logger(settings.LOG_LEVEL)

Base = declarative_base()

_ASYNC_SCHEME = "postgresql+asyncpg://"
_PLAIN_SCHEMES = ("postgres://", "postgresql://")

_engine: Optional[AsyncEngine] = None
_sessions: Optional[async_sessionmaker] = None


def get_database_url() -> str:
    """Resolve the asyncpg URL for the performance database."""
    if settings.DATABASE_URL:
        url = settings.DATABASE_URL
        for scheme in _PLAIN_SCHEMES:
            if url.startswith(scheme):
                return _ASYNC_SCHEME + url[len(scheme):]
        return url

    host = f"{settings.DB_HOST}:{settings.DB_PORT}/{settings.DB_NAME}"
    logger.info(f"db_target={settings.DB_USER}@{host}")
    return f"{_ASYNC_SCHEME}{settings.DB_USER}:{settings.DB_PASS}@{host}"


def _engine_options(url: str) -> dict:
    # sqlite (tests, local dumps) has no connection pool to size
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": 20,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


def init_engine(database_url: Optional[str] = None) -> None:
    """
    Create the process-wide engine and session factory.

    A second call is a no-op. ``database_url`` overrides the configured
    target, which is how the CLI's ``--database-url`` and the tests point
    the repository somewhere else.
    """
    global _engine, _sessions

    if _engine is not None:
        return

    url = database_url or get_database_url()
    try:
        engine = create_async_engine(url, echo=False, **_engine_options(url))
    except Exception as e:
        logger.error(f"db_engine_failed=true error={e}")
        raise

    _engine = engine
    _sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    logger.info(f"db_engine_ready=true driver={engine.url.drivername}")


@asynccontextmanager
async def get_session() -> AsyncIterator[AsyncSession]:
    """Open a read session; rolled back if the caller's block raises."""
    if _sessions is None:
        raise RuntimeError("Performance database is not initialized")

    session = _sessions()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()


async def check_database_connection() -> tuple[bool, Optional[str]]:
    """
    Ping the database.

    Returns:
        ``(available, error)``; ``error`` is None when the ping succeeded
    """
    if _engine is None:
        return False, "Performance database is not initialized"

    try:
        async with _engine.connect() as conn:
            value = (await conn.execute(text("SELECT 1"))).scalar()
    except Exception as e:
        logger.error(f"db_ping_failed=true error={e}")
        return False, f"Performance database unreachable: {e}"

    if value != 1:
        return False, f"Unexpected ping result: {value!r}"
    return True, None


async def close_engine() -> None:
    global _engine, _sessions

    engine, _engine, _sessions = _engine, None, None
    if engine is None:
        return

    try:
        await engine.dispose()
    except Exception as e:
        logger.error(f"db_dispose_failed=true error={e}")
    else:
        logger.info("db_engine_closed=true")


def is_database_initialized() -> bool:
    return _engine is not None


async def initialize_database(database_url: Optional[str] = None) -> None:
    """Create the engine and fail fast when the database cannot be reached."""
    init_engine(database_url)

    available, error = await check_database_connection()
    if not available:
        raise RuntimeError(error)
