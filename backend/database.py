"""
GrantFit Database Connection Setup
Provides the async engine, the request-scoped session dependency and
connection helpers shared by the API and the Celery workers.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from backend.core.config import settings
from backend.models import Base


def _engine_options(database_url: str) -> dict[str, Any]:
    """Pool settings apply to server databases only; SQLite runs unpooled for local use."""
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"timeout": 30}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }


async_engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    **_engine_options(settings.async_database_url),
)

# The matcher opens its own sessions from this factory
AsyncSessionLocal = async_sessionmaker(
    bind=async_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Routes that queue recomputation commit explicitly before dispatch, so
    the worker never reads rows this session has not yet written. Anything
    left pending is committed here; errors roll the request back.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables. Development only; deployed databases use Alembic."""
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """
    Dispose of pooled connections.

    Called at API shutdown and at the end of every Celery task, since each
    task runs the matcher on its own event loop.
    """
    await async_engine.dispose()


async def check_db_connection() -> dict[str, Any]:
    """
    Run a trivial query for the health endpoints.

    Returns:
        ``{"status": "healthy", "dialect": ...}`` or
        ``{"status": "unhealthy", "error": ...}``.
    """
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy", "dialect": async_engine.dialect.name}
