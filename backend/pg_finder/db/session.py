"""
Async engine and session factory.

One AsyncSession per request is one unit of work: everything a request
writes (a booking status and its bed, for instance) commits together or
rolls back together. The commit is issued by the service that did the
writing, before the route returns.
"""

from typing import AsyncGenerator

from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pg_finder.core.config import get_settings
from pg_finder.core.exceptions import StoreUnavailable
from pg_finder.core.logging import get_logger
from pg_finder.core.metrics import store_errors

logger = get_logger(__name__)
settings = get_settings()


def engine_options(url: str) -> dict:
    if url.startswith("sqlite"):
        # In-memory SQLite must share a single connection
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": settings.DB_MAX_OVERFLOW,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "pool_recycle": settings.DB_POOL_RECYCLE,
        "pool_pre_ping": True,
    }


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **engine_options(settings.DATABASE_URL),
)
SessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Yield a session for the request. Roll back if the request failed.

    Services commit their own writes with `commit_session` before returning,
    so a failed commit reaches the caller as a 503 instead of surfacing after
    the response has been sent.
    """
    async with SessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def commit_session(db: AsyncSession) -> None:
    """Commit the unit of work; store failures become StoreUnavailable."""
    try:
        await db.commit()
    except DBAPIError as e:
        await db.rollback()
        store_errors.inc()
        logger.error("store_commit_failed", error=str(e.orig) if e.orig else str(e))
        raise StoreUnavailable() from e
