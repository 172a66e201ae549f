"""Async engine, session factory and the FastAPI session dependency.

Writes share the request's session (one transaction per seller operation,
committed by ListingLifecycleService). Read paths that fan out concurrent
queries open one session per query through a SessionFactory, since an
AsyncSession must not be used by two tasks at once.
"""

from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from config.settings import settings

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(engine, expire_on_commit=False)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        yield session
