"""Async SQLAlchemy engine and session factory.

The request-tracking middleware opens its own session from
:data:`AsyncSessionLocal` for every tracked request; route handlers receive
theirs through :func:`get_db`.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from reqtrack.config import settings
from reqtrack.db_url import build_engine

engine = build_engine(
    settings.database_url,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)

AsyncSessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession]:
    async with AsyncSessionLocal() as session:
        yield session
