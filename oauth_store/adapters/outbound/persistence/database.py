# oauth_store/adapters/outbound/persistence/database.py (async version)

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker

# Configure logger
logger = logging.getLogger(__name__)


def create_engine(database_url: str, echo: bool = False, pool_size: int = 20) -> AsyncEngine:
    """
    Create the async engine of the relational store.

    SQLite (used by the tests) does not take pool sizing arguments.
    """
    url = make_url(database_url)
    logger.info(f"Connecting to database: {url.render_as_string(hide_password=True).split('@')[-1]}")

    options = {"echo": echo, "future": True}
    if url.get_backend_name() != "sqlite":
        options.update(
            pool_size=pool_size,
            max_overflow=10,
            pool_timeout=30,
            pool_recycle=1800,
            pool_pre_ping=True,
        )
    return create_async_engine(url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )


@asynccontextmanager
async def get_db_context(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """
    Provides an async context for database operations,
    committing on success and ensuring the session is closed at the end.

    Example:
        ```python
        async with get_db_context(session_factory) as db:
            result = await db.execute(select(Client))
            clients = result.scalars().all()
        ```
    """
    session = session_factory()
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
