import logging

from databases import Database
from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import create_async_engine

logger = logging.getLogger(__name__)

metadata = MetaData()


def make_database(url: str) -> Database:
    # async DB interface for runtime queries
    return Database(url)


def sync_url(url: str) -> str:
    """Strip the async driver from *url* (alembic and other sync tooling)."""
    if url.startswith('postgresql+asyncpg://'):
        return url.replace('postgresql+asyncpg://', 'postgresql://')
    if url.startswith('sqlite+aiosqlite://'):
        return url.replace('+aiosqlite', '')
    return url


async def create_tables(url: str) -> None:
    # importing models registers every table on `metadata`
    import models  # noqa: F401

    async_engine = create_async_engine(url, echo=False)
    try:
        async with async_engine.begin() as conn:
            await conn.run_sync(metadata.create_all)
    finally:
        await async_engine.dispose()
    logger.info('tables ensured on %s', url.split('@')[-1])


def is_unique_violation(exc: Exception) -> bool:
    """True for the unique-constraint error raised by any of the async drivers."""
    names = {cls.__name__ for cls in type(exc).__mro__}
    return bool(names & {'IntegrityError', 'UniqueViolationError'})
