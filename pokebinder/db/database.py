"""
Database engine and session management.

One async engine per process. Request handlers get a session through the
`get_session` dependency; the session commits once the handler returns and
rolls back when it raises, so a refused rate-limit hit or a failed edit never
leaves a half-written binder behind.
"""

import logging
from collections.abc import AsyncGenerator

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from pokebinder.config import settings
from pokebinder.models.db import Base, BinderDB

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    pool_pre_ping=True,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency providing a request-scoped session."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.debug("Rolling back session after %s", type(e).__name__)
            await session.rollback()
            raise


async def count_binders(session: AsyncSession) -> int:
    """
    Count stored binders.

    Fails with a SQLAlchemyError when the database is unreachable or the
    `binders` table has not been created.
    """
    result = await session.execute(select(func.count()).select_from(BinderDB))
    return int(result.scalar_one())


async def init_db() -> None:
    """Create the binder tables if they do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database ready: %s", ", ".join(sorted(Base.metadata.tables)))
