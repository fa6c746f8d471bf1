"""
Database Configuration and Session Management
"""

import logging
import traceback
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from trackmyjob.config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    # SQLite (local runs and tests) does not take pool sizing arguments
    if url.startswith("sqlite"):
        return {"echo": settings.sql_echo}
    return {
        "echo": settings.sql_echo,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_timeout": 30,
        "pool_recycle": 3600,
    }


def build_engine(url: str) -> AsyncEngine:
    """Create an async engine for the given database URL."""
    return create_async_engine(url, **_engine_options(url))


engine = build_engine(settings.database_url)

# Create session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency that provides a database session."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"Database session error: {type(e).__name__}: {str(e)}")
            logger.debug(f"Traceback:\n{traceback.format_exc()}")
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Initialize database tables."""
    from trackmyjob.models.profile import Profile  # noqa: F401
    from trackmyjob.models.job import JobApplication  # noqa: F401
    from trackmyjob.models.user_file import UserFile  # noqa: F401

    target = bind or engine
    try:
        async with target.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database tables: {type(e).__name__}: {str(e)}")
        logger.error(f"Database: {settings.db_host}:{settings.db_port}/{settings.db_name}")
        raise
