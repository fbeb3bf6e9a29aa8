import logging
from typing import AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
)
from sqlalchemy.orm import DeclarativeBase

from eggpro.core.config import settings
from eggpro.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)


# Base class for all models
class Base(DeclarativeBase):
    pass


def get_async_db_url(url: str) -> str:
    """Ensure the database URL uses an async driver."""
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+asyncpg://", 1)
    return url


_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker] = None


def get_engine() -> AsyncEngine:
    """
    Create the async engine on first use.

    A missing DATABASE_URL is reported here rather than at import so the
    application can start and report the misconfiguration per request.
    """
    global _engine
    if _engine is not None:
        return _engine

    if not settings.DATABASE_URL:
        raise ConfigurationError("Record store is not configured", setting_names=["DATABASE_URL"])

    db_url = get_async_db_url(settings.DATABASE_URL)
    if db_url.startswith("sqlite"):
        _engine = create_async_engine(db_url, echo=settings.DATABASE_ECHO)
    else:
        _engine = create_async_engine(
            db_url,
            echo=settings.DATABASE_ECHO,
            pool_size=settings.DATABASE_POOL_SIZE,
            max_overflow=settings.DATABASE_POOL_OVERFLOW,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
            pool_pre_ping=True,  # Verify connections are alive before using
            pool_recycle=300,
        )
    logger.info("Database engine created", extra={"dialect": _engine.dialect.name})
    return _engine


def get_session_factory() -> async_sessionmaker:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with get_session_factory()() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db():
    """Create tables if the record store is configured."""
    # Import all models here to ensure they are registered with Base.metadata
    from eggpro.domain.models import otp, order, user  # noqa: F401

    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL not configured - skipping table creation")
        return

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine():
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
