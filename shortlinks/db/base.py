"""Database base configuration for SQLAlchemy with SQLModel.

This module provides base database configuration for async SQLAlchemy with SQLModel.
It includes:
- Engine configuration
- Session factory
- Table creation
"""

from typing import AsyncGenerator, Dict, Optional
import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from shortlinks.core.config import settings

logger = logging.getLogger(__name__)

# Mapping of environment to SQLAlchemy engine configurations
ENGINE_CONFIGS: Dict[str, Dict] = {
    "development": {
        "echo": settings.DB_ECHO,
        "pool_pre_ping": True,
    },
    "production": {
        "echo": False,
        "pool_size": settings.POSTGRES_POOL_SIZE,
        "max_overflow": settings.POSTGRES_POOL_MAX_OVERFLOW,
        "pool_timeout": settings.POSTGRES_POOL_TIMEOUT,
        "pool_recycle": settings.POSTGRES_POOL_RECYCLE,
        "pool_pre_ping": True,
    },
    "testing": {
        "echo": False,
        "poolclass": NullPool,
    },
}


def get_engine_config(database_uri: Optional[str] = None) -> Dict:
    """Get the appropriate engine configuration based on the environment.

    Pool sizing options are dropped for SQLite, which does not accept them.

    Returns:
        Dict: Engine configuration parameters for the current environment.
    """
    env = settings.ENVIRONMENT.value
    config = dict(ENGINE_CONFIGS.get(env, ENGINE_CONFIGS["development"]))
    uri = database_uri or str(settings.SQLALCHEMY_DATABASE_URI)
    if uri.startswith("sqlite"):
        for key in ("pool_size", "max_overflow", "pool_timeout", "pool_recycle"):
            config.pop(key, None)
    return config


def get_engine(database_uri: Optional[str] = None) -> AsyncEngine:
    """Create and configure an async SQLAlchemy engine.

    Args:
        database_uri: Optional URI overriding the configured one

    Returns:
        AsyncEngine: Configured SQLAlchemy async engine instance.
    """
    engine_url = database_uri or str(settings.SQLALCHEMY_DATABASE_URI)
    engine_config = get_engine_config(engine_url)

    logger.info(f"Creating database engine for dialect: {engine_url.split(':', 1)[0]}")

    return create_async_engine(
        engine_url,
        **engine_config,
    )


# Shared async engine instance
engine = get_engine()

# Async session factory
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def get_session(
    session_factory: Optional[async_sessionmaker] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Get async session with proper error handling and cleanup.

    Args:
        session_factory: Factory to open the session from (defaults to the shared one)

    Yields:
        AsyncSession: SQLAlchemy async session
    """
    session = (session_factory or async_session_factory)()
    try:
        yield session
    finally:
        await session.close()


async def init_models(bind: Optional[AsyncEngine] = None) -> None:
    """Create all tables registered on the SQLModel metadata."""
    # Register table models on the metadata
    import shortlinks.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    logger.info("Database tables created")
