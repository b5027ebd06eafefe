"""
Async SQLAlchemy connection pool and database session management.

This module provides a singleton connection pool manager for async SQLAlchemy operations.
It handles database connections with connection pooling, a startup health check,
schema creation and automatic cleanup.

Key Features:
    - Singleton pattern for global connection pool management
    - Async-only operations (no blocking database calls)
    - Connection pool with configurable size and overflow
    - Startup ping so an unreachable database aborts boot
    - Idempotent create-if-absent schema setup

Usage:
    # Initialize once at application startup (in lifespan)
    await AsyncDBPool.init(DatabaseConfig())
    await AsyncDBPool.ping()
    await AsyncDBPool.ensure_schema(Base.metadata)

    # Hand the session factory to services
    catalog = ImageCatalog(AsyncDBPool.session_maker())

    # Cleanup at shutdown (in lifespan)
    await AsyncDBPool.dispose()

Thread Safety:
    All methods are async and should be called from async context.
    The pool itself is thread-safe through SQLAlchemy's engine.
"""

from typing import Any

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from image_dock.main_config import DatabaseConfig


class AsyncDBPool:
    """Async-only SQLAlchemy engine + session manager."""

    _engine: AsyncEngine | None = None
    _maker: async_sessionmaker[AsyncSession] | None = None

    @classmethod
    async def init(cls, config: DatabaseConfig) -> None:
        """Initialize async engine and sessionmaker.

        Args:
            config: DatabaseConfig instance with the connection URL and pool settings

        Raises:
            ConfigurationError: If DATABASE_URL is missing or malformed
        """
        if cls._engine is not None:
            return  # already initialized

        url = config.async_url
        pool_kwargs: dict[str, Any] = {}
        # SQLite picks its own pool class, which rejects queue-pool sizing
        if url.get_backend_name() != "sqlite":
            pool_kwargs = {
                "pool_size": config.pool_size,
                "max_overflow": config.max_overflow,
                "pool_timeout": config.pool_timeout,
                "pool_recycle": config.pool_recycle,
            }

        cls._engine = create_async_engine(
            url,
            pool_pre_ping=config.pool_pre_ping,
            echo=config.echo,
            **pool_kwargs,
        )
        cls._maker = async_sessionmaker(cls._engine, expire_on_commit=False, class_=AsyncSession)

    @classmethod
    def _require_engine(cls) -> AsyncEngine:
        if cls._engine is None:
            raise RuntimeError("AsyncDBPool not initialized. Call await AsyncDBPool.init() first.")
        return cls._engine

    @classmethod
    async def ping(cls) -> None:
        """Run a trivial query; raises if the database is unreachable."""
        async with cls._require_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))

    @classmethod
    async def ensure_schema(cls, metadata: MetaData) -> None:
        """Create every table in ``metadata`` that does not exist yet."""
        async with cls._require_engine().begin() as conn:
            await conn.run_sync(metadata.create_all)

    @classmethod
    def session_maker(cls) -> async_sessionmaker[AsyncSession]:
        """Return the configured session factory.

        Raises:
            RuntimeError: If pool not initialized
        """
        if cls._maker is None:
            raise RuntimeError("AsyncDBPool not initialized. Call await AsyncDBPool.init() first.")
        return cls._maker

    @classmethod
    async def dispose(cls) -> None:
        """Dispose engine and clear session maker.

        Should be called during application shutdown to cleanly close
        all database connections.
        """
        if cls._engine is not None:
            await cls._engine.dispose()
            cls._engine = None
            cls._maker = None
