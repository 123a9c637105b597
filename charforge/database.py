"""
Database configuration for CharForge.

This module provides the database engine, session management and schema
initialization. Initialization is lazy: the engine is only created on first
use, from the loaded configuration.
"""

import threading
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from .exceptions import ConfigurationError
from .structured_logging.enhanced_logging_config import get_logger
from .utils.error_logging import create_error_context, log_and_raise

logger = get_logger(__name__)


def _normalize_database_url(database_url: str) -> str:
    """Select the async driver for the configured database."""
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("sqlite://"):
        return database_url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return database_url


class DatabaseManager:
    """
    Thread-safe singleton for database management.

    Manages database engine, session maker, and URL with proper
    initialization and thread safety.
    """

    _instance: "DatabaseManager | None" = None
    _lock: threading.Lock = threading.Lock()

    def __init__(self) -> None:
        """Initialize the database manager."""
        if DatabaseManager._instance is not None:
            raise RuntimeError("Use DatabaseManager.get_instance()")

        self.engine: AsyncEngine | None = None
        self.session_maker: async_sessionmaker | None = None
        self.database_url: str | None = None
        self._initialized: bool = False

    @classmethod
    def get_instance(cls) -> "DatabaseManager":
        """Get the singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset singleton for testing."""
        with cls._lock:
            cls._instance = None

    def _initialize_database(self) -> None:
        """
        Initialize database engine and session maker from configuration.

        Raises:
            ConfigurationError: If configuration is missing or invalid
        """
        if self._initialized:
            return

        context = create_error_context()
        context.metadata["operation"] = "database_initialization"

        from .config import get_config

        try:
            config = get_config()
        except Exception as e:  # pylint: disable=broad-exception-caught
            log_and_raise(
                ConfigurationError,
                f"Failed to load configuration: {e}",
                context=context,
                details={"config_error": str(e)},
                user_friendly="Database cannot be initialized: configuration not loaded or invalid",
                config_key="database",
            )

        self.database_url = _normalize_database_url(config.database.url)

        pool_kwargs: dict[str, Any] = {}
        if self.database_url.startswith("sqlite") or "test" in self.database_url:
            pool_kwargs["poolclass"] = NullPool
        else:
            pool_kwargs.update(
                {
                    "pool_size": config.database.pool_size,
                    "max_overflow": config.database.max_overflow,
                    "pool_timeout": config.database.pool_timeout,
                    "pool_pre_ping": True,
                }
            )

        self.engine = create_async_engine(self.database_url, echo=False, **pool_kwargs)
        logger.info(
            "Database engine created",
            dialect=self.engine.dialect.name,
            pool_type="NullPool" if "poolclass" in pool_kwargs else "AsyncAdaptedQueuePool",
        )

        self.session_maker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._initialized = True

    def get_engine(self) -> AsyncEngine:
        """
        Get the database engine, initializing if necessary.

        Raises:
            ConfigurationError: If database cannot be initialized
        """
        if not self._initialized:
            self._initialize_database()
        assert self.engine is not None, "Database engine not initialized"
        return self.engine

    def get_session_maker(self) -> async_sessionmaker:
        """
        Get the async session maker, initializing if necessary.

        Raises:
            ConfigurationError: If database cannot be initialized
        """
        if not self._initialized:
            self._initialize_database()
        assert self.session_maker is not None, "Session maker not initialized"
        return self.session_maker

    async def close(self) -> None:
        """Close database connections."""
        if self.engine is not None:
            engine = self.engine
            try:
                await engine.dispose()
                logger.info("Database connections closed")
            except RuntimeError as e:
                # Event loop already closing during teardown
                logger.debug("Event loop closed during engine disposal", error=str(e))
            finally:
                self.engine = None
                self.session_maker = None
        self._initialized = False


def get_database_manager() -> DatabaseManager:
    """Get the database manager singleton."""
    return DatabaseManager.get_instance()


def get_engine() -> AsyncEngine:
    """Get the database engine, initializing if necessary."""
    return get_database_manager().get_engine()


def get_session_maker() -> async_sessionmaker:
    """Get the async session maker, initializing if necessary."""
    return get_database_manager().get_session_maker()


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency to get database session.

    Yields:
        AsyncSession: Database session for async operations
    """
    context = create_error_context()
    context.metadata["operation"] = "database_session"

    session_maker = get_session_maker()
    async with session_maker() as session:
        try:
            yield session
        except Exception as e:
            logger.error(
                "Database session error",
                context=context.to_dict(),
                error=str(e),
                error_type=type(e).__name__,
            )
            await session.rollback()
            raise


async def init_db() -> None:
    """
    Initialize the database connection and create missing tables.

    Tables are created from the ORM metadata with ``create_all``, which only
    creates tables that do not already exist.
    """
    context = create_error_context()
    context.metadata["operation"] = "init_db"

    logger.info("Initializing database connection")

    from sqlalchemy.orm import configure_mappers

    # Import all models so they are registered with the metadata
    from .models.base import Base
    from .models.character import Character  # noqa: F401
    from .models.user import User  # noqa: F401

    configure_mappers()

    engine = get_engine()
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.error(
            "Database initialization failed",
            context=context.to_dict(),
            error=str(e),
            error_type=type(e).__name__,
        )
        raise

    logger.info("Database initialization complete", tables=sorted(Base.metadata.tables))


async def close_db() -> None:
    """Close database connections."""
    await get_database_manager().close()
