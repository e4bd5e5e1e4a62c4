# 📄 File: app/shared/infrastructure/database/connection.py
#
# 🧭 Purpose (Layman Explanation):
# Opens the journal's local database file, makes sure it is reachable and has its
# tables, and closes it cleanly when the app shuts down.
#
# 🧪 Purpose (Technical Summary):
# Async SQLAlchemy engine lifecycle: construction from settings, SQLite connection
# pragmas, schema creation, health checks with retry, and disposal. Instances are
# constructed explicitly and passed down; there is no module-level engine.
#
# 🔗 Dependencies:
# - sqlalchemy (async engine, connection events)
# - aiosqlite (async SQLite driver)
# - app/shared/config (settings, schema helpers)
#
# 🔄 Connected Modules / Calls From:
# - app/shared/infrastructure/database/session.py (session management)
# - app/main.py (application composition root)

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from app.shared.config.database import DatabaseConfig, create_schema
from app.shared.config.settings import Settings
from app.shared.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class DatabaseConnectionManager:
    """
    Manages the journal database engine with SQLite tuning,
    health monitoring, and automatic retry of the health probe.
    """

    def __init__(self, settings: Settings):
        self._settings = settings
        self._config = DatabaseConfig(settings)
        self._engine: Optional[AsyncEngine] = None
        self._health_check_query = text("SELECT 1")
        self._retry_attempts = 3
        self._retry_delay = 0.1

    async def initialize(self, create_tables: bool = True) -> AsyncEngine:
        """Create the engine, register pragmas, optionally create tables, and probe it."""
        if self._engine is not None:
            logger.warning("Database engine already initialized")
            return self._engine

        try:
            logger.info(f"Initializing database engine for {self._redacted_url()}")
            self._engine = create_async_engine(self._config.database_url, **self._config.engine_kwargs)

            if self._config.is_sqlite:
                self._register_sqlite_pragmas()

            if create_tables:
                await create_schema(self._engine)

            health = await self.health_check()
            if health["status"] != "healthy":
                raise StorageError(
                    "Database health check failed during initialization",
                    operation="initialize",
                    details={"error": health.get("error")}
                )

            logger.info("Database engine initialized successfully")
            return self._engine

        except StorageError:
            await self._dispose_quietly()
            raise
        except Exception as e:
            logger.error(f"Failed to initialize database connection: {e}")
            await self._dispose_quietly()
            raise StorageError(f"Database initialization failed: {e}", operation="initialize") from e

    def _register_sqlite_pragmas(self) -> None:
        """Register SQLAlchemy connection event listeners."""
        if self._engine is None:
            return

        busy_timeout_ms = int(self._settings.DB_BUSY_TIMEOUT * 1000)

        @event.listens_for(self._engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_connection, connection_record):
            """Configure connection-specific settings."""
            cursor = dbapi_connection.cursor()
            cursor.execute(f"PRAGMA busy_timeout = {busy_timeout_ms}")
            cursor.close()

    async def health_check(self) -> Dict[str, Any]:
        """
        Perform database health check and return structured status.
        """
        if self._engine is None:
            logger.error("Database engine not initialized")
            return {
                "status": "unhealthy",
                "error": "Database engine not initialized",
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

        last_error = None
        for attempt in range(self._retry_attempts):
            try:
                async with self._engine.connect() as conn:
                    result = await conn.execute(self._health_check_query)
                    result.scalar()

                logger.debug("Database health check passed")
                return {
                    "status": "healthy",
                    "timestamp": datetime.now(timezone.utc).isoformat()
                }

            except Exception as e:
                last_error = str(e)
                logger.warning(
                    f"Database health check failed (attempt {attempt + 1}/{self._retry_attempts}): {e}"
                )
                if attempt < self._retry_attempts - 1:
                    await asyncio.sleep(self._retry_delay * (2 ** attempt))

        logger.error("Database health check failed after all retry attempts")
        return {
            "status": "unhealthy",
            "error": last_error,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    async def close(self) -> None:
        """Close database engine and all connections."""
        if self._engine is None:
            logger.warning("Database engine not initialized, nothing to close")
            return

        logger.info("Closing database engine...")
        await self._engine.dispose()
        self._engine = None
        logger.info("Database engine closed successfully")

    async def _dispose_quietly(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None

    def _redacted_url(self) -> str:
        return make_url(self._config.database_url).render_as_string(hide_password=True)

    @property
    def engine(self) -> AsyncEngine:
        """Get the SQLAlchemy async engine."""
        if self._engine is None:
            raise StorageError("Database engine not initialized", operation="engine")
        return self._engine

    @property
    def is_initialized(self) -> bool:
        """Check if database engine is initialized."""
        return self._engine is not None
