# 📄 File: app/shared/infrastructure/database/session.py
#
# 🧭 Purpose (Layman Explanation):
# Manages database sessions (short conversations with the database) so each save or read
# gets its own clean session, and a failed save never leaves half-written data behind.
#
# 🧪 Purpose (Technical Summary):
# Implements async SQLAlchemy session management with commit/rollback handling and
# translation of driver errors into the application's exception hierarchy
# (unique-key violations -> ConflictError, everything else -> StorageError).
#
# 🔗 Dependencies:
# - sqlalchemy.ext.asyncio (AsyncSession, async_sessionmaker)
# - app/shared/core/exceptions.py (ConflictError, StorageError)
#
# 🔄 Connected Modules / Calls From:
# - app/modules/journal/infrastructure/database/journal_repository_impl.py
# - app/main.py (application composition root)

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.shared.core.exceptions import ConflictError, StorageError

logger = logging.getLogger(__name__)


class DatabaseSessionManager:
    """
    Manages database sessions with transaction handling and automatic cleanup.
    """

    def __init__(self, engine: Optional[AsyncEngine] = None):
        self._session_factory: Optional[async_sessionmaker] = None
        if engine is not None:
            self.initialize(engine)

    def initialize(self, engine: AsyncEngine) -> None:
        """Initialize the session factory with database engine."""
        self._session_factory = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Keep objects accessible after commit
            autoflush=True,          # Auto-flush before queries
        )
        logger.info("Database session factory initialized successfully")

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get an async database session with automatic transaction management.

        The transaction is committed when the block exits cleanly, so callers
        observe their own writes as soon as the block returns.

        Yields:
            AsyncSession: Database session

        Raises:
            ConflictError: If a unique constraint rejected the write
            StorageError: If any other database failure occurs
        """
        session = self._new_session()

        try:
            logger.debug("Database session created")
            yield session

            await session.commit()
            logger.debug("Database transaction committed successfully")

        except IntegrityError as e:
            await session.rollback()
            raise self._integrity_error(e) from e

        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database error occurred, transaction rolled back: {e}")
            raise StorageError(f"Database operation failed: {e}", operation="write") from e

        except BaseException:
            # Domain errors and cancellation propagate unchanged
            await session.rollback()
            raise

        finally:
            await session.close()
            logger.debug("Database session closed")

    @asynccontextmanager
    async def get_read_only_session(self) -> AsyncGenerator[AsyncSession, None]:
        """
        Get a read-only database session (no automatic commit).

        Yields:
            AsyncSession: Read-only database session
        """
        session = self._new_session()

        try:
            logger.debug("Read-only database session created")
            yield session

        except SQLAlchemyError as e:
            logger.error(f"Read-only session error: {e}")
            raise StorageError(f"Read operation failed: {e}", operation="read") from e

        finally:
            await session.close()
            logger.debug("Read-only database session closed")

    def _new_session(self) -> AsyncSession:
        if self._session_factory is None:
            raise StorageError("Session manager not initialized", operation="session")
        return self._session_factory()

    @staticmethod
    def _integrity_error(error: IntegrityError) -> Exception:
        message = str(error.orig) if error.orig is not None else str(error)
        if "UNIQUE" in message.upper():
            logger.warning(f"Unique constraint rejected write: {message}")
            return ConflictError(f"Duplicate key: {message}", details={"constraint": message})
        logger.error(f"Integrity error, transaction rolled back: {message}")
        return StorageError(f"Integrity check failed: {message}", operation="write")

    def is_initialized(self) -> bool:
        """Check if session manager is initialized."""
        return self._session_factory is not None
