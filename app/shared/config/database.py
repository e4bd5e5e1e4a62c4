# 📄 File: app/shared/config/database.py
#
# 🧭 Purpose (Layman Explanation):
# Describes the shape of the journal's local database so every table follows the
# same naming rules and can be created on first launch.
#
# 🧪 Purpose (Technical Summary):
# SQLAlchemy declarative base with a constraint naming convention, engine keyword
# configuration for the async SQLite driver, and schema create/drop helpers.
#
# 🔗 Dependencies:
# - SQLAlchemy declarative ORM and async engine
# - app.shared.config.settings
#
# 🔄 Connected Modules / Calls From:
# - app.shared.infrastructure.database.connection (engine creation, schema setup)
# - app.modules.journal.infrastructure.database.models (ORM models)

from typing import Any, Dict

from sqlalchemy import MetaData
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.orm import DeclarativeBase

from .settings import Settings


# =============================================================================
# DATABASE CONFIGURATION
# =============================================================================

class DatabaseConfig:
    """Database configuration class with environment-specific settings."""

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def database_url(self) -> str:
        """Get the database URL for async connections."""
        return self.settings.database_url

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.database_url).get_backend_name() == "sqlite"

    @property
    def engine_kwargs(self) -> Dict[str, Any]:
        """Get SQLAlchemy engine configuration based on environment."""

        base_config: Dict[str, Any] = {
            "echo": self.settings.DB_ECHO,
            "pool_pre_ping": True,
        }

        if self.is_sqlite:
            # Writers wait on a locked file instead of failing immediately
            base_config["connect_args"] = {"timeout": self.settings.DB_BUSY_TIMEOUT}

        return base_config


# =============================================================================
# DATABASE MODELS BASE CLASS
# =============================================================================

# Naming convention for database constraints
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata = MetaData(naming_convention=convention)


class DatabaseBase(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Provides common metadata configuration for all database
    models in the Plant Memory application.
    """
    metadata = metadata


# =============================================================================
# SCHEMA MANAGEMENT
# =============================================================================

async def create_schema(engine: AsyncEngine) -> None:
    """Create all registered tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(DatabaseBase.metadata.create_all)

