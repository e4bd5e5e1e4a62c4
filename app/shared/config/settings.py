# 📄 File: app/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# and provides them to the rest of the Plant Memory journal in an organized way.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for storage, logging and journal read limits.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - zoneinfo for resolving the journal's calendar zone
#
# 🔄 Connected Modules / Calls From:
# - app.main (application composition root)
# - app.shared.infrastructure.database.connection (engine configuration)
# - app.shared.utils.logging (log level and format)
# - Journal service and read projections (default limits, calendar zone)

from datetime import tzinfo
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="Plant Memory", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=False, description="Debug mode flag")

    # =========================================================================
    # LOGGING
    # =========================================================================

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format (json/text)")
    LOG_FILE: Optional[str] = Field(None, description="Optional log file path")

    # =========================================================================
    # DATABASE CONFIGURATION
    # =========================================================================

    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///plant_memory.db",
        description="Async SQLAlchemy URL of the journal database"
    )
    DB_ECHO: bool = Field(default=False, description="Echo SQL statements")
    DB_BUSY_TIMEOUT: float = Field(
        default=5.0,
        description="Seconds a writer waits on a locked database file"
    )

    # =========================================================================
    # JOURNAL
    # =========================================================================

    PLANT_MEMORY_TIMEZONE: Optional[str] = Field(
        None,
        description="IANA zone used for calendar dates (unset = system local zone)"
    )
    RECENT_ENTRIES_LIMIT: int = Field(default=50, description="Default recent-N size")
    YEAR_ENTRIES_LIMIT: int = Field(default=100, description="Default year snapshot size")
    WIDGET_YEAR_LIMIT: int = Field(default=366, description="Entries shown by the garden widget")

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed_environments = ["development", "testing", "production"]
        if v.lower() not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()

    @field_validator("PLANT_MEMORY_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        """Reject zone names the tz database does not know."""
        if not v:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("RECENT_ENTRIES_LIMIT", "YEAR_ENTRIES_LIMIT", "WIDGET_YEAR_LIMIT")
    @classmethod
    def validate_positive_limit(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Limits must be positive")
        return v

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def debug(self) -> bool:
        """Alias for DEBUG to allow access as settings.debug"""
        return self.DEBUG

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL

    @property
    def timezone(self) -> Optional[tzinfo]:
        """
        Calendar zone for journal dates.

        None means "the system local zone", resolved at conversion time so
        that a device zone change is picked up without restarting.
        """
        if self.PLANT_MEMORY_TIMEZONE:
            return ZoneInfo(self.PLANT_MEMORY_TIMEZONE)
        return None


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
