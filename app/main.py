# 📄 File: app/main.py
#
# 🧭 Purpose (Layman Explanation):
# The main control center that starts up the Plant Memory journal: it opens the database,
# connects the journal to it, and hands out the garden and widget views that read from it.
#
# 🧪 Purpose (Technical Summary):
# Composition root. PlantMemoryApp explicitly builds the engine, session manager, event bus,
# repository and service from Settings (no global store handle), supports async context
# management, and drains pending writes before disposing the engine on close.
#
# 🔗 Dependencies:
# - app.shared.config.settings
# - app.shared.infrastructure.database (connection, session)
# - app.shared.core.event_bus, app.shared.utils.logging
# - app.modules.journal (repository, service, read projections)
#
# 🔄 Connected Modules / Calls From:
# - UI shells and widget refresh workers embedding the journal
# - tests/conftest.py

import random
from typing import Optional

from app.modules.journal.application.queries.garden_overview import GardenBrowser
from app.modules.journal.application.queries.widget_feed import WidgetFeed
from app.modules.journal.domain.services.journal_service import JournalService
from app.modules.journal.infrastructure.database.journal_repository_impl import JournalRepositoryImpl
from app.shared.config.settings import Settings, get_settings
from app.shared.core.event_bus import EventBus
from app.shared.infrastructure.database.connection import DatabaseConnectionManager
from app.shared.infrastructure.database.session import DatabaseSessionManager
from app.shared.utils.dates import Clock, now_millis
from app.shared.utils.logging import get_logger, log_shutdown_event, log_startup_event, setup_logging

logger = get_logger(__name__)


class PlantMemoryApp:
    """
    Wires the journal together and owns its resources.

    Usage:
        async with await PlantMemoryApp.create() as app:
            await app.journal.create_or_update_for_date("first sprout", IconType.SEEDLING)
    """

    def __init__(
        self,
        settings: Settings,
        connection: DatabaseConnectionManager,
        sessions: DatabaseSessionManager,
        event_bus: EventBus,
        repository: JournalRepositoryImpl,
        journal: JournalService,
        clock: Clock = now_millis,
    ):
        self.settings = settings
        self.connection = connection
        self.sessions = sessions
        self.event_bus = event_bus
        self.repository = repository
        self.journal = journal
        self._clock = clock
        self._closed = False

    @classmethod
    async def create(
        cls,
        settings: Optional[Settings] = None,
        clock: Clock = now_millis,
        rng: Optional[random.Random] = None,
        configure_logging: bool = True,
    ) -> "PlantMemoryApp":
        """
        Build a ready-to-use application.

        Args:
            settings: Configuration; defaults to get_settings()
            clock: Epoch-millisecond clock shared by every component
            rng: Random source for icon variants and grid positions
            configure_logging: Run setup_logging() from the settings

        Raises:
            StorageError: If the database cannot be opened or initialized
        """
        settings = settings or get_settings()
        if configure_logging:
            setup_logging(settings)

        logger.info(f"🌱 {settings.APP_NAME} starting up...")
        tz = settings.timezone

        connection = DatabaseConnectionManager(settings)
        engine = await connection.initialize(create_tables=True)
        logger.info("✅ Database connection initialized")

        sessions = DatabaseSessionManager(engine)
        event_bus = EventBus()
        repository = JournalRepositoryImpl(sessions, event_bus, tz=tz)
        journal = JournalService(
            repository,
            rng=rng,
            clock=clock,
            tz=tz,
            recent_limit=settings.RECENT_ENTRIES_LIMIT,
            year_limit=settings.YEAR_ENTRIES_LIMIT,
        )

        log_startup_event(
            settings.APP_NAME,
            settings.APP_VERSION,
            extra={"environment": settings.ENVIRONMENT, "timezone": settings.PLANT_MEMORY_TIMEZONE},
        )
        logger.info(f"✅ {settings.APP_NAME} startup complete")
        return cls(settings, connection, sessions, event_bus, repository, journal, clock=clock)

    def garden(self) -> GardenBrowser:
        """A new garden page state, starting at the current year."""
        return GardenBrowser(self.journal, clock=self._clock, tz=self.settings.timezone)

    def widgets(self) -> WidgetFeed:
        return WidgetFeed(
            self.journal,
            clock=self._clock,
            tz=self.settings.timezone,
            year_limit=self.settings.WIDGET_YEAR_LIMIT,
            recent_limit=self.settings.RECENT_ENTRIES_LIMIT,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    async def close(self) -> None:
        """Finish in-flight writes, then release the database."""
        if self._closed:
            return
        self._closed = True

        logger.info(f"🔄 {self.settings.APP_NAME} shutting down...")
        drained = await self.journal.drain()
        if drained:
            logger.info(f"✅ {drained} pending write(s) completed")

        await self.connection.close()
        logger.info("✅ Database connections closed")
        log_shutdown_event(self.settings.APP_NAME, extra={"event_bus": self.event_bus.get_stats()})

    async def __aenter__(self) -> "PlantMemoryApp":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
