# 📄 File: app/modules/journal/infrastructure/database/journal_repository_impl.py
# 🧭 Purpose (Layman Explanation):
# This file does the actual reading and writing of memories in the local database:
# saving new ones, rewriting a day's memory, removing one, and listing them by year.
#
# 🧪 Purpose (Technical Summary):
# Concrete implementation of JournalRepository using SQLAlchemy's async ORM. Maps
# between JournalEntry and JournalEntryModel, derives the local_date key on write,
# publishes domain events after commit, and builds live queries over its reads.
#
# 🔗 Dependencies:
# - app.modules.journal.domain (models, repository interface, events)
# - app.modules.journal.infrastructure.database.models (SQLAlchemy model)
# - app.shared.infrastructure.database.session (session manager)
# - app.shared.core (event bus, live queries, exceptions)
#
# 🔄 Connected Modules / Calls From:
# - app.modules.journal.domain.services.journal_service
# - app.main (composition root)

"""
Journal Repository Implementation

Features:
- Async database operations, one session per call
- Domain model to SQLAlchemy model mapping
- local_date derivation with a single, configurable calendar zone
- Unique-date violations surfaced as ConflictError
- Change events published only after a successful commit
"""

import time
from contextlib import contextmanager
from datetime import tzinfo
from functools import partial
from typing import Iterator, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import desc, distinct, func, select

from app.modules.journal.domain.events.journal_events import (
    JOURNAL_ENTRIES_TOPIC,
    JournalEntryCreated,
    JournalEntryDeleted,
    JournalEntryEvent,
    JournalEntryUpdated,
)
from app.modules.journal.domain.models.journal_entry import IconType, JournalEntry
from app.modules.journal.domain.repositories.journal_repository import JournalRepository
from app.modules.journal.infrastructure.database.models import JournalEntryModel
from app.shared.core.event_bus import EventBus
from app.shared.core.exceptions import ConflictError, NotFoundError, StorageError
from app.shared.core.live_query import LiveQuery
from app.shared.infrastructure.database.session import DatabaseSessionManager
from app.shared.utils.dates import local_date_key
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

TABLE = JournalEntryModel.__tablename__


class JournalRepositoryImpl(JournalRepository):
    """
    SQLAlchemy implementation of the JournalRepository interface.

    Every write commits in its own session and then publishes a journal
    event, which is what drives the live queries handed out by observe_*.
    """

    def __init__(
        self,
        session_manager: DatabaseSessionManager,
        event_bus: EventBus,
        tz: Optional[tzinfo] = None,
    ):
        """
        Initialize the journal repository.

        Args:
            session_manager: Provides committed and read-only sessions
            event_bus: Bus that change events are published on
            tz: Calendar zone for local_date keys; None means system local
        """
        self._sessions = session_manager
        self._event_bus = event_bus
        self._tz = tz

    # =========================================================================
    # WRITES
    # =========================================================================

    async def insert(self, entry: JournalEntry) -> int:
        date_key = local_date_key(entry.timestamp, self._tz)
        model = self._domain_to_model(entry, date_key)
        model.id = None

        try:
            with self._timed("INSERT") as stats:
                async with self._sessions.get_session() as session:
                    session.add(model)
                    await session.flush()  # Get the generated ID
                stats["rows_affected"] = 1
        except ConflictError as e:
            logger.warning(
                f"Insert rejected, an entry already exists for {date_key}",
                extra={"date_key": date_key}
            )
            raise ConflictError(
                f"An entry already exists for {date_key}",
                resource_type="journal_entry",
                field="local_date",
                value=date_key,
            ) from e

        logger.info(f"Created journal entry {model.id} for {date_key}")
        stored = self._model_to_domain(model)
        await self._publish(JournalEntryCreated.from_entry(stored, date_key))
        return stored.id

    async def update(self, entry: JournalEntry) -> JournalEntry:
        if not entry.is_persisted:
            raise NotFoundError("Cannot update an entry without an id", resource_type="journal_entry")

        date_key = local_date_key(entry.timestamp, self._tz)

        try:
            with self._timed("UPDATE") as stats:
                async with self._sessions.get_session() as session:
                    model = await session.get(JournalEntryModel, entry.id)
                    if model is None:
                        raise NotFoundError(
                            f"Journal entry not found: {entry.id}",
                            resource_type="journal_entry",
                            resource_id=entry.id,
                        )
                    # Same timestamp keeps the stored day, whatever the zone is now
                    if model.timestamp == entry.timestamp:
                        date_key = model.local_date
                    self._update_model_from_domain(model, entry, date_key)
                stats["rows_affected"] = 1
        except ConflictError as e:
            logger.warning(f"Update of entry {entry.id} collides with another entry on {date_key}")
            raise ConflictError(
                f"Another entry already exists for {date_key}",
                resource_type="journal_entry",
                field="local_date",
                value=date_key,
            ) from e

        logger.info(f"Updated journal entry {entry.id}")
        stored = self._model_to_domain(model)
        await self._publish(JournalEntryUpdated.from_entry(stored, date_key))
        return stored

    async def delete(self, entry: JournalEntry) -> bool:
        if not entry.is_persisted:
            logger.debug("Delete skipped, entry was never persisted")
            return False

        with self._timed("DELETE") as stats:
            async with self._sessions.get_session() as session:
                model = await session.get(JournalEntryModel, entry.id)
                if model is None:
                    stats["rows_affected"] = 0
                else:
                    date_key = model.local_date
                    await session.delete(model)
                    stats["rows_affected"] = 1

        if model is None:
            logger.debug(f"Journal entry not found for deletion: {entry.id}")
            return False

        logger.info(f"Deleted journal entry {entry.id}")
        await self._publish(JournalEntryDeleted.from_entry(entry, date_key))
        return True

    # =========================================================================
    # POINT LOOKUPS
    # =========================================================================

    async def get_by_id(self, entry_id: int) -> Optional[JournalEntry]:
        with self._timed("SELECT by id"):
            async with self._sessions.get_read_only_session() as session:
                model = await session.get(JournalEntryModel, entry_id)

        return self._model_to_domain(model) if model else None

    async def get_by_local_date(self, date_key: str) -> Optional[JournalEntry]:
        stmt = (
            select(JournalEntryModel)
            .where(JournalEntryModel.local_date == date_key)
            .order_by(JournalEntryModel.id)
            .limit(1)
        )
        with self._timed("SELECT by local_date"):
            async with self._sessions.get_read_only_session() as session:
                result = await session.execute(stmt)
                model = result.scalars().first()

        return self._model_to_domain(model) if model else None

    # =========================================================================
    # SNAPSHOT QUERIES
    # =========================================================================

    async def get_all_ascending(self) -> List[JournalEntry]:
        stmt = select(JournalEntryModel).order_by(JournalEntryModel.timestamp, JournalEntryModel.id)
        return await self._fetch_entries(stmt, "SELECT all asc")

    async def get_all_descending(self) -> List[JournalEntry]:
        stmt = select(JournalEntryModel).order_by(
            desc(JournalEntryModel.timestamp), desc(JournalEntryModel.id)
        )
        return await self._fetch_entries(stmt, "SELECT all desc")

    async def get_by_year(self, year: int, limit: Optional[int] = None) -> List[JournalEntry]:
        stmt = (
            select(JournalEntryModel)
            .where(JournalEntryModel.local_date.startswith(f"{year:04d}-"))
            .order_by(desc(JournalEntryModel.timestamp), desc(JournalEntryModel.id))
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self._fetch_entries(stmt, "SELECT by year")

    async def get_recent(self, limit: int) -> List[JournalEntry]:
        stmt = (
            select(JournalEntryModel)
            .order_by(desc(JournalEntryModel.timestamp), desc(JournalEntryModel.id))
            .limit(limit)
        )
        return await self._fetch_entries(stmt, "SELECT recent")

    async def count(self) -> int:
        stmt = select(func.count()).select_from(JournalEntryModel)
        with self._timed("SELECT count"):
            async with self._sessions.get_read_only_session() as session:
                result = await session.execute(stmt)
                return int(result.scalar_one())

    async def min_timestamp(self) -> Optional[int]:
        stmt = select(func.min(JournalEntryModel.timestamp))
        with self._timed("SELECT min timestamp"):
            async with self._sessions.get_read_only_session() as session:
                result = await session.execute(stmt)
                value = result.scalar_one_or_none()

        return int(value) if value is not None else None

    async def distinct_local_years(self) -> List[int]:
        year_column = func.substr(JournalEntryModel.local_date, 1, 4)
        stmt = select(distinct(year_column)).order_by(desc(year_column))
        with self._timed("SELECT distinct years"):
            async with self._sessions.get_read_only_session() as session:
                result = await session.execute(stmt)
                years = result.scalars().all()

        return [int(year) for year in years]

    # =========================================================================
    # LIVE QUERIES
    # =========================================================================

    def observe_all_ascending(self) -> LiveQuery[List[JournalEntry]]:
        return self._live(self.get_all_ascending, "journal.all_ascending")

    def observe_all_descending(self) -> LiveQuery[List[JournalEntry]]:
        return self._live(self.get_all_descending, "journal.all_descending")

    def observe_by_year(self, year: int) -> LiveQuery[List[JournalEntry]]:
        return self._live(partial(self.get_by_year, year), f"journal.year_{year}")

    def observe_count(self) -> LiveQuery[int]:
        return self._live(self.count, "journal.count")

    def observe_min_timestamp(self) -> LiveQuery[Optional[int]]:
        return self._live(self.min_timestamp, "journal.min_timestamp")

    def observe_distinct_local_years(self) -> LiveQuery[List[int]]:
        return self._live(self.distinct_local_years, "journal.distinct_years")

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _live(self, fetch, name: str) -> LiveQuery:
        return LiveQuery(fetch, self._event_bus, [JOURNAL_ENTRIES_TOPIC], name=name)

    async def _fetch_entries(self, stmt, query_type: str) -> List[JournalEntry]:
        with self._timed(query_type) as stats:
            async with self._sessions.get_read_only_session() as session:
                result = await session.execute(stmt)
                models = result.scalars().all()
            stats["rows_affected"] = len(models)

        return [self._model_to_domain(model) for model in models]

    async def _publish(self, event: JournalEntryEvent) -> None:
        await self._event_bus.publish(event)

    @contextmanager
    def _timed(self, query_type: str) -> Iterator[dict]:
        stats: dict = {}
        started = time.perf_counter()
        try:
            yield stats
        finally:
            logger.performance.log_database_query(
                query_type=query_type,
                table=TABLE,
                duration_ms=(time.perf_counter() - started) * 1000,
                rows_affected=stats.get("rows_affected"),
            )

    @staticmethod
    def _domain_to_model(entry: JournalEntry, date_key: str) -> JournalEntryModel:
        return JournalEntryModel(
            id=entry.id,
            text=entry.text,
            timestamp=entry.timestamp,
            local_date=date_key,
            icon_type=entry.icon_type.value,
            icon_variant=entry.icon_variant,
            grid_x=entry.grid_x,
            grid_y=entry.grid_y,
        )

    @staticmethod
    def _update_model_from_domain(model: JournalEntryModel, entry: JournalEntry, date_key: str) -> None:
        model.text = entry.text
        model.timestamp = entry.timestamp
        model.local_date = date_key
        model.icon_type = entry.icon_type.value
        model.icon_variant = entry.icon_variant
        model.grid_x = entry.grid_x
        model.grid_y = entry.grid_y

    @staticmethod
    def _model_to_domain(model: JournalEntryModel) -> JournalEntry:
        try:
            return JournalEntry(
                id=model.id,
                text=model.text,
                timestamp=model.timestamp,
                icon_type=IconType.from_value(model.icon_type),
                icon_variant=model.icon_variant,
                grid_x=model.grid_x,
                grid_y=model.grid_y,
            )
        except PydanticValidationError as e:
            logger.error(f"Stored journal entry {model.id} is invalid: {e.error_count()} error(s)")
            raise StorageError(
                f"Stored journal entry {model.id} could not be read",
                operation="read",
                table=TABLE,
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e
