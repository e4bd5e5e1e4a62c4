# 📄 File: app/modules/journal/domain/services/journal_service.py
# 🧭 Purpose (Layman Explanation):
# The heart of the journal: saves today's memory (or rewrites it if today already has one),
# picks which drawing of the plant to show, and tells the garden how long it has been growing.
# 🧪 Purpose (Technical Summary):
# Domain service implementing the one-entry-per-day upsert, cosmetic randomness, days of
# growth, and the snapshot and reactive read API used by the garden and widget consumers.
# 🔗 Dependencies:
# Domain models, repository interface, app.shared.utils (dates, logging), app.shared.core
# 🔄 Connected Modules / Calls From:
# Garden overview, widget feed, app.main composition root, tests

import asyncio
import random
import warnings
from contextlib import asynccontextmanager
from datetime import tzinfo
from typing import AsyncIterator, Awaitable, Dict, List, Optional, Set, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from app.shared.core.exceptions import ConflictError, NotFoundError, StorageError, ValidationError
from app.shared.core.live_query import LiveQuery
from app.shared.utils.dates import Clock, current_year, local_date_key, now_millis, whole_days_between
from app.shared.utils.logging import get_logger

from ..models.journal_entry import ICON_VARIANT_MAX, ICON_VARIANT_MIN, IconType, JournalEntry
from ..repositories.journal_repository import JournalRepository

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_RECENT_LIMIT = 50
DEFAULT_YEAR_LIMIT = 100


class JournalService:
    """
    Domain service for the one-memory-per-day journal.

    Business rules:
    - Blank memories are rejected; text is stored trimmed
    - A save for a day that already has a memory rewrites it in place:
      text and icon type are replaced, the variant is re-rolled, while the
      id, original timestamp and grid position are kept
    - A save for a new day gets a rolled variant (1-8) and grid position
    - Writes for the same day are serialized; a unique-date conflict from a
      concurrent writer turns into a rewrite of the winner's entry
    - Writes keep running when the caller is cancelled; drain() waits for them
    """

    def __init__(
        self,
        repository: JournalRepository,
        rng: Optional[random.Random] = None,
        clock: Clock = now_millis,
        tz: Optional[tzinfo] = None,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
        year_limit: int = DEFAULT_YEAR_LIMIT,
    ):
        """
        Args:
            repository: Entry store
            rng: Source for variants and grid positions (seed it in tests)
            clock: Returns "now" in epoch milliseconds
            tz: Calendar zone for date keys; None means system local
            recent_limit: Default size of recent_entries()
            year_limit: Default size of entries_for_year()
        """
        self.repository = repository
        self._random = rng or random.Random()
        self._clock = clock
        self._tz = tz
        self.recent_limit = recent_limit
        self.year_limit = year_limit
        self._date_locks: Dict[str, asyncio.Lock] = {}
        self._date_lock_users: Dict[str, int] = {}
        self._pending_writes: Set[asyncio.Task] = set()

    # =========================================================================
    # WRITES
    # =========================================================================

    async def create_or_update_for_date(
        self,
        text: str,
        icon_type: Union[IconType, str] = IconType.SIMPLE,
        timestamp: Optional[int] = None,
    ) -> int:
        """
        Save the memory for the calendar day of `timestamp` (default: now).

        Returns:
            Id of the created or rewritten entry

        Raises:
            ValidationError: If the text is blank or the icon type is unknown
            StorageError: If the store fails, or a conflicting writer could not be reconciled
        """
        cleaned = self._clean_text(text)
        icon = self._resolve_icon_type(icon_type)
        moment = self._clock() if timestamp is None else timestamp
        if moment < 0:
            raise ValidationError("Timestamp must not be negative", field="timestamp", value=moment)

        return await self._run_write(self._save_for_date(cleaned, icon, moment))

    async def create_entry(
        self,
        text: str,
        icon_type: Union[IconType, str] = IconType.SIMPLE,
        timestamp: Optional[int] = None,
    ) -> int:
        """Deprecated: use create_or_update_for_date (one memory per day)."""
        warnings.warn(
            "create_entry is deprecated, use create_or_update_for_date",
            DeprecationWarning,
            stacklevel=2,
        )
        return await self.create_or_update_for_date(text, icon_type, timestamp)

    async def update_entry(self, entry: JournalEntry) -> JournalEntry:
        """
        Store an edited entry as-is.

        Raises:
            NotFoundError: If the entry no longer exists
            ConflictError: If its timestamp was moved onto another entry's day
        """
        if entry.id is None:
            raise NotFoundError("Nothing to update, entry was never saved", resource_type="journal_entry")

        cleaned = self._clean_text(entry.text)
        edited = self._build_entry(**{**entry.model_dump(), "text": cleaned})
        return await self._run_write(self.repository.update(edited))

    async def delete(self, entry: JournalEntry) -> bool:
        """Remove an entry; deleting one that is already gone is a no-op."""
        deleted = await self._run_write(self.repository.delete(entry))
        if deleted:
            logger.log_business_event(
                "memory_removed",
                f"Removed memory {entry.id}",
                entity_id=entry.id,
                entity_type="journal_entry",
            )
        return deleted

    async def drain(self) -> int:
        """
        Wait for every write still in flight, including ones whose callers
        were cancelled.

        Returns:
            Number of writes waited for
        """
        pending = list(self._pending_writes)
        if pending:
            logger.info(f"Draining {len(pending)} pending journal write(s)")
            await asyncio.gather(*pending, return_exceptions=True)
        return len(pending)

    @property
    def pending_writes(self) -> int:
        return len(self._pending_writes)

    # =========================================================================
    # READS
    # =========================================================================

    async def get_entry_by_date(self, timestamp: int) -> Optional[JournalEntry]:
        """Entry for the calendar day containing `timestamp`, if any."""
        return await self.repository.get_by_local_date(local_date_key(timestamp, self._tz))

    async def get_entry_by_id(self, entry_id: int) -> Optional[JournalEntry]:
        return await self.repository.get_by_id(entry_id)

    def days_of_growth(self, first_timestamp: Optional[int]) -> int:
        """
        Days the garden has been growing, counting the first day as day 1.

        0 when there is no first entry. A first entry dated in the future
        also counts as 0.
        """
        if first_timestamp is None:
            return 0
        return max(whole_days_between(first_timestamp, self._clock()) + 1, 0)

    async def recent_entries(self, limit: Optional[int] = None) -> List[JournalEntry]:
        """Newest entries first; limit=0 yields an empty list."""
        limit = self._check_limit(self.recent_limit if limit is None else limit)
        return await self.repository.get_recent(limit)

    async def entries_for_year(self, year: int, limit: Optional[int] = None) -> List[JournalEntry]:
        limit = self._check_limit(self.year_limit if limit is None else limit)
        return await self.repository.get_by_year(year, limit)

    async def available_years(self) -> List[int]:
        """Years with entries plus the current year, newest first."""
        return self._with_current_year(await self.repository.distinct_local_years())

    def current_year(self) -> int:
        return current_year(self._clock, self._tz)

    # =========================================================================
    # REACTIVE READS
    # =========================================================================

    def observe_all_entries(self) -> LiveQuery[List[JournalEntry]]:
        """All entries in garden order (oldest first)."""
        return self.repository.observe_all_ascending()

    def observe_entries_for_year(self, year: int) -> LiveQuery[List[JournalEntry]]:
        return self.repository.observe_by_year(year)

    def observe_distinct_years(self) -> LiveQuery[List[int]]:
        return self.repository.observe_distinct_local_years().map(
            self._with_current_year, name="journal.available_years"
        )

    def observe_entry_count(self) -> LiveQuery[int]:
        return self.repository.observe_count()

    def observe_first_entry_timestamp(self) -> LiveQuery[Optional[int]]:
        return self.repository.observe_min_timestamp()

    def observe_days_of_growth(self) -> LiveQuery[int]:
        return self.repository.observe_min_timestamp().map(
            self.days_of_growth, name="journal.days_of_growth"
        )

    # =========================================================================
    # UPSERT INTERNALS
    # =========================================================================

    async def _save_for_date(self, text: str, icon_type: IconType, timestamp: int) -> int:
        date_key = local_date_key(timestamp, self._tz)

        async with self._date_lock(date_key):
            existing = await self.repository.get_by_local_date(date_key)
            if existing is not None:
                return await self._rewrite(existing, text, icon_type)

            entry = self._build_entry(
                text=text,
                timestamp=timestamp,
                icon_type=icon_type,
                icon_variant=self._roll_variant(),
                grid_x=self._random.random(),
                grid_y=self._random.random(),
            )
            try:
                entry_id = await self.repository.insert(entry)
            except ConflictError:
                logger.warning(
                    f"Another writer saved {date_key} first, rewriting its entry",
                    extra={"date_key": date_key}
                )
                return await self._reconcile_conflict(date_key, entry)

            logger.log_business_event(
                "memory_planted",
                f"Planted memory for {date_key}",
                entity_id=entry_id,
                entity_type="journal_entry",
                extra={"date_key": date_key, "icon_type": icon_type.value},
            )
            return entry_id

    async def _reconcile_conflict(self, date_key: str, entry: JournalEntry) -> int:
        winner = await self.repository.get_by_local_date(date_key)
        if winner is not None:
            return await self._rewrite(winner, entry.text, entry.icon_type)

        # The winning entry was deleted in between; one more insert attempt
        try:
            return await self.repository.insert(entry)
        except ConflictError as e:
            logger.error(f"Could not reconcile concurrent saves for {date_key}")
            raise StorageError(
                f"Concurrent saves for {date_key} could not be reconciled",
                operation="upsert",
                table="journal_entries",
            ) from e

    async def _rewrite(self, existing: JournalEntry, text: str, icon_type: IconType) -> int:
        rewritten = existing.model_copy(
            update={
                "text": text,
                "icon_type": icon_type,
                "icon_variant": self._roll_variant(),
            }
        )
        try:
            await self.repository.update(rewritten)
        except ConflictError as e:
            logger.error(f"Rewrite of memory {existing.id} collided with another day's entry")
            raise StorageError(
                f"Rewrite of entry {existing.id} conflicts with another entry",
                operation="upsert",
                table="journal_entries",
            ) from e
        logger.log_business_event(
            "memory_rewritten",
            f"Rewrote memory {existing.id}",
            entity_id=existing.id,
            entity_type="journal_entry",
            extra={"icon_type": icon_type.value},
        )
        return existing.id

    @asynccontextmanager
    async def _date_lock(self, date_key: str) -> AsyncIterator[None]:
        """Serialize writers for one day; the lock is dropped once nobody holds or awaits it."""
        lock = self._date_locks.get(date_key)
        if lock is None:
            lock = self._date_locks[date_key] = asyncio.Lock()
        self._date_lock_users[date_key] = self._date_lock_users.get(date_key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._date_lock_users[date_key] -= 1
            if not self._date_lock_users[date_key]:
                del self._date_lock_users[date_key]
                del self._date_locks[date_key]

    @property
    def active_date_locks(self) -> int:
        return len(self._date_locks)

    def _roll_variant(self) -> int:
        return self._random.randint(ICON_VARIANT_MIN, ICON_VARIANT_MAX)

    # =========================================================================
    # HELPERS
    # =========================================================================

    async def _run_write(self, write: Awaitable[T]) -> T:
        task = asyncio.ensure_future(write)
        self._pending_writes.add(task)
        task.add_done_callback(self._write_finished)
        return await asyncio.shield(task)

    def _write_finished(self, task: asyncio.Task) -> None:
        self._pending_writes.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.debug(f"Journal write finished with {type(error).__name__}: {error}")

    def _with_current_year(self, years: List[int]) -> List[int]:
        return sorted({*years, self.current_year()}, reverse=True)

    @staticmethod
    def _check_limit(limit: int) -> int:
        if limit < 0:
            raise ValidationError("Limit must not be negative", field="limit", value=limit)
        return limit

    @staticmethod
    def _clean_text(text: str) -> str:
        cleaned = (text or "").strip()
        if not cleaned:
            raise ValidationError("Memory text must not be blank", field="text", constraint="not_blank")
        return cleaned

    @staticmethod
    def _resolve_icon_type(icon_type: Union[IconType, str]) -> IconType:
        if isinstance(icon_type, IconType):
            return icon_type
        try:
            return IconType(str(icon_type).lower())
        except ValueError:
            raise ValidationError(
                f"Unknown icon type: {icon_type}",
                field="icon_type",
                value=icon_type,
            )

    @staticmethod
    def _build_entry(**fields) -> JournalEntry:
        try:
            return JournalEntry(**fields)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ()))
            raise ValidationError(
                f"Invalid journal entry: {first.get('msg')}",
                field=field or None,
                details={"errors": e.errors(include_url=False, include_context=False)},
            ) from e
