# 📄 File: app/modules/journal/application/queries/widget_feed.py
# 🧭 Purpose (Layman Explanation):
# Gathers what the home-screen widgets show: the latest memory, a handful of recent ones,
# and this year's garden (or last year's, early in January before anything was planted).
#
# 🧪 Purpose (Technical Summary):
# Snapshot-only read projection over JournalService for periodic widget refreshes.
# refresh() is failure tolerant: journal errors are logged and reported as None so the
# scheduler simply tries again on the next cycle.
#
# 🔗 Dependencies:
# - pydantic (snapshot DTO)
# - app.modules.journal.domain (service, models)
# - app.shared.core.exceptions, app.shared.utils (dates, logging)
#
# 🔄 Connected Modules / Calls From:
# - app.main (PlantMemoryApp.widgets())
# - Widget refresh workers, tests

from datetime import datetime, timezone, tzinfo
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from app.modules.journal.domain.models.journal_entry import JournalEntry
from app.modules.journal.domain.services.journal_service import JournalService
from app.shared.core.exceptions import PlantMemoryException
from app.shared.utils.dates import Clock, current_year, now_millis
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_WIDGET_YEAR_LIMIT = 366
DEFAULT_WIDGET_RECENT_LIMIT = 50


class WidgetSnapshot(BaseModel):
    """Data for one widget refresh cycle."""

    model_config = ConfigDict(frozen=True)

    latest_entry: Optional[JournalEntry] = None
    recent_entries: List[JournalEntry] = Field(default_factory=list)
    garden_year: int
    garden_entries: List[JournalEntry] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class WidgetFeed:
    """Point-in-time reads for widgets; never holds a live subscription."""

    def __init__(
        self,
        service: JournalService,
        clock: Clock = now_millis,
        tz: Optional[tzinfo] = None,
        year_limit: int = DEFAULT_WIDGET_YEAR_LIMIT,
        recent_limit: int = DEFAULT_WIDGET_RECENT_LIMIT,
    ):
        self._service = service
        self._clock = clock
        self._tz = tz
        self.year_limit = year_limit
        self.recent_limit = recent_limit

    async def latest_entry(self) -> Optional[JournalEntry]:
        entries = await self._service.recent_entries(limit=1)
        return entries[0] if entries else None

    async def recent(self, limit: Optional[int] = None) -> List[JournalEntry]:
        return await self._service.recent_entries(limit=self.recent_limit if limit is None else limit)

    async def garden_year(self, limit: Optional[int] = None) -> Tuple[int, List[JournalEntry]]:
        """
        Year to draw in the garden widget and its entries.

        Uses the current year; when it has no entries yet, shows the
        previous year instead (if that one has any).
        """
        limit = self.year_limit if limit is None else limit
        year = current_year(self._clock, self._tz)
        entries = await self._service.entries_for_year(year, limit=limit)

        if not entries:
            previous = await self._service.entries_for_year(year - 1, limit=limit)
            if previous:
                logger.debug(f"No entries in {year} yet, widget shows {year - 1}")
                return year - 1, previous

        return year, entries

    async def refresh(self) -> Optional[WidgetSnapshot]:
        """
        Collect everything the widgets need.

        Returns:
            WidgetSnapshot, or None when the journal could not be read
        """
        try:
            recent = await self.recent()
            year, garden_entries = await self.garden_year()
        except PlantMemoryException as e:
            logger.error(
                f"Widget refresh failed: {e.message}",
                extra={"error_code": e.error_code, "details": e.details}
            )
            return None

        return WidgetSnapshot(
            latest_entry=recent[0] if recent else None,
            recent_entries=recent,
            garden_year=year,
            garden_entries=garden_entries,
        )
