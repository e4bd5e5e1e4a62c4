# 📄 File: app/modules/journal/application/queries/garden_overview.py
# 🧭 Purpose (Layman Explanation):
# Builds everything the garden page shows for one year: the plants in order, the memories
# grouped by day with friendly labels, which years can be picked, and how long it has grown.
#
# 🧪 Purpose (Technical Summary):
# Read-model projection over JournalService. GardenBrowser holds the selected year and
# exposes a point-in-time GardenOverview plus a live (combined) query that re-emits on
# journal changes and on year selection. Deleting the last entry of a past year moves the
# selection back to the current year.
#
# 🔗 Dependencies:
# - pydantic (read-model DTOs)
# - app.modules.journal.domain (service, models)
# - app.shared.core (event bus, live queries)
# - app.shared.utils.dates (local calendar conversion)
#
# 🔄 Connected Modules / Calls From:
# - app.main (PlantMemoryApp.garden())
# - Garden UI consumers, tests

"""
Garden Overview Query

Overview Fields:
- entries: selected year's entries, oldest first (garden layout order)
- date_groups: entries grouped by local calendar day, with labels such as
  "monday, 10.27" and "October 2025"
- selected_year: year currently shown
- available_years: years with entries plus the current year, newest first
- entry_count: number of entries across all years
- days_of_growth: days since the very first entry (first day counts as 1)
"""

from datetime import tzinfo
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from app.modules.journal.domain.models.journal_entry import JournalEntry
from app.modules.journal.domain.services.journal_service import JournalService
from app.shared.core.event_bus import DomainEvent, EventBus
from app.shared.core.live_query import LiveQuery
from app.shared.utils.dates import Clock, current_year, local_date_key, now_millis, to_local_datetime
from app.shared.utils.logging import get_logger

logger = get_logger(__name__)

GARDEN_SELECTION_TOPIC = "garden_selection"

# Labels are always English, whatever the process locale
WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


class DateGroup(BaseModel):
    """Entries of one local calendar day."""

    model_config = ConfigDict(frozen=True)

    date_key: str
    date_label: str = Field(..., description='e.g. "monday, 10.27"')
    month_year: str = Field(..., description='e.g. "October 2025"')
    entries: List[JournalEntry]


class GardenOverview(BaseModel):
    """Everything the garden page renders for the selected year."""

    model_config = ConfigDict(frozen=True)

    entries: List[JournalEntry] = Field(default_factory=list)
    date_groups: List[DateGroup] = Field(default_factory=list)
    selected_year: int
    available_years: List[int] = Field(default_factory=list)
    entry_count: int = 0
    days_of_growth: int = 0


class GardenYearSelected(DomainEvent):
    """The garden was switched to another year."""


class GardenBrowser:
    """
    Garden page state: a selected year plus live access to its overview.

    The selection starts at the current year. Live subscriptions re-emit
    after every journal change and after select_year().
    """

    def __init__(
        self,
        service: JournalService,
        clock: Clock = now_millis,
        tz: Optional[tzinfo] = None,
    ):
        self._service = service
        self._clock = clock
        self._tz = tz
        self._browser_id = str(uuid4())
        self._event_bus: Optional[EventBus] = None
        self._selected_year = self.current_year()

    @property
    def selected_year(self) -> int:
        return self._selected_year

    def current_year(self) -> int:
        return current_year(self._clock, self._tz)

    async def select_year(self, year: int) -> None:
        """Show another year; open live subscriptions re-emit for it."""
        if year == self._selected_year:
            return
        logger.debug(f"Garden year selected: {year}")
        self._selected_year = year
        await self._notify_selection()

    async def snapshot(self) -> GardenOverview:
        return await self.observe().snapshot()

    def observe(self) -> LiveQuery[GardenOverview]:
        sources = [
            self._service.observe_all_entries(),
            self._service.observe_distinct_years(),
            self._service.observe_entry_count(),
            self._service.observe_days_of_growth(),
        ]
        combined = LiveQuery.combine(sources, self._build_overview, name="garden.overview")
        self._event_bus = combined.event_bus
        return LiveQuery(
            combined.snapshot,
            combined.event_bus,
            [*combined.topics, GARDEN_SELECTION_TOPIC],
            name=combined.name,
        )

    async def delete_entry(self, entry: JournalEntry) -> bool:
        """
        Delete an entry from the garden.

        When that empties the selected past year, the selection falls back
        to the current year so the page is not left blank.
        """
        deleted_year = entry.year(self._tz)
        deleted = await self._service.delete(entry)

        this_year = self.current_year()
        if deleted_year != this_year and self._selected_year == deleted_year:
            remaining = await self._service.entries_for_year(deleted_year, limit=1)
            if not remaining:
                logger.info(f"Year {deleted_year} is now empty, showing {this_year}")
                await self.select_year(this_year)

        return deleted

    # =========================================================================
    # PROJECTION
    # =========================================================================

    def _build_overview(
        self,
        entries: List[JournalEntry],
        available_years: List[int],
        entry_count: int,
        days_of_growth: int,
    ) -> GardenOverview:
        year = self._selected_year
        year_entries = [entry for entry in entries if entry.year(self._tz) == year]

        return GardenOverview(
            entries=year_entries,
            date_groups=self.group_by_date(year_entries),
            selected_year=year,
            available_years=available_years,
            entry_count=entry_count,
            days_of_growth=days_of_growth,
        )

    def group_by_date(self, entries: List[JournalEntry]) -> List[DateGroup]:
        """Group entries by local day, keeping the order in which days first appear."""
        grouped = {}
        for entry in entries:
            grouped.setdefault(local_date_key(entry.timestamp, self._tz), []).append(entry)

        groups = []
        for date_key, day_entries in grouped.items():
            moment = to_local_datetime(day_entries[0].timestamp, self._tz)
            groups.append(
                DateGroup(
                    date_key=date_key,
                    date_label=f"{WEEKDAY_NAMES[moment.weekday()]}, {moment:%m.%d}",
                    month_year=f"{MONTH_NAMES[moment.month - 1]} {moment.year}",
                    entries=day_entries,
                )
            )
        return groups

    async def _notify_selection(self) -> None:
        if self._event_bus is None:
            return
        event = GardenYearSelected(
            event_type="garden.year_selected",
            aggregate_id=self._browser_id,
            aggregate_type=GARDEN_SELECTION_TOPIC,
            metadata={"year": self._selected_year},
        )
        await self._event_bus.publish(event)
