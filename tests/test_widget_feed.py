"""
Tests for the widget feed: latest entry, recent list, garden year with
previous-year fallback, and error-tolerant refresh.
"""
import pytest
from sqlalchemy import text

from app.modules.journal.application.queries.widget_feed import WidgetFeed
from app.modules.journal.domain.models.journal_entry import IconType
from app.shared.core.exceptions import StorageError, ValidationError
from tests.conftest import CURRENT_YEAR, utc_millis


@pytest.fixture
def widgets(app):
    return app.widgets()


class BrokenService:
    """Service stand-in whose reads fail like a locked database."""

    async def recent_entries(self, limit=None):
        raise StorageError("database is locked", operation="read")

    async def entries_for_year(self, year, limit=None):
        raise StorageError("database is locked", operation="read")


class TestWidgetReads:

    @pytest.mark.asyncio
    async def test_latest_entry(self, widgets, journal):
        assert await widgets.latest_entry() is None

        await journal.create_or_update_for_date("older", IconType.BEE, utc_millis(CURRENT_YEAR, 6, 1))
        await journal.create_or_update_for_date("newest", IconType.BIRD, utc_millis(CURRENT_YEAR, 6, 10))

        assert (await widgets.latest_entry()).text == "newest"

    @pytest.mark.asyncio
    async def test_recent_is_newest_first(self, widgets, journal):
        for day in range(1, 5):
            await journal.create_or_update_for_date(f"day {day}", IconType.SNAIL, utc_millis(CURRENT_YEAR, 5, day))

        assert [entry.text for entry in await widgets.recent(limit=3)] == ["day 4", "day 3", "day 2"]

    @pytest.mark.asyncio
    async def test_garden_year_uses_current_year(self, widgets, journal):
        await journal.create_or_update_for_date("this year", IconType.APPLE, utc_millis(CURRENT_YEAR, 2, 2))
        await journal.create_or_update_for_date("last year", IconType.APPLE, utc_millis(CURRENT_YEAR - 1, 2, 2))

        year, entries = await widgets.garden_year()

        assert year == CURRENT_YEAR
        assert [entry.text for entry in entries] == ["this year"]

    @pytest.mark.asyncio
    async def test_garden_year_falls_back_to_previous_year(self, widgets, journal):
        await journal.create_or_update_for_date("last year", IconType.CHERRY, utc_millis(CURRENT_YEAR - 1, 11, 5))

        year, entries = await widgets.garden_year()

        assert year == CURRENT_YEAR - 1
        assert [entry.text for entry in entries] == ["last year"]

    @pytest.mark.asyncio
    async def test_garden_year_with_empty_journal_stays_on_current(self, widgets):
        assert await widgets.garden_year() == (CURRENT_YEAR, [])

    @pytest.mark.asyncio
    async def test_garden_year_respects_limit(self, widgets, journal):
        for day in range(1, 6):
            await journal.create_or_update_for_date("dot", IconType.STAR, utc_millis(CURRENT_YEAR, 1, day))

        year, entries = await widgets.garden_year(limit=2)

        assert len(entries) == 2


    @pytest.mark.asyncio
    async def test_zero_limits_return_nothing(self, widgets, journal):
        await journal.create_or_update_for_date("dot", IconType.STAR, utc_millis(CURRENT_YEAR, 1, 1))

        assert await widgets.recent(limit=0) == []
        assert await widgets.garden_year(limit=0) == (CURRENT_YEAR, [])

    @pytest.mark.asyncio
    async def test_negative_limit_is_rejected(self, widgets):
        with pytest.raises(ValidationError):
            await widgets.recent(limit=-5)

class TestWidgetRefresh:

    @pytest.mark.asyncio
    async def test_refresh_collects_everything(self, widgets, journal):
        await journal.create_or_update_for_date("hi", IconType.CAT, utc_millis(CURRENT_YEAR, 6, 14))

        snapshot = await widgets.refresh()

        assert snapshot.latest_entry.text == "hi"
        assert [entry.text for entry in snapshot.recent_entries] == ["hi"]
        assert snapshot.garden_year == CURRENT_YEAR
        assert len(snapshot.garden_entries) == 1

    @pytest.mark.asyncio
    async def test_refresh_on_empty_journal(self, widgets):
        snapshot = await widgets.refresh()

        assert snapshot.latest_entry is None
        assert snapshot.recent_entries == []
        assert snapshot.garden_entries == []

    @pytest.mark.asyncio
    async def test_refresh_failure_returns_none(self, clock):
        feed = WidgetFeed(BrokenService(), clock=clock)

        assert await feed.refresh() is None

    @pytest.mark.asyncio
    async def test_refresh_survives_unreadable_row(self, app, widgets, journal):
        entry_id = await journal.create_or_update_for_date("soon broken", IconType.CAT, utc_millis(CURRENT_YEAR, 6, 14))
        async with app.sessions.get_session() as session:
            await session.execute(text("UPDATE journal_entries SET text = '' WHERE id = :id"), {"id": entry_id})

        assert await widgets.refresh() is None
