"""
Tests for the garden overview projection (selected year, day groups,
live re-emission and the delete fallback).
"""
from datetime import timezone

import pytest

from app.modules.journal.application.queries.garden_overview import GardenBrowser
from app.modules.journal.domain.models.journal_entry import IconType, JournalEntry
from tests.conftest import CURRENT_YEAR, FakeClock, utc_millis


@pytest.fixture
def garden(app):
    return app.garden()


async def plant(journal, text, year, month, day, icon=IconType.SUNFLOWER):
    entry_id = await journal.create_or_update_for_date(text, icon, utc_millis(year, month, day))
    return await journal.get_entry_by_id(entry_id)


class TestGardenSnapshot:

    @pytest.mark.asyncio
    async def test_empty_garden(self, garden):
        overview = await garden.snapshot()

        assert overview.selected_year == CURRENT_YEAR
        assert overview.entries == []
        assert overview.date_groups == []
        assert overview.available_years == [CURRENT_YEAR]
        assert overview.entry_count == 0
        assert overview.days_of_growth == 0

    @pytest.mark.asyncio
    async def test_selected_year_entries_oldest_first(self, garden, journal):
        await plant(journal, "june", CURRENT_YEAR, 6, 1)
        await plant(journal, "january", CURRENT_YEAR, 1, 20)
        await plant(journal, "last year", 2025, 12, 31)

        overview = await garden.snapshot()

        assert [entry.text for entry in overview.entries] == ["january", "june"]
        assert overview.available_years == [CURRENT_YEAR, 2025]
        assert overview.entry_count == 3

    @pytest.mark.asyncio
    async def test_date_groups_have_labels(self, garden, journal):
        await plant(journal, "monday memory", CURRENT_YEAR, 6, 1)

        overview = await garden.snapshot()

        assert len(overview.date_groups) == 1
        group = overview.date_groups[0]
        assert group.date_key == "2026-06-01"
        assert group.date_label == "monday, 06.01"
        assert group.month_year == "June 2026"
        assert [entry.text for entry in group.entries] == ["monday memory"]

    @pytest.mark.asyncio
    async def test_days_of_growth_counts_from_first_entry(self, garden, journal):
        await plant(journal, "start", CURRENT_YEAR, 6, 13)

        assert (await garden.snapshot()).days_of_growth == 3

    @pytest.mark.asyncio
    async def test_select_year(self, garden, journal):
        await plant(journal, "old", 2024, 4, 2)

        await garden.select_year(2024)
        overview = await garden.snapshot()

        assert garden.selected_year == 2024
        assert overview.selected_year == 2024
        assert [entry.text for entry in overview.entries] == ["old"]


class TestGardenLive:

    @pytest.mark.asyncio
    async def test_reemits_on_journal_change(self, garden, journal):
        async with garden.observe().subscribe() as overviews:
            assert (await overviews.next(timeout=2)).entry_count == 0

            await plant(journal, "new", CURRENT_YEAR, 3, 3)
            overview = await overviews.next(timeout=2)

        assert overview.entry_count == 1
        assert [entry.text for entry in overview.entries] == ["new"]

    @pytest.mark.asyncio
    async def test_reemits_on_year_selection(self, garden, journal):
        await plant(journal, "old", 2024, 4, 2)

        async with garden.observe().subscribe() as overviews:
            assert (await overviews.next(timeout=2)).selected_year == CURRENT_YEAR

            await garden.select_year(2024)
            overview = await overviews.next(timeout=2)

        assert overview.selected_year == 2024
        assert [entry.text for entry in overview.entries] == ["old"]

    @pytest.mark.asyncio
    async def test_selection_in_one_browser_leaves_others_alone(self, app, journal):
        first, second = app.garden(), app.garden()
        await plant(journal, "old", 2024, 4, 2)

        await first.select_year(2024)

        assert first.selected_year == 2024
        assert second.selected_year == CURRENT_YEAR
        assert (await second.snapshot()).entries == []


class TestGardenDelete:

    @pytest.mark.asyncio
    async def test_emptying_a_past_year_falls_back_to_current(self, garden, journal):
        entry = await plant(journal, "only one", 2024, 4, 2)
        await garden.select_year(2024)

        assert await garden.delete_entry(entry) is True

        assert garden.selected_year == CURRENT_YEAR

    @pytest.mark.asyncio
    async def test_past_year_with_entries_left_stays_selected(self, garden, journal):
        entry = await plant(journal, "first", 2024, 4, 2)
        await plant(journal, "second", 2024, 4, 3)
        await garden.select_year(2024)

        await garden.delete_entry(entry)

        assert garden.selected_year == 2024
        assert [e.text for e in (await garden.snapshot()).entries] == ["second"]

    @pytest.mark.asyncio
    async def test_emptying_current_year_keeps_selection(self, garden, journal):
        entry = await plant(journal, "today", CURRENT_YEAR, 6, 15)

        await garden.delete_entry(entry)

        assert garden.selected_year == CURRENT_YEAR
        assert (await garden.snapshot()).entry_count == 0

    @pytest.mark.asyncio
    async def test_fallback_is_seen_by_live_subscribers(self, garden, journal):
        entry = await plant(journal, "only one", 2024, 4, 2)
        await garden.select_year(2024)

        async with garden.observe().subscribe() as overviews:
            assert (await overviews.next(timeout=2)).selected_year == 2024

            await garden.delete_entry(entry)
            overview = await overviews.next(timeout=2)

        assert overview.selected_year == CURRENT_YEAR
        assert overview.entry_count == 0


class TestGrouping:

    def test_groups_keep_first_appearance_order(self):
        garden = GardenBrowser(service=None, clock=FakeClock(), tz=timezone.utc)

        entries = [
            JournalEntry(id=1, text="a", timestamp=utc_millis(2025, 10, 27, 8)),
            JournalEntry(id=2, text="b", timestamp=utc_millis(2025, 10, 27, 20)),
            JournalEntry(id=3, text="c", timestamp=utc_millis(2025, 10, 28)),
        ]

        groups = garden.group_by_date(entries)

        assert [group.date_label for group in groups] == ["monday, 10.27", "tuesday, 10.28"]
        assert [len(group.entries) for group in groups] == [2, 1]
        assert groups[0].month_year == "October 2025"
