"""
Tests for the local calendar helpers.
"""
from datetime import timezone
from zoneinfo import ZoneInfo

from app.shared.utils.dates import (
    MILLIS_PER_DAY,
    current_year,
    local_date_key,
    local_noon_millis,
    local_year,
    to_local_datetime,
    whole_days_between,
)
from tests.conftest import FakeClock, utc_millis

NEW_YORK = ZoneInfo("America/New_York")
TOKYO = ZoneInfo("Asia/Tokyo")


class TestLocalDateKey:

    def test_formats_utc_date(self):
        assert local_date_key(utc_millis(2025, 3, 2, 23, 59), timezone.utc) == "2025-03-02"

    def test_follows_the_given_zone(self):
        moment = utc_millis(2025, 1, 1, 3)

        assert local_date_key(moment, timezone.utc) == "2025-01-01"
        assert local_date_key(moment, NEW_YORK) == "2024-12-31"
        assert local_year(moment, NEW_YORK) == 2024

    def test_same_local_day_shares_a_key(self):
        early = utc_millis(2025, 6, 30, 15, 1)
        late = utc_millis(2025, 7, 1, 14, 59)

        assert local_date_key(early, TOKYO) == local_date_key(late, TOKYO) == "2025-07-01"

    def test_epoch(self):
        assert local_date_key(0, timezone.utc) == "1970-01-01"

    def test_local_datetime_is_aware(self):
        moment = to_local_datetime(utc_millis(2025, 3, 2), TOKYO)

        assert moment.tzinfo is not None
        assert moment.hour == 21

    def test_system_zone_when_unset(self):
        moment = utc_millis(2025, 3, 2)

        assert local_date_key(moment) == to_local_datetime(moment).strftime("%Y-%m-%d")


class TestDayArithmetic:

    def test_whole_days_floor(self):
        start = utc_millis(2025, 3, 1)

        assert whole_days_between(start, start) == 0
        assert whole_days_between(start, start + MILLIS_PER_DAY - 1) == 0
        assert whole_days_between(start, start + MILLIS_PER_DAY) == 1
        assert whole_days_between(start, start + 40 * MILLIS_PER_DAY + 5) == 40

    def test_current_year_uses_clock(self):
        assert current_year(FakeClock(utc_millis(2031, 12, 31, 20)), timezone.utc) == 2031
        assert current_year(FakeClock(utc_millis(2031, 12, 31, 20)), TOKYO) == 2032

    def test_local_noon(self):
        assert local_noon_millis(2025, 3, 9, timezone.utc) == utc_millis(2025, 3, 9, 12)
        assert local_date_key(local_noon_millis(2025, 3, 9, NEW_YORK), NEW_YORK) == "2025-03-09"
