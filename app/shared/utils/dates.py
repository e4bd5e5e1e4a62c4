# 📄 File: app/shared/utils/dates.py

# 🧭 Purpose (Layman Explanation):
# Turns the raw moment a memory was saved into "which day on the calendar" it belongs to,
# the same way everywhere, so a memory saved late at night never jumps to the next day.

# 🧪 Purpose (Technical Summary):
# Epoch-millisecond helpers: local calendar date keys (YYYY-MM-DD), local years,
# whole-day arithmetic and a wall clock, all against one configurable tzinfo.

# 🔗 Dependencies:
# - datetime: Timezone conversion and formatting
# - time: Wall clock in milliseconds

# 🔄 Connected Modules / Calls From:
# Journal repository (local_date column and year filters), journal service
# (date keys, days of growth), garden overview and widget feed (current year, labels)

import time
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional

MILLIS_PER_DAY = 24 * 60 * 60 * 1000

DATE_KEY_FORMAT = "%Y-%m-%d"

# Clock returning epoch milliseconds; injected so tests can pin "now"
Clock = Callable[[], int]


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def to_local_datetime(timestamp_ms: int, tz: Optional[tzinfo] = None) -> datetime:
    """
    Convert an epoch-millisecond timestamp to an aware local datetime.

    Args:
        timestamp_ms: Epoch milliseconds (UTC based)
        tz: Target zone; None uses the system local zone

    Returns:
        Timezone-aware datetime in the target zone
    """
    utc_moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return utc_moment.astimezone(tz)


def local_date_key(timestamp_ms: int, tz: Optional[tzinfo] = None) -> str:
    """
    Local calendar date (YYYY-MM-DD) a timestamp belongs to.

    This is the uniqueness key for journal entries; every write and lookup
    must derive it through this function.
    """
    return to_local_datetime(timestamp_ms, tz).strftime(DATE_KEY_FORMAT)


def local_year(timestamp_ms: int, tz: Optional[tzinfo] = None) -> int:
    return to_local_datetime(timestamp_ms, tz).year


def current_year(clock: Clock = now_millis, tz: Optional[tzinfo] = None) -> int:
    return local_year(clock(), tz)


def whole_days_between(start_ms: int, end_ms: int) -> int:
    """Number of complete 24h periods from start to end (floor division)."""
    return (end_ms - start_ms) // MILLIS_PER_DAY


def local_noon_millis(year: int, month: int, day: int, tz: Optional[tzinfo] = None) -> int:
    """
    Epoch milliseconds of 12:00 local time on a date.

    Noon keeps a timestamp on its calendar day across DST shifts, which is
    how the entry screen picks "today".
    """
    naive = datetime(year, month, day, 12, 0, 0)
    aware = naive.replace(tzinfo=tz) if tz is not None else naive.astimezone()
    return int(aware.timestamp() * 1000)
