"""
Time helpers for the lottery calendar.
"""

import time
from datetime import date, datetime
from zoneinfo import ZoneInfo

from config import LOTTERY_TIMEZONE


def now_ts() -> int:
    """Current unix timestamp in seconds."""
    return int(time.time())


def today_iso(tz_name: str = LOTTERY_TIMEZONE) -> str:
    """Today's date (YYYY-MM-DD) in the lottery time zone."""
    return datetime.now(ZoneInfo(tz_name)).date().isoformat()


def parse_draw_date(value: str) -> str:
    """
    Normalize a draw date to YYYY-MM-DD.

    Raises:
        ValueError: if value is not an ISO calendar date
    """
    return date.fromisoformat(value.strip()).isoformat()
