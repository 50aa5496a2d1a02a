from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable

Clock = Callable[[], datetime]

_MINUTE_US = 60_000_000


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Services take a ``clock`` callable defaulting to this, so tests can
    inject exact instants.
    """
    return datetime.now()


def round_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, rounded half-up."""
    micros = (end - start) // timedelta(microseconds=1)
    return (micros + _MINUTE_US // 2) // _MINUTE_US


def truncate_to_hour(value: datetime) -> datetime:
    return value.replace(minute=0, second=0, microsecond=0)
