"""Half-month pay periods used for attendance queries and payslips."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ..core.exceptions import ValidationError

_DAY_START = time(0, 0, 0)
_DAY_END = time(23, 59, 59, 999000)
FIRST_HALF_LAST_DAY = 15


def last_day_of_month(year: int, month: int) -> int:
    # "day 0" of the next month
    if month == 12:
        first_of_next = date(year + 1, 1, 1)
    else:
        first_of_next = date(year, month + 1, 1)
    return (first_of_next - timedelta(days=1)).day


@dataclass(frozen=True)
class PayPeriod:
    year: int
    month: int
    half: int
    start: datetime
    end: datetime

    @property
    def label(self) -> str:
        return "1st Half (1-15)" if self.half == 1 else "2nd Half (16-End)"

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()

    def contains(self, value: datetime) -> bool:
        return self.start <= value <= self.end

    def previous(self) -> "PayPeriod":
        if self.half == 2:
            return resolve_period(date(self.year, self.month, 1), 1)
        return resolve_period(self.start_date - timedelta(days=1), 2)

    def next(self) -> "PayPeriod":
        if self.half == 1:
            return resolve_period(date(self.year, self.month, 1), 2)
        return resolve_period(self.end_date + timedelta(days=1), 1)


def default_half_for(value: date) -> int:
    return 1 if value.day <= FIRST_HALF_LAST_DAY else 2


def resolve_period(reference_date: date, half: int) -> PayPeriod:
    if half not in (1, 2):
        raise ValidationError("half must be 1 or 2", {"half": "must be 1 or 2"})

    year, month = reference_date.year, reference_date.month
    if half == 1:
        first_day, last_day = 1, FIRST_HALF_LAST_DAY
    else:
        first_day, last_day = FIRST_HALF_LAST_DAY + 1, last_day_of_month(year, month)

    return PayPeriod(
        year=year,
        month=month,
        half=half,
        start=datetime.combine(date(year, month, first_day), _DAY_START),
        end=datetime.combine(date(year, month, last_day), _DAY_END),
    )


def current_period(today: date) -> PayPeriod:
    return resolve_period(today, default_half_for(today))


def month_range(reference_date: date) -> tuple[datetime, datetime]:
    """Whole calendar month, for the personal history view."""
    year, month = reference_date.year, reference_date.month
    return (
        datetime.combine(date(year, month, 1), _DAY_START),
        datetime.combine(date(year, month, last_day_of_month(year, month)), _DAY_END),
    )
