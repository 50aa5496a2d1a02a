from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from ...attendance.model import AttendanceRecord
from ...common.datetime_utils import round_minutes, truncate_to_hour
from ...core.constants import NIGHT_BAND_END_HOUR, NIGHT_BAND_START_HOUR, STANDARD_SHIFT_MINUTES
from .base import PayrollCalculator

_ONE_HOUR = timedelta(hours=1)


def is_night_hour(hour: int) -> bool:
    return hour >= NIGHT_BAND_START_HOUR or hour < NIGHT_BAND_END_HOUR


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rules: 8-hour shift, 22:00-06:00 night band."""

    def __init__(self, *, standard_shift_minutes: int = STANDARD_SHIFT_MINUTES):
        self._standard_shift_minutes = int(standard_shift_minutes)

    def worked_minutes(self, record: AttendanceRecord) -> int:
        """(out - in) rounded to minutes, minus breaks, not below 0."""
        if record.time_out is None:
            return 0
        return self.net_minutes(record.time_in, record.time_out, record.total_break_minutes)

    @staticmethod
    def net_minutes(time_in: datetime, time_out: datetime, break_minutes: int) -> int:
        minutes = round_minutes(time_in, time_out) - int(break_minutes or 0)
        return max(minutes, 0)

    def overtime_minutes(self, worked_minutes: int) -> int:
        return max(0, int(worked_minutes or 0) - self._standard_shift_minutes)

    def night_diff_hours(self, time_in: datetime, time_out: Optional[datetime]) -> int:
        """Whole-hour buckets whose start falls in the night band.

        Buckets start on hour boundaries at or after ``time_in``; a partial
        leading hour is never credited, while the last bucket counts in full
        even when ``time_out`` lands inside it.
        """
        if time_out is None:
            return 0

        bucket = truncate_to_hour(time_in)
        if bucket < time_in:
            bucket += _ONE_HOUR

        hours = 0
        while bucket < time_out:
            if is_night_hour(bucket.hour):
                hours += 1
            bucket += _ONE_HOUR
        return hours
