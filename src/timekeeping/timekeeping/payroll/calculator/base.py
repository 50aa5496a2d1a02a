from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ...attendance.model import AttendanceRecord


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for time-derived pay inputs)."""

    @abstractmethod
    def worked_minutes(self, record: AttendanceRecord) -> int:
        raise NotImplementedError

    @abstractmethod
    def overtime_minutes(self, worked_minutes: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def night_diff_hours(self, time_in: datetime, time_out: Optional[datetime]) -> int:
        raise NotImplementedError

    def overtime_hours(self, worked_minutes: int) -> float:
        return self.overtime_minutes(worked_minutes) / 60
