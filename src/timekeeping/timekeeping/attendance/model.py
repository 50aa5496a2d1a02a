from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one punch session of an employee."""

    attendance_id: int
    employee_id: int
    work_date: date
    time_in: datetime
    time_out: Optional[datetime]
    status: AttendanceStatus
    total_break_minutes: int = 0
    total_work_minutes: Optional[int] = None
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.time_out is None


@dataclass(frozen=True)
class BreakInterval:
    break_id: int
    attendance_id: int
    employee_id: int
    break_start: datetime
    break_end: Optional[datetime] = None
    break_minutes: Optional[int] = None
    break_type: str = "regular"
    notes: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.break_end is None


@dataclass(frozen=True)
class TodayStatus:
    """Read-model for the time clock view."""

    attendance: Optional[AttendanceRecord]
    active_break: Optional[BreakInterval]
    breaks: list[BreakInterval] = field(default_factory=list)
