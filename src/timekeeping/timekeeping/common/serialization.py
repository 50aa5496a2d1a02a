"""JSON shapes exposed to the presentation layer (camelCase, ISO instants)."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..attendance.model import AttendanceRecord, BreakInterval, TodayStatus


def iso(value: Optional[date | datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def break_to_dict(b: Optional[BreakInterval]) -> Optional[dict[str, Any]]:
    if b is None:
        return None
    return {
        "id": b.break_id,
        "attendanceId": b.attendance_id,
        "employeeId": b.employee_id,
        "breakStart": iso(b.break_start),
        "breakEnd": iso(b.break_end),
        "breakMinutes": b.break_minutes,
        "breakType": b.break_type,
        "notes": b.notes,
    }


def record_to_dict(r: Optional[AttendanceRecord]) -> Optional[dict[str, Any]]:
    if r is None:
        return None
    return {
        "id": r.attendance_id,
        "employeeId": r.employee_id,
        "date": iso(r.work_date),
        "timeIn": iso(r.time_in),
        "timeOut": iso(r.time_out),
        "status": r.status.value,
        "totalBreakMinutes": r.total_break_minutes,
        "totalWorkMinutes": r.total_work_minutes,
        "notes": r.notes,
    }


def today_to_dict(status: TodayStatus) -> dict[str, Any]:
    return {
        "attendance": record_to_dict(status.attendance),
        "activeBreak": break_to_dict(status.active_break),
        "breaks": [break_to_dict(b) for b in status.breaks],
    }
