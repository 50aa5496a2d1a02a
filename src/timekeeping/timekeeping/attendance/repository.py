from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Optional, Protocol, Sequence

from .model import AttendanceRecord, BreakInterval


class AttendanceRepository(Protocol):
    """Clock ledger: attendance records and their breaks.

    Writes that guard an invariant raise OpenRecordConflict / OpenBreakConflict
    when a concurrent request got there first, or return None/False when the
    guarded row is no longer in the expected state.
    """

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_latest_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        time_in: datetime,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def close_record(
        self,
        *,
        attendance_id: int,
        time_out: datetime,
        worked_minutes: Callable[[AttendanceRecord], int],
    ) -> Optional[int]:
        """Close an open record that has no open break.

        ``worked_minutes`` is applied to the row as read under the write lock,
        with ``time_out`` set, so break totals folded in by a concurrent
        break-end are never missed. Returns the stored minutes, or None when
        the record is closed already or has an open break.
        """

        raise NotImplementedError

    def list_for_period(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_open_break(self, attendance_id: int) -> Optional[BreakInterval]:
        raise NotImplementedError

    def list_breaks(self, attendance_id: int) -> Sequence[BreakInterval]:
        raise NotImplementedError

    def open_break(
        self,
        *,
        attendance_id: int,
        employee_id: int,
        break_start: datetime,
        break_type: str,
        notes: Optional[str] = None,
    ) -> Optional[int]:
        """Insert an open break and flag the parent on_break; None if the parent is no longer clocked in."""

        raise NotImplementedError

    def close_break(self, *, break_id: int, break_end: datetime, break_minutes: int) -> bool:
        """Close the break and fold its minutes into the parent record."""

        raise NotImplementedError
