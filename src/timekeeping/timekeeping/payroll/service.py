from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator


def format_duration(minutes: Optional[int]) -> str:
    if minutes is None:
        return "-"
    h, m = divmod(int(minutes), 60)
    return f"{h}h {m}m" if h > 0 else f"{m}m"


@dataclass(frozen=True)
class AttendanceReportRow:
    """Attendance record with its derived pay inputs attached."""

    record: AttendanceRecord
    worked_minutes: int
    overtime_minutes: int
    overtime_hours: float
    night_diff_hours: int

    @property
    def worked(self) -> str:
        return format_duration(self.record.total_work_minutes)


@dataclass(frozen=True)
class AttendanceSummary:
    total_work_minutes: int
    overtime_minutes: int
    night_diff_hours: int
    present_count: int
    record_count: int

    @property
    def total_work_hours(self) -> float:
        return self.total_work_minutes / 60

    @property
    def overtime_hours(self) -> float:
        return self.overtime_minutes / 60

    @property
    def average_hours(self) -> float:
        if not self.record_count:
            return 0.0
        return self.total_work_hours / self.record_count


@dataclass(frozen=True)
class ReportData:
    rows: list[AttendanceReportRow]
    summary: AttendanceSummary


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardPayrollCalculator()

    def to_row(self, record: AttendanceRecord) -> AttendanceReportRow:
        # Overtime is based on the stored total, which only exists once closed.
        worked = int(record.total_work_minutes or 0)
        overtime = self._calculator.overtime_minutes(worked)
        return AttendanceReportRow(
            record=record,
            worked_minutes=worked,
            overtime_minutes=overtime,
            overtime_hours=overtime / 60,
            night_diff_hours=self._calculator.night_diff_hours(record.time_in, record.time_out),
        )

    def list_attendance(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
    ) -> list[AttendanceReportRow]:
        """Open and closed records in [start, end], newest first.

        ``employee_id=None`` lists every employee.
        """
        records = self._attendance.list_for_period(start_date=start, end_date=end, employee_id=employee_id)
        rows = [self.to_row(r) for r in records]
        rows.sort(key=lambda row: (row.record.work_date, row.record.time_in), reverse=True)
        return rows

    def summarize(self, rows: Iterable[AttendanceReportRow]) -> AttendanceSummary:
        rows = list(rows)
        return AttendanceSummary(
            total_work_minutes=sum(r.worked_minutes for r in rows),
            overtime_minutes=sum(r.overtime_minutes for r in rows),
            night_diff_hours=sum(r.night_diff_hours for r in rows),
            present_count=len({(r.record.employee_id, r.record.work_date) for r in rows}),
            record_count=len(rows),
        )

    def build_attendance_report(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[int] = None,
    ) -> ReportData:
        rows = self.list_attendance(start=start, end=end, employee_id=employee_id)
        return ReportData(rows=rows, summary=self.summarize(rows))
