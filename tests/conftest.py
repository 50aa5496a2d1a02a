from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from src.timekeeping.timekeeping.attendance.model import AttendanceRecord, BreakInterval
from src.timekeeping.timekeeping.attendance.service import AttendanceService
from src.timekeeping.timekeeping.container import build_services
from src.timekeeping.timekeeping.core.enums import AttendanceStatus
from src.timekeeping.timekeeping.core.exceptions import OpenBreakConflict, OpenRecordConflict
from src.timekeeping.timekeeping.labor.model import LaborCostAnalysis, MonthlyLaborCostEntry


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def set(self, now: datetime) -> None:
        self.now = now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class InMemoryAttendance:
    """Mirrors the unique open-record / open-break indexes of the real schema."""

    def __init__(self):
        self._lock = threading.RLock()
        self._records: dict[int, AttendanceRecord] = {}
        self._breaks: dict[int, BreakInterval] = {}
        self._next_id = 0

    def _id(self) -> int:
        self._next_id += 1
        return self._next_id

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._records[record.attendance_id] = record
        self._next_id = max(self._next_id, record.attendance_id)
        return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._records.get(attendance_id)

    def get_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        with self._lock:
            return next((r for r in self._records.values() if r.employee_id == employee_id and r.is_open), None)

    def get_latest_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            items = [r for r in self._records.values() if r.employee_id == employee_id and r.work_date == work_date]
        items.sort(key=lambda r: r.time_in, reverse=True)
        return items[0] if items else None

    def create_clock_in(self, *, employee_id: int, work_date: date, time_in: datetime, notes=None) -> int:
        with self._lock:
            if self.get_open_for_employee(employee_id):
                raise OpenRecordConflict(str(employee_id))
            rec = AttendanceRecord(
                attendance_id=self._id(),
                employee_id=employee_id,
                work_date=work_date,
                time_in=time_in,
                time_out=None,
                status=AttendanceStatus.CLOCKED_IN,
                notes=notes,
            )
            self._records[rec.attendance_id] = rec
            return rec.attendance_id

    def close_record(self, *, attendance_id: int, time_out: datetime, worked_minutes) -> Optional[int]:
        with self._lock:
            rec = self._records.get(attendance_id)
            if not rec or not rec.is_open or self.get_open_break(attendance_id):
                return None
            closed = replace(rec, time_out=time_out, status=AttendanceStatus.CLOCKED_OUT)
            worked = worked_minutes(closed)
            self._records[attendance_id] = replace(closed, total_work_minutes=worked)
            return worked

    def list_for_period(self, *, start_date: date, end_date: date, employee_id: Optional[int] = None):
        with self._lock:
            return [
                r
                for r in self._records.values()
                if start_date <= r.work_date <= end_date and (employee_id is None or r.employee_id == employee_id)
            ]

    def get_open_break(self, attendance_id: int) -> Optional[BreakInterval]:
        with self._lock:
            return next((b for b in self._breaks.values() if b.attendance_id == attendance_id and b.is_open), None)

    def list_breaks(self, attendance_id: int):
        with self._lock:
            items = [b for b in self._breaks.values() if b.attendance_id == attendance_id]
        items.sort(key=lambda b: b.break_start)
        return items

    def open_break(self, *, attendance_id: int, employee_id: int, break_start: datetime, break_type: str, notes=None):
        with self._lock:
            rec = self._records.get(attendance_id)
            if not rec or not rec.is_open:
                return None
            if self.get_open_break(attendance_id):
                raise OpenBreakConflict(str(attendance_id))
            b = BreakInterval(
                break_id=self._id(),
                attendance_id=attendance_id,
                employee_id=employee_id,
                break_start=break_start,
                break_type=break_type,
                notes=notes,
            )
            self._breaks[b.break_id] = b
            self._records[attendance_id] = replace(rec, status=AttendanceStatus.ON_BREAK)
            return b.break_id

    def close_break(self, *, break_id: int, break_end: datetime, break_minutes: int) -> bool:
        with self._lock:
            b = self._breaks.get(break_id)
            if not b or not b.is_open:
                return False
            self._breaks[break_id] = replace(b, break_end=break_end, break_minutes=break_minutes)
            rec = self._records[b.attendance_id]
            self._records[b.attendance_id] = replace(
                rec,
                status=AttendanceStatus.CLOCKED_IN,
                total_break_minutes=rec.total_break_minutes + break_minutes,
            )
            return True


class InMemoryLaborCost:
    def __init__(self):
        self._entries: dict[int, MonthlyLaborCostEntry] = {}
        self._next_id = 0

    def get_by_id(self, entry_id: int):
        return self._entries.get(entry_id)

    def get_by_month(self, *, month: int, year: int):
        return next((e for e in self._entries.values() if e.month == month and e.year == year), None)

    def list_entries(self, *, year=None):
        items = [e for e in self._entries.values() if year is None or e.year == year]
        items.sort(key=lambda e: (e.year, e.month), reverse=True)
        return items

    def _build(self, entry_id: int, month: int, year: int, analysis: LaborCostAnalysis, **extra) -> MonthlyLaborCostEntry:
        return MonthlyLaborCostEntry(
            entry_id=entry_id,
            month=month,
            year=year,
            total_sales=analysis.total_sales,
            total_labor_cost=analysis.total_labor_cost,
            labor_cost_percentage=analysis.labor_cost_percentage,
            status=analysis.status,
            performance_rating=analysis.performance_rating,
            **extra,
        )

    def upsert(self, *, month: int, year: int, analysis: LaborCostAnalysis, **extra) -> int:
        existing = self.get_by_month(month=month, year=year)
        if existing:
            entry_id = existing.entry_id
        else:
            self._next_id += 1
            entry_id = self._next_id
        self._entries[entry_id] = self._build(entry_id, month, year, analysis, **extra)
        return entry_id

    def update(self, *, entry_id: int, month: int, year: int, analysis: LaborCostAnalysis, **extra) -> bool:
        if entry_id not in self._entries:
            return False
        self._entries[entry_id] = self._build(entry_id, month, year, analysis, **extra)
        return True

    def delete(self, entry_id: int) -> bool:
        return self._entries.pop(entry_id, None) is not None


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 3, 4, 8, 0, 0))


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def labor_repo() -> InMemoryLaborCost:
    return InMemoryLaborCost()


@pytest.fixture
def attendance_service(attendance_repo, clock) -> AttendanceService:
    return AttendanceService(attendance_repo, clock=clock)


@pytest.fixture
def container(attendance_repo, labor_repo, clock):
    return build_services(attendance_repo=attendance_repo, labor_cost_repo=labor_repo, clock=clock)
