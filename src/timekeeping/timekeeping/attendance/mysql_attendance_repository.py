from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import OpenBreakConflict, OpenRecordConflict
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, BreakInterval
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    attendance_id, employee_id, work_date, time_in, time_out, status,
    total_break_minutes, total_work_minutes, notes
"""

_BREAK_COLUMNS = """
    break_id, attendance_id, employee_id, break_start, break_end,
    break_minutes, break_type, notes
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    total_work = r.get("total_work_minutes")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        time_in=r["time_in"],
        time_out=r.get("time_out"),
        status=AttendanceStatus(r["status"]),
        total_break_minutes=int(r.get("total_break_minutes") or 0),
        total_work_minutes=int(total_work) if total_work is not None else None,
        notes=r.get("notes"),
    )


def _to_break(r: Dict[str, Any]) -> BreakInterval:
    minutes = r.get("break_minutes")
    return BreakInterval(
        break_id=int(r["break_id"]),
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        break_start=r["break_start"],
        break_end=r.get("break_end"),
        break_minutes=int(minutes) if minutes is not None else None,
        break_type=r.get("break_type") or "regular",
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_open_for_employee(self, employee_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND time_out IS NULL
                LIMIT 1
                """,
                (int(employee_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_latest_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                ORDER BY time_in DESC
                LIMIT 1
                """,
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        time_in: datetime,
        notes: Optional[str] = None,
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, time_in, status, total_break_minutes, notes)
                    VALUES(%s,%s,%s,%s,0,%s)
                    """,
                    (int(employee_id), work_date, time_in, AttendanceStatus.CLOCKED_IN.value, notes),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            # db_cursor only lets duplicate-key errors through
            raise OpenRecordConflict(f"employee {employee_id} already has an open record") from e

    def close_record(
        self,
        *,
        attendance_id: int,
        time_out: datetime,
        worked_minutes: Callable[[AttendanceRecord], int],
    ) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            # break-start and break-end both write the parent row, so they queue behind this lock.
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE attendance_id=%s AND time_out IS NULL FOR UPDATE",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                "SELECT 1 FROM attendance_breaks WHERE attendance_id=%s AND break_end IS NULL LIMIT 1",
                (int(attendance_id),),
            )
            if fetchone(cur):
                return None

            worked = int(worked_minutes(replace(_to_record(r), time_out=time_out)))
            cur.execute(
                "UPDATE attendance_records SET time_out=%s, status=%s, total_work_minutes=%s WHERE attendance_id=%s",
                (time_out, AttendanceStatus.CLOCKED_OUT.value, worked, int(attendance_id)),
            )
            return worked

    def list_for_period(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]

        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(int(employee_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE {where}
                ORDER BY work_date DESC, time_in DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_open_break(self, attendance_id: int) -> Optional[BreakInterval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_BREAK_COLUMNS}
                FROM attendance_breaks
                WHERE attendance_id=%s AND break_end IS NULL
                LIMIT 1
                """,
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_break(r) if r else None

    def list_breaks(self, attendance_id: int) -> Sequence[BreakInterval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_BREAK_COLUMNS}
                FROM attendance_breaks
                WHERE attendance_id=%s
                ORDER BY break_start ASC
                """,
                (int(attendance_id),),
            )
            return [_to_break(r) for r in fetchall(cur)]

    def open_break(
        self,
        *,
        attendance_id: int,
        employee_id: int,
        break_start: datetime,
        break_type: str,
        notes: Optional[str] = None,
    ) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                # Lock the parent so a concurrent clock-out waits for this transaction.
                cur.execute(
                    "SELECT status FROM attendance_records WHERE attendance_id=%s AND time_out IS NULL FOR UPDATE",
                    (int(attendance_id),),
                )
                parent = fetchone(cur)
                if not parent:
                    return None

                cur.execute(
                    """
                    INSERT INTO attendance_breaks(attendance_id, employee_id, break_start, break_type, notes)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(attendance_id), int(employee_id), break_start, break_type, notes),
                )
                break_id = int(cur.lastrowid)
                cur.execute(
                    "UPDATE attendance_records SET status=%s WHERE attendance_id=%s",
                    (AttendanceStatus.ON_BREAK.value, int(attendance_id)),
                )
                return break_id
        except mysql.connector.IntegrityError as e:
            raise OpenBreakConflict(f"attendance {attendance_id} already has an open break") from e

    def close_break(self, *, break_id: int, break_end: datetime, break_minutes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT attendance_id FROM attendance_breaks WHERE break_id=%s AND break_end IS NULL FOR UPDATE",
                (int(break_id),),
            )
            row = fetchone(cur)
            if not row:
                return False

            cur.execute(
                "UPDATE attendance_breaks SET break_end=%s, break_minutes=%s WHERE break_id=%s",
                (break_end, int(break_minutes), int(break_id)),
            )
            cur.execute(
                """
                UPDATE attendance_records
                SET total_break_minutes = total_break_minutes + %s, status=%s
                WHERE attendance_id=%s
                """,
                (int(break_minutes), AttendanceStatus.CLOCKED_IN.value, int(row["attendance_id"])),
            )
            return True
