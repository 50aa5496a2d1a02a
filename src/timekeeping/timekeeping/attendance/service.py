from __future__ import annotations

import logging
from typing import Optional

from ..common.datetime_utils import Clock, now_local, round_minutes
from ..core.constants import DEFAULT_BREAK_TYPE
from ..core.exceptions import OpenBreakConflict, OpenRecordConflict
from ..payroll.calculator.base import PayrollCalculator
from ..payroll.calculator.standard_calculator import StandardPayrollCalculator
from .model import TodayStatus
from .repository import AttendanceRepository
from .state_machine import PunchAction, PunchError, PunchResult, PunchState, check_transition, derive_state

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use cases: the four punches and the time clock status.

    Every punch checks the derived state, then issues a guarded write. When
    the write loses a race (constraint violation or no matching row) the
    state is read again and the matching PunchError is returned.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        clock: Optional[Clock] = None,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock or now_local

    def _current(self, employee_id: int):
        record = self._attendance.get_open_for_employee(employee_id)
        open_break = self._attendance.get_open_break(record.attendance_id) if record else None
        return record, open_break, derive_state(record, open_break)

    def _rejection_after_race(self, employee_id: int, action: PunchAction, fallback: PunchError) -> PunchResult:
        _, _, state = self._current(employee_id)
        return PunchResult.rejected(check_transition(action, state) or fallback)

    def clock_in(self, employee_id: int, *, notes: Optional[str] = None) -> PunchResult:
        _, _, state = self._current(employee_id)
        error = check_transition(PunchAction.CLOCK_IN, state)
        if error:
            return PunchResult.rejected(error)

        now = self._clock()
        try:
            attendance_id = self._attendance.create_clock_in(
                employee_id=employee_id,
                work_date=now.date(),
                time_in=now,
                notes=notes,
            )
        except OpenRecordConflict:
            return PunchResult.rejected(PunchError.ALREADY_CLOCKED_IN)

        logger.info("clock_in employee=%s attendance=%s", employee_id, attendance_id)
        return PunchResult(attendance=self._attendance.get_by_id(attendance_id))

    def break_start(
        self,
        employee_id: int,
        *,
        break_type: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> PunchResult:
        record, _, state = self._current(employee_id)
        error = check_transition(PunchAction.BREAK_START, state)
        if error:
            return PunchResult.rejected(error)

        break_type = break_type or DEFAULT_BREAK_TYPE
        try:
            break_id = self._attendance.open_break(
                attendance_id=record.attendance_id,
                employee_id=employee_id,
                break_start=self._clock(),
                break_type=break_type,
                notes=notes,
            )
        except OpenBreakConflict:
            return PunchResult.rejected(PunchError.ALREADY_ON_BREAK)
        if break_id is None:
            return self._rejection_after_race(employee_id, PunchAction.BREAK_START, PunchError.NOT_CLOCKED_IN)

        logger.info("break_start employee=%s break=%s type=%s", employee_id, break_id, break_type)
        return PunchResult(
            attendance=self._attendance.get_by_id(record.attendance_id),
            active_break=self._attendance.get_open_break(record.attendance_id),
        )

    def break_end(self, employee_id: int) -> PunchResult:
        record, open_break, state = self._current(employee_id)
        error = check_transition(PunchAction.BREAK_END, state)
        if error:
            return PunchResult.rejected(error)

        now = self._clock()
        minutes = max(0, round_minutes(open_break.break_start, now))
        if not self._attendance.close_break(break_id=open_break.break_id, break_end=now, break_minutes=minutes):
            return PunchResult.rejected(PunchError.NO_ACTIVE_BREAK)

        logger.info("break_end employee=%s break=%s minutes=%s", employee_id, open_break.break_id, minutes)
        return PunchResult(attendance=self._attendance.get_by_id(record.attendance_id))

    def clock_out(self, employee_id: int) -> PunchResult:
        record, _, state = self._current(employee_id)
        error = check_transition(PunchAction.CLOCK_OUT, state)
        if error:
            return PunchResult.rejected(error)

        worked = self._attendance.close_record(
            attendance_id=record.attendance_id,
            time_out=self._clock(),
            worked_minutes=self._calculator.worked_minutes,
        )
        if worked is None:
            return self._rejection_after_race(employee_id, PunchAction.CLOCK_OUT, PunchError.NOT_CLOCKED_IN)

        logger.info("clock_out employee=%s attendance=%s worked=%s", employee_id, record.attendance_id, worked)
        return PunchResult(attendance=self._attendance.get_by_id(record.attendance_id))

    def get_state(self, employee_id: int) -> PunchState:
        return self._current(employee_id)[2]

    def get_today_status(self, employee_id: int) -> TodayStatus:
        # An open record wins even if it started on a previous day (overnight shifts).
        record = self._attendance.get_open_for_employee(employee_id)
        if record is None:
            record = self._attendance.get_latest_for_employee_and_date(employee_id, self._clock().date())
        if record is None:
            return TodayStatus(attendance=None, active_break=None, breaks=[])

        breaks = list(self._attendance.list_breaks(record.attendance_id))
        active = next((b for b in breaks if b.is_open), None)
        return TodayStatus(attendance=record, active_break=active, breaks=breaks)
