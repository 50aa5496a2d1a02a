from datetime import date, datetime

import pytest

from src.timekeeping.timekeeping.attendance.model import AttendanceRecord, BreakInterval
from src.timekeeping.timekeeping.attendance.state_machine import (
    PunchAction,
    PunchError,
    PunchState,
    check_transition,
    derive_state,
)
from src.timekeeping.timekeeping.core.enums import AttendanceStatus


def _open_record():
    return AttendanceRecord(
        attendance_id=1,
        employee_id=1,
        work_date=date(2024, 3, 4),
        time_in=datetime(2024, 3, 4, 8, 0),
        time_out=None,
        status=AttendanceStatus.CLOCKED_IN,
    )


def test_derive_state():
    rec = _open_record()
    brk = BreakInterval(break_id=1, attendance_id=1, employee_id=1, break_start=datetime(2024, 3, 4, 12, 0))

    assert derive_state(None, None) == PunchState.NONE
    assert derive_state(rec, None) == PunchState.CLOCKED_IN
    assert derive_state(rec, brk) == PunchState.ON_BREAK


@pytest.mark.parametrize(
    "action,state,expected",
    [
        (PunchAction.CLOCK_IN, PunchState.NONE, None),
        (PunchAction.CLOCK_IN, PunchState.CLOCKED_OUT, None),
        (PunchAction.CLOCK_IN, PunchState.CLOCKED_IN, PunchError.ALREADY_CLOCKED_IN),
        (PunchAction.CLOCK_IN, PunchState.ON_BREAK, PunchError.ALREADY_CLOCKED_IN),
        (PunchAction.BREAK_START, PunchState.NONE, PunchError.NOT_CLOCKED_IN),
        (PunchAction.BREAK_START, PunchState.CLOCKED_IN, None),
        (PunchAction.BREAK_START, PunchState.ON_BREAK, PunchError.ALREADY_ON_BREAK),
        (PunchAction.BREAK_END, PunchState.CLOCKED_IN, PunchError.NO_ACTIVE_BREAK),
        (PunchAction.BREAK_END, PunchState.NONE, PunchError.NO_ACTIVE_BREAK),
        (PunchAction.BREAK_END, PunchState.ON_BREAK, None),
        (PunchAction.CLOCK_OUT, PunchState.NONE, PunchError.NOT_CLOCKED_IN),
        (PunchAction.CLOCK_OUT, PunchState.ON_BREAK, PunchError.BREAK_IN_PROGRESS),
        (PunchAction.CLOCK_OUT, PunchState.CLOCKED_IN, None),
    ],
)
def test_transition_table(action, state, expected):
    assert check_transition(action, state) == expected


def test_errors_carry_a_message():
    assert PunchError.BREAK_IN_PROGRESS.message == "Please end your break before clocking out."
    assert PunchError.ALREADY_CLOCKED_IN.value == "AlreadyClockedIn"
