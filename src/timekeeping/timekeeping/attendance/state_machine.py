"""Punch protocol: which transitions are legal from which state.

The state is derived from the ledger rather than read from the status column:
no open record is NONE, an open record with an open break is ON_BREAK, any
other open record is CLOCKED_IN. CLOCKED_OUT only describes a closed record,
and for the next punch it behaves like NONE.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .model import AttendanceRecord, BreakInterval


class PunchState(str, Enum):
    NONE = "NONE"
    CLOCKED_IN = "CLOCKED_IN"
    ON_BREAK = "ON_BREAK"
    CLOCKED_OUT = "CLOCKED_OUT"


class PunchAction(str, Enum):
    CLOCK_IN = "clock_in"
    BREAK_START = "break_start"
    BREAK_END = "break_end"
    CLOCK_OUT = "clock_out"


class PunchError(str, Enum):
    """Expected, user-facing rejections of a punch."""

    ALREADY_CLOCKED_IN = "AlreadyClockedIn"
    NOT_CLOCKED_IN = "NotClockedIn"
    ALREADY_ON_BREAK = "AlreadyOnBreak"
    NO_ACTIVE_BREAK = "NoActiveBreak"
    BREAK_IN_PROGRESS = "BreakInProgress"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    PunchError.ALREADY_CLOCKED_IN: "You are already clocked in.",
    PunchError.NOT_CLOCKED_IN: "No active clock-in found.",
    PunchError.ALREADY_ON_BREAK: "Already on break.",
    PunchError.NO_ACTIVE_BREAK: "No active break found.",
    PunchError.BREAK_IN_PROGRESS: "Please end your break before clocking out.",
}

_NOT_OPEN = (PunchState.NONE, PunchState.CLOCKED_OUT)

_REJECTIONS: dict[PunchAction, dict[PunchState, PunchError]] = {
    PunchAction.CLOCK_IN: {
        PunchState.CLOCKED_IN: PunchError.ALREADY_CLOCKED_IN,
        PunchState.ON_BREAK: PunchError.ALREADY_CLOCKED_IN,
    },
    PunchAction.BREAK_START: {
        **{s: PunchError.NOT_CLOCKED_IN for s in _NOT_OPEN},
        PunchState.ON_BREAK: PunchError.ALREADY_ON_BREAK,
    },
    PunchAction.BREAK_END: {
        **{s: PunchError.NO_ACTIVE_BREAK for s in _NOT_OPEN},
        PunchState.CLOCKED_IN: PunchError.NO_ACTIVE_BREAK,
    },
    PunchAction.CLOCK_OUT: {
        **{s: PunchError.NOT_CLOCKED_IN for s in _NOT_OPEN},
        PunchState.ON_BREAK: PunchError.BREAK_IN_PROGRESS,
    },
}


def derive_state(open_record: Optional[AttendanceRecord], open_break: Optional[BreakInterval]) -> PunchState:
    if open_record is None:
        return PunchState.NONE
    if open_break is not None:
        return PunchState.ON_BREAK
    return PunchState.CLOCKED_IN


def check_transition(action: PunchAction, state: PunchState) -> Optional[PunchError]:
    """Return the rejection for ``action`` in ``state``, or None if it is legal."""
    return _REJECTIONS[action].get(state)


@dataclass(frozen=True)
class PunchResult:
    """Tagged result of a punch: either the updated record or a PunchError."""

    attendance: Optional[AttendanceRecord] = None
    active_break: Optional[BreakInterval] = None
    error: Optional[PunchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def rejected(cls, error: PunchError) -> "PunchResult":
        return cls(error=error)
