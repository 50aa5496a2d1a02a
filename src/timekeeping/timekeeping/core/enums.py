from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles carried in the session by the identity provider."""

    ADMIN = "admin"
    MANAGER = "manager"
    PAYROLL_OFFICER = "payroll_officer"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Persisted status of an attendance record."""

    CLOCKED_IN = "clocked_in"
    ON_BREAK = "on_break"
    CLOCKED_OUT = "clocked_out"


class LaborCostStatus(str, Enum):
    EXCELLENT = "Excellent"
    HIGH = "High"
    POOR = "Poor"


class PerformanceRating(str, Enum):
    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"
