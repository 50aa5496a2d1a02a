from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import Clock, now_local
from .database.connection import DBConfig, DatabaseConnection
from .labor.mysql_labor_cost_repository import MySQLLaborCostRepository
from .labor.repository import LaborCostRepository
from .labor.service import LaborCostService
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.service import PayrollReportService


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    labor_cost_repo: LaborCostRepository

    attendance_service: AttendanceService
    payroll_report_service: PayrollReportService
    labor_cost_service: LaborCostService

    clock: Clock = now_local


def build_services(
    *,
    attendance_repo: AttendanceRepository,
    labor_cost_repo: LaborCostRepository,
    clock: Optional[Clock] = None,
) -> Container:
    clock = clock or now_local
    calculator = StandardPayrollCalculator()
    return Container(
        attendance_repo=attendance_repo,
        labor_cost_repo=labor_cost_repo,
        attendance_service=AttendanceService(attendance_repo, calculator=calculator, clock=clock),
        payroll_report_service=PayrollReportService(attendance_repo, calculator=calculator),
        labor_cost_service=LaborCostService(labor_cost_repo),
        clock=clock,
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        attendance_repo=MySQLAttendanceRepository(conn),
        labor_cost_repo=MySQLLaborCostRepository(conn),
    )
