"""Example: use the service layer without Flask.

Controllers are a thin layer; the punch rules and pay inputs live in services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.timekeeping.timekeeping.container import build_container
from src.timekeeping.timekeeping.payroll.periods import current_period


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    period = current_period(date.today())
    report = container.payroll_report_service.build_attendance_report(
        start=period.start_date,
        end=period.end_date,
        employee_id=1,
    )
    print(period.label, report.summary)
    print(container.attendance_service.get_today_status(1))


if __name__ == "__main__":
    main()
