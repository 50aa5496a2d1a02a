from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.auth import REPORTING_ROLES, current_employee_id, login_required, roles_required
from ..common.datetime_utils import parse_iso_date
from ..common.serialization import iso, record_to_dict
from ..container import Container
from ..core.exceptions import ValidationError
from .periods import PayPeriod, default_half_for, month_range, resolve_period
from .service import ReportData, format_duration


def _parse_date_arg(name: str) -> date | None:
    value = request.args.get(name)
    if not value:
        return None
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{name} must be YYYY-MM-DD", {name: "must be YYYY-MM-DD"})


def _parse_half_arg(reference: date) -> int:
    value = request.args.get("half")
    if not value:
        return default_half_for(reference)
    try:
        return int(value)
    except ValueError:
        raise ValidationError("half must be 1 or 2", {"half": "must be 1 or 2"})


def _period_from_args(today: date) -> PayPeriod:
    reference = _parse_date_arg("date") or today
    return resolve_period(reference, _parse_half_arg(reference))


def _range_from_args(today: date, *, whole_month: bool) -> tuple[date, date]:
    """start/end win; otherwise date/half; otherwise the default view range."""
    start = _parse_date_arg("start")
    end = _parse_date_arg("end")
    if start and end:
        if end < start:
            raise ValidationError("end must not be before start", {"end": "must not be before start"})
        return start, end
    if whole_month and not request.args.get("half"):
        first, last = month_range(_parse_date_arg("date") or today)
        return first.date(), last.date()
    period = _period_from_args(today)
    return period.start_date, period.end_date


def period_to_dict(period: PayPeriod) -> dict:
    return {
        "year": period.year,
        "month": period.month,
        "half": period.half,
        "label": period.label,
        "start": iso(period.start),
        "end": iso(period.end),
    }


def report_to_dict(report: ReportData, start: date, end: date) -> dict:
    s = report.summary
    return {
        "startDate": iso(start),
        "endDate": iso(end),
        "records": [
            {
                **record_to_dict(row.record),
                "worked": row.worked,
                "overtimeHours": round(row.overtime_hours, 1),
                "nightDiffHours": row.night_diff_hours,
            }
            for row in report.rows
        ],
        "summary": {
            "totalWorkMinutes": s.total_work_minutes,
            "totalWorkHours": round(s.total_work_hours, 1),
            "totalWork": format_duration(s.total_work_minutes),
            "overtimeMinutes": s.overtime_minutes,
            "overtimeHours": round(s.overtime_hours, 1),
            "nightDiffHours": s.night_diff_hours,
            "presentCount": s.present_count,
            "averageHours": round(s.average_hours, 1),
        },
    }


def register(app: Flask, container: Container) -> None:
    reports = container.payroll_report_service

    def _today() -> date:
        return container.clock().date()

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        start, end = _range_from_args(_today(), whole_month=True)
        report = reports.build_attendance_report(start=start, end=end, employee_id=current_employee_id())
        return jsonify(report_to_dict(report, start, end))

    @app.route("/api/attendance/all", methods=["GET"], endpoint="attendance_all")
    @roles_required(*REPORTING_ROLES)
    def attendance_all():
        start, end = _range_from_args(_today(), whole_month=False)
        employee_id = request.args.get("employee_id")
        if employee_id in (None, "", "all"):
            selected = None
        else:
            try:
                selected = int(employee_id)
            except ValueError:
                raise ValidationError("employee_id must be a number or 'all'", {"employee_id": "invalid"})
        report = reports.build_attendance_report(start=start, end=end, employee_id=selected)
        return jsonify(report_to_dict(report, start, end))

    @app.route("/api/pay-period", methods=["GET"], endpoint="pay_period")
    @login_required
    def pay_period():
        period = _period_from_args(_today())
        return jsonify(
            {
                **period_to_dict(period),
                "isCurrent": period.contains(container.clock()),
                "previous": period_to_dict(period.previous()),
                "next": period_to_dict(period.next()),
            }
        )
