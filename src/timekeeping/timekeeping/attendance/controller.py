from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import current_employee_id, login_required
from ..common.serialization import break_to_dict, record_to_dict, today_to_dict
from ..common.validators import optional_text
from ..container import Container
from .state_machine import PunchResult


def punch_response(result: PunchResult):
    if not result.ok:
        return jsonify({"error": result.error.value, "message": result.error.message}), 409
    body = record_to_dict(result.attendance)
    body["activeBreak"] = break_to_dict(result.active_break)
    return jsonify(body)


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="clock_in")
    @login_required
    def clock_in():
        data = _payload()
        return punch_response(service.clock_in(current_employee_id(), notes=optional_text(data.get("notes"))))

    @app.route("/api/attendance/break-start", methods=["POST"], endpoint="break_start")
    @login_required
    def break_start():
        data = _payload()
        result = service.break_start(
            current_employee_id(),
            break_type=optional_text(data.get("breakType")),
            notes=optional_text(data.get("notes")),
        )
        return punch_response(result)

    @app.route("/api/attendance/break-end", methods=["POST"], endpoint="break_end")
    @login_required
    def break_end():
        return punch_response(service.break_end(current_employee_id()))

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="clock_out")
    @login_required
    def clock_out():
        return punch_response(service.clock_out(current_employee_id()))

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        return jsonify(today_to_dict(service.get_today_status(current_employee_id())))
