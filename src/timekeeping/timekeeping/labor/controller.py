from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.auth import REPORTING_ROLES, roles_required
from ..common.serialization import iso
from ..container import Container
from ..core.exceptions import NotFoundError
from .analyzer import format_currency, format_percentage
from .model import MonthlyLaborCostEntry


def entry_to_dict(e: MonthlyLaborCostEntry) -> dict:
    return {
        "id": e.entry_id,
        "month": e.month,
        "year": e.year,
        "totalSales": e.total_sales,
        "totalLaborCost": e.total_labor_cost,
        "laborCostPercentage": e.labor_cost_percentage,
        "targetSales": e.target_sales,
        "budgetedLaborCost": e.budgeted_labor_cost,
        "status": e.status.value,
        "performanceRating": e.performance_rating.value,
        "notes": e.notes,
        "display": {
            "totalSales": format_currency(e.total_sales),
            "totalLaborCost": format_currency(e.total_labor_cost),
            "laborCostPercentage": format_percentage(e.labor_cost_percentage),
        },
        "createdAt": iso(e.created_at),
        "updatedAt": iso(e.updated_at),
    }


def register(app: Flask, container: Container) -> None:
    service = container.labor_cost_service

    def _form() -> dict:
        data = request.get_json(silent=True) or {}
        return {
            "month": data.get("month"),
            "year": data.get("year"),
            "total_sales": data.get("totalSales"),
            "total_labor_cost": data.get("totalLaborCost"),
            "target_sales": data.get("targetSales"),
            "budgeted_labor_cost": data.get("budgetedLaborCost"),
            "notes": data.get("notes"),
        }

    @app.route("/api/labor-cost", methods=["GET"], endpoint="labor_cost_list")
    @roles_required(*REPORTING_ROLES)
    def labor_cost_list():
        year = request.args.get("year") or None
        return jsonify([entry_to_dict(e) for e in service.list_entries(year=year)])

    @app.route("/api/labor-cost", methods=["POST"], endpoint="labor_cost_upsert")
    @roles_required(*REPORTING_ROLES)
    def labor_cost_upsert():
        entry = service.upsert_entry(**_form())
        return jsonify(entry_to_dict(entry)), 201

    @app.route("/api/labor-cost/<int:year>/<int:month>", methods=["GET"], endpoint="labor_cost_month")
    @roles_required(*REPORTING_ROLES)
    def labor_cost_month(year: int, month: int):
        entry = service.get_entry(month=month, year=year)
        if entry is None:
            raise NotFoundError("Record not found")
        return jsonify(entry_to_dict(entry))

    @app.route("/api/labor-cost/<int:entry_id>", methods=["PATCH"], endpoint="labor_cost_update")
    @roles_required(*REPORTING_ROLES)
    def labor_cost_update(entry_id: int):
        entry = service.update_entry(entry_id, **_form())
        return jsonify(entry_to_dict(entry))

    @app.route("/api/labor-cost/<int:entry_id>", methods=["DELETE"], endpoint="labor_cost_delete")
    @roles_required(*REPORTING_ROLES)
    def labor_cost_delete(entry_id: int):
        service.delete_entry(entry_id)
        return jsonify({"message": "Record deleted successfully", "deletedId": entry_id})
