from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from ..common.validators import optional_amount, optional_text, parse_amount, require_int_in_range
from ..core.constants import MAX_REPORT_YEAR, MIN_REPORT_YEAR
from ..core.exceptions import NotFoundError, ValidationError
from .analyzer import analyze, to_minor_units
from .model import LaborCostAnalysis, MonthlyLaborCostEntry
from .repository import LaborCostRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaborCostInput:
    """Validated form input, money already in cents."""

    month: int
    year: int
    analysis: LaborCostAnalysis
    target_sales: Optional[int] = None
    budgeted_labor_cost: Optional[int] = None
    notes: Optional[str] = None


def _collect(errors: dict[str, str], fn: Callable[[], Any]) -> Any:
    try:
        return fn()
    except ValidationError as e:
        errors.update(e.errors)
        return None


def validate_input(
    *,
    month: Any,
    year: Any,
    total_sales: Any,
    total_labor_cost: Any,
    target_sales: Any = None,
    budgeted_labor_cost: Any = None,
    notes: Any = None,
) -> LaborCostInput:
    """Validate every field, then convert money to cents at the boundary."""
    errors: dict[str, str] = {}
    month_v = _collect(errors, lambda: require_int_in_range(month, "month", 1, 12))
    year_v = _collect(errors, lambda: require_int_in_range(year, "year", MIN_REPORT_YEAR, MAX_REPORT_YEAR))
    sales = _collect(errors, lambda: parse_amount(total_sales, "totalSales"))
    labor = _collect(errors, lambda: parse_amount(total_labor_cost, "totalLaborCost"))
    target = _collect(errors, lambda: optional_amount(target_sales, "targetSales"))
    budget = _collect(errors, lambda: optional_amount(budgeted_labor_cost, "budgetedLaborCost"))
    if errors:
        raise ValidationError("Invalid labor cost data", errors)

    return LaborCostInput(
        month=month_v,
        year=year_v,
        analysis=analyze(to_minor_units(sales), to_minor_units(labor)),
        target_sales=to_minor_units(target) if target is not None else None,
        budgeted_labor_cost=to_minor_units(budget) if budget is not None else None,
        notes=optional_text(notes),
    )


class LaborCostService:
    """Use cases: monthly sales vs labor cost entries."""

    def __init__(self, entries: LaborCostRepository):
        self._entries = entries

    def upsert_entry(
        self,
        *,
        month: Any,
        year: Any,
        total_sales: Any,
        total_labor_cost: Any,
        notes: Any = None,
        target_sales: Any = None,
        budgeted_labor_cost: Any = None,
    ) -> MonthlyLaborCostEntry:
        data = validate_input(
            month=month,
            year=year,
            total_sales=total_sales,
            total_labor_cost=total_labor_cost,
            target_sales=target_sales,
            budgeted_labor_cost=budgeted_labor_cost,
            notes=notes,
        )
        entry_id = self._entries.upsert(
            month=data.month,
            year=data.year,
            analysis=data.analysis,
            target_sales=data.target_sales,
            budgeted_labor_cost=data.budgeted_labor_cost,
            notes=data.notes,
        )
        logger.info(
            "labor cost %04d-%02d saved: %s (%s)",
            data.year,
            data.month,
            data.analysis.labor_cost_percentage,
            data.analysis.status.value,
        )
        return self._require(entry_id)

    def update_entry(
        self,
        entry_id: int,
        *,
        month: Any,
        year: Any,
        total_sales: Any,
        total_labor_cost: Any,
        notes: Any = None,
        target_sales: Any = None,
        budgeted_labor_cost: Any = None,
    ) -> MonthlyLaborCostEntry:
        data = validate_input(
            month=month,
            year=year,
            total_sales=total_sales,
            total_labor_cost=total_labor_cost,
            target_sales=target_sales,
            budgeted_labor_cost=budgeted_labor_cost,
            notes=notes,
        )
        ok = self._entries.update(
            entry_id=int(entry_id),
            month=data.month,
            year=data.year,
            analysis=data.analysis,
            target_sales=data.target_sales,
            budgeted_labor_cost=data.budgeted_labor_cost,
            notes=data.notes,
        )
        if not ok:
            raise NotFoundError("Record not found")
        return self._require(int(entry_id))

    def delete_entry(self, entry_id: int) -> None:
        if not self._entries.delete(int(entry_id)):
            raise NotFoundError("Record not found")
        logger.info("labor cost entry %s deleted", entry_id)

    def list_entries(self, *, year: Optional[int] = None) -> Sequence[MonthlyLaborCostEntry]:
        if year is not None:
            year = require_int_in_range(year, "year", MIN_REPORT_YEAR, MAX_REPORT_YEAR)
        return self._entries.list_entries(year=year)

    def get_entry(self, *, month: int, year: int) -> Optional[MonthlyLaborCostEntry]:
        return self._entries.get_by_month(month=int(month), year=int(year))

    def _require(self, entry_id: int) -> MonthlyLaborCostEntry:
        entry = self._entries.get_by_id(entry_id)
        if not entry:
            raise NotFoundError("Record not found")
        return entry
