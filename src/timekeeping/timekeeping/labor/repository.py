from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import LaborCostAnalysis, MonthlyLaborCostEntry


class LaborCostRepository(Protocol):
    def get_by_id(self, entry_id: int) -> Optional[MonthlyLaborCostEntry]:
        raise NotImplementedError

    def get_by_month(self, *, month: int, year: int) -> Optional[MonthlyLaborCostEntry]:
        raise NotImplementedError

    def list_entries(self, *, year: Optional[int] = None) -> Sequence[MonthlyLaborCostEntry]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        month: int,
        year: int,
        analysis: LaborCostAnalysis,
        target_sales: Optional[int] = None,
        budgeted_labor_cost: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Insert or replace the entry for (month, year); returns its id."""

        raise NotImplementedError

    def update(
        self,
        *,
        entry_id: int,
        month: int,
        year: int,
        analysis: LaborCostAnalysis,
        target_sales: Optional[int] = None,
        budgeted_labor_cost: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def delete(self, entry_id: int) -> bool:
        raise NotImplementedError
