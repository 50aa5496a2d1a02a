from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import LaborCostStatus, PerformanceRating


@dataclass(frozen=True)
class LaborCostAnalysis:
    """Result of analyzing one month of sales vs labor cost (all integers)."""

    total_sales: int
    total_labor_cost: int
    labor_cost_percentage: int
    status: LaborCostStatus
    performance_rating: PerformanceRating


@dataclass(frozen=True)
class MonthlyLaborCostEntry:
    entry_id: int
    month: int
    year: int
    total_sales: int
    total_labor_cost: int
    labor_cost_percentage: int
    status: LaborCostStatus
    performance_rating: PerformanceRating
    target_sales: Optional[int] = None
    budgeted_labor_cost: Optional[int] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
