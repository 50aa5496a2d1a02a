"""Fixed-point labor cost percentage and performance classification.

Money is carried as integer cents. The percentage is the percent value x100
(2500 means 25.00%), so every threshold below is on that scale.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..core.constants import NO_SALES_PERCENTAGE, PERCENT_SCALE
from ..core.enums import LaborCostStatus, PerformanceRating
from .model import LaborCostAnalysis

_CENT = Decimal(1)

# (exclusive upper bound, status, rating), checked in order.
THRESHOLDS = (
    (3000, LaborCostStatus.EXCELLENT, PerformanceRating.GOOD),
    (3500, LaborCostStatus.HIGH, PerformanceRating.GOOD),
    (4500, LaborCostStatus.HIGH, PerformanceRating.WARNING),
    (5000, LaborCostStatus.POOR, PerformanceRating.WARNING),
)
FALLBACK = (LaborCostStatus.POOR, PerformanceRating.CRITICAL)


def to_minor_units(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(_CENT, rounding=ROUND_HALF_UP))


def labor_cost_percentage(sales_cents: int, labor_cents: int) -> int:
    if sales_cents > 0:
        # round(labor * 10000 / sales), half-up, in integers
        return (2 * labor_cents * PERCENT_SCALE + sales_cents) // (2 * sales_cents)
    return NO_SALES_PERCENTAGE if labor_cents > 0 else 0


def classify(percentage: int) -> tuple[LaborCostStatus, PerformanceRating]:
    for upper, status, rating in THRESHOLDS:
        if percentage < upper:
            return status, rating
    return FALLBACK


def analyze(sales_cents: int, labor_cents: int) -> LaborCostAnalysis:
    percentage = labor_cost_percentage(sales_cents, labor_cents)
    status, rating = classify(percentage)
    return LaborCostAnalysis(
        total_sales=sales_cents,
        total_labor_cost=labor_cents,
        labor_cost_percentage=percentage,
        status=status,
        performance_rating=rating,
    )


def format_percentage(percentage: int) -> str:
    value = (Decimal(percentage) / 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{value}%"


def format_currency(cents: int) -> str:
    value = (Decimal(cents) / 100).quantize(Decimal("0.01"))
    sign = "-" if value < 0 else ""
    return f"{sign}₱{abs(value):,.2f}"
