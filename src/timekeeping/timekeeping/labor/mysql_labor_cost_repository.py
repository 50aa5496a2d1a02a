from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import LaborCostStatus, PerformanceRating
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LaborCostAnalysis, MonthlyLaborCostEntry
from .repository import LaborCostRepository

_COLUMNS = """
    entry_id, month, year, total_sales, total_labor_cost, labor_cost_percentage,
    target_sales, budgeted_labor_cost, status, performance_rating, notes,
    created_at, updated_at
"""


def _opt_int(value: Any) -> Optional[int]:
    return int(value) if value is not None else None


def _to_entry(r: Dict[str, Any]) -> MonthlyLaborCostEntry:
    return MonthlyLaborCostEntry(
        entry_id=int(r["entry_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        total_sales=int(r["total_sales"]),
        total_labor_cost=int(r["total_labor_cost"]),
        labor_cost_percentage=int(r["labor_cost_percentage"]),
        status=LaborCostStatus(r["status"]),
        performance_rating=PerformanceRating(r["performance_rating"]),
        target_sales=_opt_int(r.get("target_sales")),
        budgeted_labor_cost=_opt_int(r.get("budgeted_labor_cost")),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLLaborCostRepository(LaborCostRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, entry_id: int) -> Optional[MonthlyLaborCostEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM labor_cost_entries WHERE entry_id=%s", (int(entry_id),))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def get_by_month(self, *, month: int, year: int) -> Optional[MonthlyLaborCostEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM labor_cost_entries WHERE month=%s AND year=%s",
                (int(month), int(year)),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def list_entries(self, *, year: Optional[int] = None) -> Sequence[MonthlyLaborCostEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            if year is None:
                cur.execute(f"SELECT {_COLUMNS} FROM labor_cost_entries ORDER BY year DESC, month DESC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM labor_cost_entries WHERE year=%s ORDER BY month DESC",
                    (int(year),),
                )
            return [_to_entry(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO labor_cost_entries(
                    month, year, total_sales, total_labor_cost, labor_cost_percentage,
                    target_sales, budgeted_labor_cost, status, performance_rating, notes
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s) AS new
                ON DUPLICATE KEY UPDATE
                    entry_id=LAST_INSERT_ID(labor_cost_entries.entry_id),
                    total_sales=new.total_sales,
                    total_labor_cost=new.total_labor_cost,
                    labor_cost_percentage=new.labor_cost_percentage,
                    target_sales=new.target_sales,
                    budgeted_labor_cost=new.budgeted_labor_cost,
                    status=new.status,
                    performance_rating=new.performance_rating,
                    notes=new.notes
                """,
                (
                    int(month),
                    int(year),
                    analysis.total_sales,
                    analysis.total_labor_cost,
                    analysis.labor_cost_percentage,
                    target_sales,
                    budgeted_labor_cost,
                    analysis.status.value,
                    analysis.performance_rating.value,
                    notes,
                ),
            )
            return int(cur.lastrowid)

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
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE labor_cost_entries
                    SET month=%s, year=%s, total_sales=%s, total_labor_cost=%s, labor_cost_percentage=%s,
                        target_sales=%s, budgeted_labor_cost=%s, status=%s, performance_rating=%s, notes=%s
                    WHERE entry_id=%s
                    """,
                    (
                        int(month),
                        int(year),
                        analysis.total_sales,
                        analysis.total_labor_cost,
                        analysis.labor_cost_percentage,
                        target_sales,
                        budgeted_labor_cost,
                        analysis.status.value,
                        analysis.performance_rating.value,
                        notes,
                        int(entry_id),
                    ),
                )
                # rowcount is 0 when nothing changed, so confirm the row exists.
                if cur.rowcount > 0:
                    return True
                cur.execute("SELECT 1 FROM labor_cost_entries WHERE entry_id=%s", (int(entry_id),))
                return fetchone(cur) is not None
        except mysql.connector.IntegrityError as e:
            raise ValidationError(
                "An entry for this month already exists",
                {"month": "already has an entry for this year"},
            ) from e

    def delete(self, entry_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM labor_cost_entries WHERE entry_id=%s", (int(entry_id),))
            return cur.rowcount > 0
