from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Optional, Sequence

from proforma_metrics.finance.cells import row_period_values, row_total
from proforma_metrics.finance.debt import debt_impact
from proforma_metrics.logger import get_logger
from proforma_metrics.types import CashFlowSeries, Row, TableSnapshot

logger = get_logger(__name__)

EMPTY_SERIES = CashFlowSeries(values=(0.0,), years=("Y1",))

# lots row holding units sold; other lots rows (e.g. lots-developed) are informational
LOTS_SOLD = "lots-sold"


def period_labels(period_count: int) -> List[str]:
    return [f"Y{i + 1}" for i in range(period_count)]


def period_count(snapshot: TableSnapshot) -> Optional[int]:
    """
    Length of the first row with values, scanning revenue, expense, then
    debt-financing. None when no such row exists.
    """
    for rows in (snapshot.revenue, snapshot.expense, snapshot.debt_financing):
        for r in rows:
            if r.values:
                return len(r.values)
    return None


def category_totals(rows: Sequence[Row], n_periods: int) -> List[float]:
    """Per-period sum over non-calculated rows."""
    totals = [0.0] * n_periods
    for r in rows:
        if r.is_calculated:
            continue
        if len(r.values) != n_periods:
            logger.debug("row %r has %d cells, expected %d; padding/truncating", r.id, len(r.values), n_periods)
        for i, v in enumerate(row_period_values(r, n_periods)):
            totals[i] += v
    return totals


def period_breakdown(snapshot: TableSnapshot) -> Dict[str, List[float]]:
    """
    Per-period components behind the net cash flow:
    revenue, expense, deduction, debt_impact, net_cash_flow.
    Empty lists when the snapshot has no rows.
    """
    n = period_count(snapshot)
    if n is None:
        return {k: [] for k in ("revenue", "expense", "deduction", "debt_impact", "net_cash_flow")}

    revenue = category_totals(snapshot.revenue, n)
    expense = category_totals(snapshot.expense, n)
    deduction = category_totals(snapshot.revenue_deduction, n)
    debt = debt_impact(snapshot.debt_financing, n)
    net = [revenue[i] - expense[i] - deduction[i] + debt[i] for i in range(n)]
    return {
        "revenue": revenue,
        "expense": expense,
        "deduction": deduction,
        "debt_impact": debt,
        "net_cash_flow": net,
    }


def extract_cash_flows(snapshot: TableSnapshot) -> CashFlowSeries:
    """
    Net cash flow per period:
        revenue - expense - revenue deductions + (draws - principal - interest - payoff)
    Calculated rows never contribute. An all-zero series is returned in full.
    """
    parts = period_breakdown(snapshot)
    net = parts["net_cash_flow"]
    if not net:
        logger.debug("snapshot has no rows; using a single zero period")
        return EMPTY_SERIES
    return CashFlowSeries(values=tuple(net), years=tuple(period_labels(len(net))))


# ---------- Derived row values ----------
def total_units_sold(snapshot: TableSnapshot) -> float:
    """Total of the lots-sold row; sum of all input lots rows when it is absent."""
    inputs = [r for r in snapshot.lots if not r.is_calculated]
    for r in inputs:
        if r.id == LOTS_SOLD:
            return row_total(r)
    return sum(row_total(r) for r in inputs)


def _derive(rows: Sequence[Row], units: float) -> tuple:
    out = []
    for r in rows:
        total = row_total(r)
        out.append(replace(r, total=total, per_unit=(total / units) if units else None))
    return tuple(out)


def with_derived_totals(snapshot: TableSnapshot) -> TableSnapshot:
    """New snapshot with every row total recomputed and per-unit values set."""
    units = total_units_sold(snapshot)
    return replace(
        snapshot,
        revenue=_derive(snapshot.revenue, units),
        expense=_derive(snapshot.expense, units),
        revenue_deduction=_derive(snapshot.revenue_deduction, units),
        lots=_derive(snapshot.lots, units),
        debt_financing=_derive(snapshot.debt_financing, units),
    )


__all__ = [
    "EMPTY_SERIES",
    "LOTS_SOLD",
    "period_labels",
    "period_count",
    "category_totals",
    "period_breakdown",
    "extract_cash_flows",
    "total_units_sold",
    "with_derived_totals",
]
