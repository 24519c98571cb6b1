# proforma_metrics/adapters.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from proforma_metrics import config
from proforma_metrics.finance.cashflow import extract_cash_flows, period_breakdown
from proforma_metrics.finance.metrics import (
    calculate_cash_multiple,
    calculate_irr,
    calculate_npv,
    calculate_payback_period,
    calculate_peak_equity,
    calculate_period_profit_margins,
    calculate_profit_margin,
)
from proforma_metrics.types import CashFlowSeries, TableSnapshot

METRIC_KEYS = ("irr", "npv", "payback_period", "peak_equity", "cash_multiple", "profit_margin")


# ------------------------------
# Small helpers (no policy here)
# ------------------------------
def _component(parts: Dict[str, List[float]], key: str, n: int) -> List[float]:
    return parts[key] or [0.0] * n


def annual_rows(snapshot: TableSnapshot, series: Optional[CashFlowSeries] = None) -> List[Dict[str, Any]]:
    """
    One record per period of the extracted cash flow series, with every
    component of the net cash flow. A snapshot with no rows yields the single
    zero period of the empty series.
    """
    series = extract_cash_flows(snapshot) if series is None else series
    parts = period_breakdown(snapshot)
    n = len(series.values)
    cols = {k: _component(parts, k, n) for k in ("revenue", "expense", "deduction", "debt_impact")}
    rows: List[Dict[str, Any]] = []
    cumulative = 0.0
    for i, (label, net) in enumerate(zip(series.years, series.values)):
        cumulative += net
        rows.append({
            "period": label,
            "revenue": cols["revenue"][i],
            "expense": cols["expense"][i],
            "deduction": cols["deduction"][i],
            "debt_impact": cols["debt_impact"][i],
            "net_cash_flow": net,
            "cumulative": cumulative,
        })
    return rows


# ------------------------------
# Public adapter(s)
# ------------------------------
def run_metrics(snapshot: TableSnapshot, discount_rate: Optional[float] = None) -> Dict[str, Any]:
    """
    Compute every metric for one snapshot.

    Returns:
      {
        'irr' | 'npv' | 'payback_period' | 'peak_equity' | 'cash_multiple' | 'profit_margin':
            {'value': float, 'formatted': str, 'reason': str|None},
        'period_margins': [{'value', 'formatted', 'reason'}, ...],
        'cash_flows': {'values': [...], 'years': [...]},
        'discount_rate': float,
        'annual': [{'period', 'revenue', 'expense', 'deduction', 'debt_impact', 'net_cash_flow', 'cumulative'}, ...],
      }
    """
    rate = config.DISCOUNT_RATE if discount_rate is None else float(discount_rate)
    series = extract_cash_flows(snapshot)
    flows = list(series.values)
    parts = period_breakdown(snapshot)

    return {
        "irr": calculate_irr(flows).as_dict(),
        "npv": calculate_npv(rate, flows).as_dict(),
        "payback_period": calculate_payback_period(flows).as_dict(),
        "peak_equity": calculate_peak_equity(flows).as_dict(),
        "cash_multiple": calculate_cash_multiple(flows).as_dict(),
        "profit_margin": calculate_profit_margin(sum(parts["revenue"]), sum(parts["expense"])).as_dict(),
        "period_margins": [m.as_dict() for m in calculate_period_profit_margins(parts["revenue"], parts["expense"])],
        "cash_flows": series.as_dict(),
        "discount_rate": rate,
        "annual": annual_rows(snapshot, series),
    }


def run_cash_flows(snapshot: TableSnapshot) -> Dict[str, Any]:
    series = extract_cash_flows(snapshot)
    return {"cash_flows": series.as_dict(), "annual": annual_rows(snapshot, series)}


def run_margins(snapshot: TableSnapshot) -> Dict[str, Any]:
    parts = period_breakdown(snapshot)
    margins = calculate_period_profit_margins(parts["revenue"], parts["expense"])
    return {
        "profit_margin": calculate_profit_margin(sum(parts["revenue"]), sum(parts["expense"])).as_dict(),
        "period_margins": [m.as_dict() for m in margins],
        "annual": annual_rows(snapshot),
    }


RUNNERS = {
    "metrics": run_metrics,
    "cashflows": run_cash_flows,
    "margins": run_margins,
}
