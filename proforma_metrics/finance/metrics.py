"""
Finance metrics: FinancialMetric results for display and chat context.

Design:
- IRR/NPV math lives only in proforma_metrics.finance.irr (singleton);
  this module wraps it with preconditions and formatting.
- Not-applicable outcomes are explicit FinancialMetric.not_applicable(...)
  results; only unexpected arithmetic faults reach the except clauses.
"""
from __future__ import annotations

import math
from typing import List, Sequence

import numpy as np

from proforma_metrics import config
from proforma_metrics.finance.formatting import format_currency, format_percent
from proforma_metrics.finance.irr import has_sign_change, irr, npv
from proforma_metrics.logger import get_logger
from proforma_metrics.types import FinancialMetric

logger = get_logger(__name__)

INVALID_PATTERN = "Invalid cash flow pattern"
NO_SOLUTION = "No solution found"
CALCULATION_ERROR = "Calculation error"
INVALID_CASH_FLOWS = "Invalid cash flows"
NEVER_PAID_BACK = "Never paid back"
NO_INVESTMENT = "No investment found"
NO_REVENUE = "No revenue"
DATA_MISMATCH = "Data mismatch"


def calculate_irr(values: Sequence[float]) -> FinancialMetric:
    cfs = [float(v) for v in values]
    if len(cfs) < 2 or not has_sign_change(cfs):
        return FinancialMetric.not_applicable(INVALID_PATTERN)
    try:
        rate = irr(cfs, tol=config.IRR_TOLERANCE, max_iter=config.IRR_MAX_ITER)
    except (ArithmeticError, ValueError, TypeError):
        logger.warning("IRR calculation failed for %d periods", len(cfs), exc_info=True)
        return FinancialMetric.not_applicable(CALCULATION_ERROR)

    if rate is None or not math.isfinite(rate):
        return FinancialMetric.not_applicable(NO_SOLUTION)
    pct = rate * 100.0
    return FinancialMetric(value=pct, formatted=format_percent(pct))


def calculate_npv(rate: float, values: Sequence[float]) -> FinancialMetric:
    try:
        total = npv(rate, values)
    except (ArithmeticError, ValueError, TypeError):
        logger.warning("NPV calculation failed at rate %r", rate, exc_info=True)
        return FinancialMetric.not_applicable(INVALID_CASH_FLOWS)
    if not math.isfinite(total):
        return FinancialMetric.not_applicable(INVALID_CASH_FLOWS)
    return FinancialMetric(value=total, formatted=format_currency(total))


def _running_sum(values: Sequence[float]) -> np.ndarray:
    return np.cumsum(np.asarray(values, dtype=float))


def calculate_payback_period(values: Sequence[float]) -> FinancialMetric:
    """
    Index of the first period whose cumulative cash flow is >= 0.
    A series that never recovers reports NEVER_PAID_BACK instead of 0.
    """
    running = _running_sum(values)
    if not np.isfinite(running).all():
        return FinancialMetric.not_applicable(CALCULATION_ERROR)
    hits = np.nonzero(running >= 0)[0]
    if hits.size == 0:
        return FinancialMetric.not_applicable(NEVER_PAID_BACK)
    idx = int(hits[0])
    return FinancialMetric(value=float(idx), formatted=f"{idx} years")


def calculate_peak_equity(values: Sequence[float]) -> FinancialMetric:
    """Largest cumulative deficit (as a positive amount) the investor must fund."""
    running = _running_sum(values)
    # min(0.0, nan) is 0.0, so check before reducing
    if not np.isfinite(running).all():
        return FinancialMetric.not_applicable(CALCULATION_ERROR)
    low = float(running.min()) if running.size else 0.0
    peak = abs(min(0.0, low))
    return FinancialMetric(value=peak, formatted=format_currency(peak))


def calculate_cash_multiple(values: Sequence[float]) -> FinancialMetric:
    cfs = np.asarray(values, dtype=float)
    investment = float(-cfs[cfs < 0].sum())
    returns = float(cfs[cfs >= 0].sum())
    if investment == 0:
        return FinancialMetric.not_applicable(NO_INVESTMENT)
    multiple = returns / investment
    if not math.isfinite(multiple):
        return FinancialMetric.not_applicable(CALCULATION_ERROR)
    return FinancialMetric(value=multiple, formatted=f"{multiple:.2f}x")


def calculate_profit_margin(revenue: float, expenses: float) -> FinancialMetric:
    revenue = float(revenue)
    if revenue == 0:
        return FinancialMetric.not_applicable(NO_REVENUE)
    margin = (revenue - float(expenses)) / revenue * 100.0
    if not math.isfinite(margin):
        return FinancialMetric.not_applicable(CALCULATION_ERROR)
    return FinancialMetric(value=margin, formatted=format_percent(margin))


def calculate_period_profit_margins(
    revenues: Sequence[float], expenses: Sequence[float]
) -> List[FinancialMetric]:
    if len(revenues) != len(expenses):
        return [FinancialMetric.not_applicable(DATA_MISMATCH)]
    return [calculate_profit_margin(r, e) for r, e in zip(revenues, expenses)]


__all__ = [
    "calculate_irr",
    "calculate_npv",
    "calculate_payback_period",
    "calculate_peak_equity",
    "calculate_cash_multiple",
    "calculate_profit_margin",
    "calculate_period_profit_margins",
    "format_currency",
]
