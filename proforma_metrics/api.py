"""
Public API façade.

Callers (the chat layer, notebooks) import from here; implementations
live in proforma_metrics.finance.*.
"""
from .finance.cashflow import extract_cash_flows
from .finance.formatting import format_currency
from .finance.metrics import (
    calculate_cash_multiple,
    calculate_irr,
    calculate_npv,
    calculate_payback_period,
    calculate_peak_equity,
    calculate_period_profit_margins,
    calculate_profit_margin,
)
from .adapters import run_metrics
from .types import CashFlowSeries, FinancialMetric, PeriodMeta, Row, TableSnapshot
from .validate import normalize_snapshot

__all__ = [
    "extract_cash_flows",
    "calculate_irr",
    "calculate_npv",
    "calculate_payback_period",
    "calculate_peak_equity",
    "calculate_cash_multiple",
    "calculate_profit_margin",
    "calculate_period_profit_margins",
    "format_currency",
    "run_metrics",
    "normalize_snapshot",
    "CashFlowSeries",
    "FinancialMetric",
    "PeriodMeta",
    "Row",
    "TableSnapshot",
]
