# proforma_metrics/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

NA_PREFIX = "N/A - "


@dataclass(frozen=True)
class Row:
    id: str
    label: str = ""
    values: Tuple[str, ...] = ()
    total: float = 0.0
    per_unit: Optional[float] = None
    is_calculated: bool = False


@dataclass(frozen=True)
class PeriodMeta:
    period_type: str = "yearly"  # "monthly" | "yearly"
    start_date: Optional[str] = None
    count: Optional[int] = None


@dataclass(frozen=True)
class TableSnapshot:
    """One immutable view of the proforma grid, grouped by category."""

    revenue: Tuple[Row, ...] = ()
    expense: Tuple[Row, ...] = ()
    revenue_deduction: Tuple[Row, ...] = ()
    lots: Tuple[Row, ...] = ()
    debt_financing: Tuple[Row, ...] = ()
    periods: PeriodMeta = field(default_factory=PeriodMeta)


@dataclass(frozen=True)
class CashFlowSeries:
    values: Tuple[float, ...]
    years: Tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.values) != len(self.years):
            raise ValueError(
                f"cash flow series length mismatch: {len(self.values)} values, {len(self.years)} labels"
            )

    def as_dict(self) -> Dict[str, Any]:
        return {"values": list(self.values), "years": list(self.years)}


@dataclass(frozen=True)
class FinancialMetric:
    """
    A computed metric: raw ``value`` plus display ``formatted``.
    ``reason`` is None on success; otherwise it names why the metric
    does not apply and ``formatted`` carries the "N/A - <reason>" text.
    """

    value: float
    formatted: str
    reason: Optional[str] = None

    @classmethod
    def not_applicable(cls, reason: str) -> "FinancialMetric":
        return cls(value=0.0, formatted=f"{NA_PREFIX}{reason}", reason=reason)

    @property
    def ok(self) -> bool:
        return self.reason is None

    def as_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "formatted": self.formatted, "reason": self.reason}


__all__ = ["NA_PREFIX", "Row", "PeriodMeta", "TableSnapshot", "CashFlowSeries", "FinancialMetric"]
