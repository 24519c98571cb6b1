# proforma_metrics/finance/debt.py
"""
Debt-financing helpers:
 - debt_impact(rows, period_count)
 - balance_schedule(rows, period_count)
 - with_balances(rows, period_count)

Rows are looked up by fixed id within the debt-financing category.
Numbers are per period. Keep this module self-contained apart from cell parsing.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Dict, List, Sequence, Tuple

from proforma_metrics.finance.cells import row_period_values
from proforma_metrics.types import Row

BEGINNING_BALANCE = "beginning-balance"
DRAWS = "draws"
INTEREST = "interest"
PRINCIPAL_REPAYMENT = "principal-repayment"
PAYOFF = "payoff"
ENDING_BALANCE = "ending-balance"


def _by_id(rows: Sequence[Row]) -> Dict[str, Row]:
    # first occurrence wins if a caller skipped validation
    out: Dict[str, Row] = {}
    for r in rows:
        out.setdefault(r.id, r)
    return out


def _series(rows: Dict[str, Row], row_id: str, period_count: int) -> List[float]:
    row = rows.get(row_id)
    if row is None:
        return [0.0] * period_count
    return row_period_values(row, period_count)


def debt_impact(rows: Sequence[Row], period_count: int) -> List[float]:
    """Cash effect per period: draws - principal repayment - interest - payoff."""
    by_id = _by_id(rows)
    draws = _series(by_id, DRAWS, period_count)
    principal = _series(by_id, PRINCIPAL_REPAYMENT, period_count)
    interest = _series(by_id, INTEREST, period_count)
    payoff = _series(by_id, PAYOFF, period_count)
    return [draws[i] - principal[i] - interest[i] - payoff[i] for i in range(period_count)]


def balance_schedule(rows: Sequence[Row], period_count: int) -> Tuple[Row, Row]:
    """
    Roll the loan balance forward and return (beginning, ending) balance rows,
    both flagged as calculated. Opening balance is the first cell of the
    beginning-balance row (0 if absent). Interest is paid in cash and does
    not accrue to the balance.
    """
    by_id = _by_id(rows)
    opening = _series(by_id, BEGINNING_BALANCE, max(1, period_count))[0]
    draws = _series(by_id, DRAWS, period_count)
    principal = _series(by_id, PRINCIPAL_REPAYMENT, period_count)
    payoff = _series(by_id, PAYOFF, period_count)

    beginning: List[float] = []
    ending: List[float] = []
    bal = opening
    for i in range(period_count):
        beginning.append(bal)
        bal = bal + draws[i] - principal[i] - payoff[i]
        ending.append(bal)

    def _row(row_id: str, label: str, vals: List[float]) -> Row:
        return Row(
            id=row_id,
            label=label,
            values=tuple(repr(float(v)) for v in vals),
            total=sum(vals),
            is_calculated=True,
        )

    return (
        _row(BEGINNING_BALANCE, "Beginning Balance", beginning),
        _row(ENDING_BALANCE, "Ending Balance", ending),
    )


def with_balances(rows: Sequence[Row], period_count: int) -> Tuple[Row, ...]:
    """
    Rows with any beginning-balance / ending-balance row replaced by the
    rolled-forward schedule. Labels are kept; missing balance rows are not added.
    """
    computed = {r.id: r for r in balance_schedule(rows, period_count)}
    out = []
    for r in rows:
        fresh = computed.pop(r.id, None)
        if fresh is None:
            out.append(r)
        else:
            out.append(replace(r, values=fresh.values, total=fresh.total, is_calculated=True))
    return tuple(out)


__all__ = [
    "BEGINNING_BALANCE",
    "DRAWS",
    "INTEREST",
    "PRINCIPAL_REPAYMENT",
    "PAYOFF",
    "ENDING_BALANCE",
    "debt_impact",
    "balance_schedule",
    "with_balances",
]
