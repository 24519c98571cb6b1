"""Cell parsing: spreadsheet text in, finite floats out."""

from __future__ import annotations

import math
from typing import Any, List

from proforma_metrics.types import Row


def parse_cell(v: Any) -> float:
    """
    Parse one cell. Blank, non-numeric and non-finite cells count as 0;
    booleans are not numbers here.
    """
    if v is None or isinstance(v, bool):
        return 0.0
    if isinstance(v, (int, float)):
        f = float(v)
    else:
        text = str(v).strip()
        # float() accepts "1_000"; spreadsheet cells do not
        if not text or "_" in text:
            return 0.0
        try:
            f = float(text)
        except ValueError:
            return 0.0
    return f if math.isfinite(f) else 0.0


def row_period_values(row: Row, period_count: int) -> List[float]:
    """Parsed values for exactly period_count periods (zero-padded or truncated)."""
    vals = [parse_cell(v) for v in row.values[:period_count]]
    if len(vals) < period_count:
        vals.extend([0.0] * (period_count - len(vals)))
    return vals


def row_total(row: Row) -> float:
    return sum(parse_cell(v) for v in row.values)


__all__ = ["parse_cell", "row_period_values", "row_total"]
