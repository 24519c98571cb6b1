"""Display helpers shared by the metric functions."""

from __future__ import annotations


def format_currency(value: float) -> str:
    """Compact dollar string: $1.25M, -$2.50K, $999.00."""
    v = float(value)
    sign = "-" if v < 0 else ""
    a = abs(v)
    if a >= 1_000_000:
        return f"{sign}${a / 1_000_000:.2f}M"
    if a >= 1_000:
        return f"{sign}${a / 1_000:.2f}K"
    return f"{sign}${a:.2f}"


def format_percent(value: float) -> str:
    return f"{float(value):.2f}%"


__all__ = ["format_currency", "format_percent"]
