"""
Tabular views of a snapshot for CSV/JSONL export and notebooks.
"""
from typing import Any, Dict

import pandas as pd

from .adapters import METRIC_KEYS, annual_rows
from .types import TableSnapshot

ANNUAL_COLUMNS = ["period", "revenue", "expense", "deduction", "debt_impact", "net_cash_flow", "cumulative"]


def annual_frame(snapshot: TableSnapshot) -> pd.DataFrame:
    """
    Per-period breakdown as a DataFrame indexed by period label.

    Args:
        snapshot: Normalized table snapshot

    Returns:
        DataFrame with one row per period (a single zero "Y1" row when the snapshot has no rows)
    """
    df = pd.DataFrame(annual_rows(snapshot), columns=ANNUAL_COLUMNS)
    return df.set_index("period")


def metrics_frame(summary: Dict[str, Any]) -> pd.DataFrame:
    """Metric name -> value/formatted/reason, for metrics present in a run summary."""
    records = [dict(metric=k, **summary[k]) for k in METRIC_KEYS if k in summary]
    return pd.DataFrame(records, columns=["metric", "value", "formatted", "reason"]).set_index("metric")


def write_frame(df: pd.DataFrame, path, fmt: str) -> None:
    if fmt == "csv":
        df.to_csv(path)
    elif fmt == "jsonl":
        df.reset_index().to_json(path, orient="records", lines=True)
    else:
        raise ValueError(f"unknown fmt: {fmt}")
