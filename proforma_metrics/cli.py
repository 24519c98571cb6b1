# proforma_metrics/cli.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Only imports the thin runner; metric math stays behind scenario_runner
from .scenario_runner import run_dir  # run_dir(Path|str, Path, mode="metrics", fmt="jsonl", save_annual=False)


def parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="proforma_metrics",
        description="Proforma spreadsheet cash-flow and return metrics CLI",
    )
    p.add_argument(
        "--mode",
        default="metrics",
        choices=["metrics", "cashflows", "margins"],
        help="What to compute (default: metrics).",
    )
    p.add_argument(
        "--config",
        required=False,
        default=None,
        help="Path to a single YAML/JSON snapshot, or a directory of snapshots.",
    )
    p.add_argument(
        "--outputs-dir",
        "--out",
        dest="outputs_dir",
        default="outputs",
        help="Directory to write result files (default: outputs). Will be created if missing.",
    )
    p.add_argument(
        "--format",
        "--fmt",
        dest="fmt",
        default="csv",
        choices=["csv", "jsonl"],
        help="Output format for per-period result files (default: csv).",
    )
    p.add_argument(
        "--save-annual",
        action="store_true",
        help="If set, write per-period rows alongside summary.json.",
    )
    p.add_argument(
        "--discount-rate",
        type=float,
        default=None,
        help="NPV discount rate as a decimal (default: settings.discount_rate or PROFORMA_DISCOUNT_RATE).",
    )
    v = p.add_mutually_exclusive_group()
    v.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict validation (malformed rows and unknown keys raise).",
    )
    v.add_argument(
        "--relaxed",
        action="store_true",
        help="Enable relaxed validation (malformed input is normalized).",
    )
    return p.parse_args(argv)


def _validation_flag(ns: argparse.Namespace) -> str | None:
    if ns.strict:
        return "strict"
    if ns.relaxed:
        return "relaxed"
    # else: respect VALIDATION_MODE
    return None


def main(argv: list[str] | None = None) -> int:
    ns = parse_args(argv)

    if not ns.config:
        print("ERROR: --config is required", file=sys.stderr)
        return 2

    outputs_dir = Path(ns.outputs_dir).resolve()
    cfg_path = Path(ns.config).resolve()

    try:
        res = run_dir(
            cfg_path,
            outputs_dir,
            mode=ns.mode,
            fmt=ns.fmt,
            save_annual=ns.save_annual,
            validation=_validation_flag(ns),
            discount_rate=ns.discount_rate,
        )
    except SystemExit as e:
        # validation failures carry a message rather than an int code
        if isinstance(e.code, int):
            return e.code
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Wrote {res.summary_path}")
    return 0


__all__ = ["main", "parse_args"]
