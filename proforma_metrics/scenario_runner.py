# proforma_metrics/scenario_runner.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Any, Optional
from datetime import datetime
import json

from .adapters import RUNNERS, run_metrics
from .config import discount_rate_from, validation_mode
from .logger import get_logger
from .report import annual_frame, write_frame
from .validate import iter_input_files, load_snapshot_from_file, normalize_snapshot

logger = get_logger(__name__)

DEFAULT_FMT = "jsonl"


@dataclass
class RunResult:
    summary: Dict[str, Any]
    summary_path: Path
    results_path: Optional[Path] = None


def run_file(
    cfg_path: Path,
    *,
    mode: str = "metrics",
    validation: str | None = None,
    discount_rate: float | None = None,
):
    """Load, normalize and run one snapshot file. Returns (summary, snapshot)."""
    if mode not in RUNNERS:
        raise SystemExit(f"unknown mode: {mode}")
    data, settings = load_snapshot_from_file(cfg_path)
    snapshot = normalize_snapshot(data, mode=validation_mode(validation))
    if mode == "metrics":
        summary = run_metrics(snapshot, discount_rate_from(settings, discount_rate))
    else:
        summary = RUNNERS[mode](snapshot)
    return summary, snapshot


def run_dir(
    config: str | Path,
    out_dir: str | Path,
    *,
    mode: str = "metrics",
    fmt: str = DEFAULT_FMT,
    save_annual: bool = False,
    validation: str | None = None,
    discount_rate: float | None = None,
    **kwargs,
) -> RunResult:
    # legacy alias; an explicit fmt wins
    alias = kwargs.pop("format", None)
    if alias is not None and fmt == DEFAULT_FMT:
        fmt = alias
    if fmt not in ("csv", "jsonl"):
        raise SystemExit(f"unknown fmt: {fmt}")

    cfg_path = Path(config)
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    # Directory mode: run every snapshot; one summary keyed by file stem.
    if cfg_path.is_dir():
        summaries: Dict[str, Any] = {}
        for f in iter_input_files(cfg_path):
            summary, snapshot = run_file(f, mode=mode, validation=validation, discount_rate=discount_rate)
            summaries[f.stem] = summary
            if save_annual:
                write_frame(annual_frame(snapshot), out / f"{f.stem}_results_{stamp}.{fmt}", fmt)
        if not summaries:
            raise SystemExit(f"{cfg_path}: no snapshot files found")
        summary_path = out / "summary.json"
        summary_path.write_text(json.dumps(summaries, indent=2), encoding="utf-8")
        logger.info("wrote %d summaries to %s", len(summaries), summary_path)
        return RunResult(summary=summaries, summary_path=summary_path)

    if not cfg_path.is_file():
        raise SystemExit(f"{cfg_path}: config not found")

    summary, snapshot = run_file(cfg_path, mode=mode, validation=validation, discount_rate=discount_rate)

    summary_path = out / "summary.json"
    summary_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    logger.info("wrote %s", summary_path)

    results_path: Optional[Path] = None
    if save_annual:
        results_path = out / f"{cfg_path.stem}_results_{stamp}.{fmt}"
        write_frame(annual_frame(snapshot), results_path, fmt)
        logger.info("wrote %s", results_path)

    return RunResult(summary=summary, summary_path=summary_path, results_path=results_path)
