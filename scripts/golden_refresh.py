"""
Rebuild tests/golden/summary.json from the sample snapshot.

    python scripts/golden_refresh.py [--scenario PATH] [--baseline PATH] [--check]

The snapshot runs in-process under strict validation; only the raw values
of the frozen metrics are written. --check compares instead of writing.
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from proforma_metrics.scenario_runner import run_file  # noqa: E402

FROZEN_KEYS = ("irr", "npv", "cash_multiple")
TOLERANCE = 1e-6


def frozen_values(scenario: Path) -> Dict[str, float]:
    summary, _ = run_file(scenario, mode="metrics", validation="strict")
    not_applicable = [k for k in FROZEN_KEYS if summary[k]["reason"] is not None]
    if not_applicable:
        raise SystemExit(f"{scenario}: frozen metrics not applicable: {not_applicable}")
    return {k: float(summary[k]["value"]) for k in FROZEN_KEYS}


def drifted(got: Dict[str, float], want: Dict[str, float]) -> List[str]:
    return [k for k in FROZEN_KEYS if k not in want or abs(got[k] - float(want[k])) >= TOLERANCE]


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="golden_refresh", description="Refresh the golden metrics baseline")
    p.add_argument("--scenario", type=Path, default=ROOT / "proforma_metrics" / "inputs" / "sample_proforma.yaml")
    p.add_argument("--baseline", type=Path, default=ROOT / "tests" / "golden" / "summary.json")
    p.add_argument("--check", action="store_true", help="exit 1 if the baseline is stale; write nothing")
    ns = p.parse_args(argv)

    if not ns.scenario.is_file():
        print(f"[x] Missing scenario: {ns.scenario}", file=sys.stderr)
        return 2

    got = frozen_values(ns.scenario)

    if ns.check:
        want = json.loads(ns.baseline.read_text(encoding="utf-8")) if ns.baseline.exists() else {}
        stale = drifted(got, want)
        if stale:
            print(f"[x] {ns.baseline} is stale for {stale}", file=sys.stderr)
            return 1
        print(f"[ok] {ns.baseline} is current")
        return 0

    ns.baseline.parent.mkdir(parents=True, exist_ok=True)
    ns.baseline.write_text(json.dumps(got, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    print(f"[ok] Wrote baseline {ns.baseline}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
