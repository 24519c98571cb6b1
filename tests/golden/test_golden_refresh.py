from __future__ import annotations
import json, runpy
from pathlib import Path

ROOT     = Path(__file__).resolve().parents[2]
SCRIPT   = ROOT / "scripts" / "golden_refresh.py"
BASELINE = ROOT / "tests" / "golden" / "summary.json"

def _main():
    return runpy.run_path(str(SCRIPT))["main"]

def test_committed_baseline_is_current():
    assert _main()(["--check"]) == 0

def test_refresh_writes_frozen_values(tmp_path):
    out = tmp_path / "golden" / "summary.json"
    assert _main()(["--baseline", str(out)]) == 0
    got = json.loads(out.read_text(encoding="utf-8"))
    want = json.loads(BASELINE.read_text(encoding="utf-8"))
    assert set(got) == {"irr", "npv", "cash_multiple"}
    for k, v in want.items():
        assert abs(got[k] - v) < 1e-6

def test_check_flags_a_stale_baseline(tmp_path, capsys):
    stale = tmp_path / "summary.json"
    stale.write_text(json.dumps({"irr": 0.0, "npv": 0.0, "cash_multiple": 0.0}), encoding="utf-8")
    assert _main()(["--baseline", str(stale), "--check"]) == 1
    assert "stale" in capsys.readouterr().err

def test_missing_scenario_exits_2(tmp_path):
    assert _main()(["--scenario", str(tmp_path / "nope.yaml"), "--baseline", str(tmp_path / "b.json")]) == 2
