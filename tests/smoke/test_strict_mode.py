import subprocess
import sys
from pathlib import Path

import pytest

from proforma_metrics.scenario_runner import run_dir

ROOT = Path(__file__).resolve().parents[2]

RAGGED = """\
revenueRows:
  - { id: sales, label: Sales, values: ["0", "150", "150"] }
expenseRows:
  - { id: build, label: Build, values: ["100"] }
"""

def _write(p: Path, name: str, text: str) -> Path:
    f = p / name
    f.write_text(text, encoding="utf-8")
    return f

def test_strict_rejects_ragged_rows_in_runner(tmp_path: Path, monkeypatch):
    cfg = _write(tmp_path, "ragged.yaml", RAGGED)
    out = tmp_path / "out"
    monkeypatch.setenv("VALIDATION_MODE", "strict")
    with pytest.raises(SystemExit):
        run_dir(cfg, out, mode="metrics", fmt="csv", save_annual=False)

def test_relaxed_pads_ragged_rows_in_runner(tmp_path: Path, monkeypatch):
    cfg = _write(tmp_path, "ragged.yaml", RAGGED)
    monkeypatch.setenv("VALIDATION_MODE", "relaxed")
    res = run_dir(cfg, tmp_path / "out", mode="metrics", fmt="csv", save_annual=True)
    assert res.summary["cash_flows"]["values"] == [-100.0, 150.0, 150.0]
    assert res.results_path is not None and res.results_path.exists()

def test_cli_strict_flag_fails_process(tmp_path: Path):
    cfg = _write(tmp_path, "ragged.yaml", RAGGED)
    out = tmp_path / "out"
    with pytest.raises(subprocess.CalledProcessError):
        subprocess.check_call(
            [sys.executable, "-m", "proforma_metrics", "--config", str(cfg), "--out", str(out), "--strict"],
            cwd=ROOT,
        )
