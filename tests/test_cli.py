import json

import pytest

from proforma_metrics import cli

SNAPSHOT = """\
revenueRows:
  - { id: sales, label: Sales, values: ["0", "60", "60"] }
expenseRows:
  - { id: build, label: Build, values: ["100", "0", "0"] }
"""

def _write(tmp_path, name="s1.yaml", text=SNAPSHOT):
    f = tmp_path / name
    f.write_text(text, encoding="utf-8")
    return f

def test_cli_missing_config():
    assert cli.main([]) == 2

def test_cli_valid_metrics(tmp_path):
    cfg = _write(tmp_path)
    out = tmp_path / "out"
    assert cli.main(["--config", str(cfg), "--outputs-dir", str(out)]) == 0
    summary = json.loads((out / "summary.json").read_text(encoding="utf-8"))
    assert summary["irr"]["formatted"] == "13.07%"
    assert summary["cash_flows"]["values"] == [-100.0, 60.0, 60.0]

def test_cli_valid_directory_jsonl(tmp_path):
    in_dir = tmp_path / "sc"
    out_dir = tmp_path / "out"
    in_dir.mkdir()
    _write(in_dir, "a.yaml")
    _write(in_dir, "b.yml")
    rc = cli.main(["--mode", "cashflows", "--config", str(in_dir), "--outputs-dir", str(out_dir),
                   "--format", "jsonl", "--save-annual"])
    assert rc == 0
    summary = json.loads((out_dir / "summary.json").read_text(encoding="utf-8"))
    assert set(summary) == {"a", "b"}
    assert len(list(out_dir.glob("a_results_*.jsonl"))) == 1

def test_cli_discount_rate_flag(tmp_path):
    cfg = _write(tmp_path)
    out = tmp_path / "out"
    assert cli.main(["--config", str(cfg), "--outputs-dir", str(out), "--discount-rate", "0"]) == 0
    summary = json.loads((out / "summary.json").read_text(encoding="utf-8"))
    assert summary["npv"]["value"] == pytest.approx(20.0)
    assert summary["discount_rate"] == 0.0

def test_cli_strict_rejects_unknown_keys(tmp_path):
    cfg = _write(tmp_path, text=SNAPSHOT + "theme: dark\n")
    out = tmp_path / "out"
    assert cli.main(["--config", str(cfg), "--outputs-dir", str(out), "--relaxed"]) == 0
    assert cli.main(["--config", str(cfg), "--outputs-dir", str(out), "--strict"]) == 2

def test_cli_missing_file_exits_2(tmp_path):
    assert cli.main(["--config", str(tmp_path / "nope.yaml"), "--outputs-dir", str(tmp_path / "o")]) == 2

def test_cli_invalid_mode_exits_2():
    # argparse enforces choices; simulate by calling parse directly and catching SystemExit
    with pytest.raises(SystemExit) as ei:
        cli.parse_args(["--mode", "nope"])
    assert ei.value.code == 2
