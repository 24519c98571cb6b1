import io
from pathlib import Path

import pytest

from proforma_metrics.config import load_model_config
from proforma_metrics.validate import _main, load_snapshot_from_file, normalize_snapshot

ROOT = Path(__file__).resolve().parents[1]
SAMPLE = ROOT / "proforma_metrics" / "inputs" / "sample_proforma.yaml"


def test_normalize_camel_case_document():
    snap = normalize_snapshot({
        "revenueRows": [{"id": "sales", "label": "Sales", "values": [0, "150", 150.5], "total": 1}],
        "expenseRows": [{"id": "t", "label": "Total", "values": ["1", "1", "1"], "isCalculated": True}],
        "periods": {"type": "monthly", "startDate": "2025-01-01", "count": 3},
    })
    sales = snap.revenue[0]
    assert sales.values == ("0", "150", "150.5")
    assert sales.total == 300.5  # recomputed, not trusted
    assert snap.expense[0].is_calculated
    assert snap.periods.period_type == "monthly"
    assert snap.periods.count == 3

def test_normalize_snake_case_and_string_flags():
    snap = normalize_snapshot({
        "revenue_rows": [{"id": "a", "values": ["1"]}],
        "debt_financing_rows": [{"id": "draws", "values": ["2"], "is_calculated": "false"}],
    })
    assert snap.revenue[0].id == "a"
    assert snap.debt_financing[0].is_calculated is False

def test_relaxed_pads_truncates_and_repairs():
    snap = normalize_snapshot({
        "revenueRows": [{"id": "sales", "values": ["1", "2", "3"]}],
        "expenseRows": [
            {"label": "no id", "values": ["1"]},
            "garbage",
            {"id": "long", "values": ["1", "2", "3", "4"]},
        ],
        "lotsRows": {"not": "a list"},
    })
    assert [r.id for r in snap.expense] == ["expense-1", "long"]
    assert snap.expense[0].values == ("1", "", "")
    assert snap.expense[1].values == ("1", "2", "3")
    assert snap.lots == ()

def test_values_keyed_by_period_label():
    snap = normalize_snapshot({"revenueRows": [{"id": "s", "values": {"Y1": "5", "Y2": "6"}}]})
    assert snap.revenue[0].values == ("5", "6")

@pytest.mark.parametrize("doc", [
    {"revenueRows": [{"id": "a", "values": ["1"]}], "theme": "dark"},
    {"revenueRows": [{"values": ["1"]}]},
    {"revenueRows": [{"id": "a", "values": ["1"]}, {"id": "a", "values": ["2"]}]},
    {"revenueRows": [{"id": "a", "values": ["1", "2"]}], "expenseRows": [{"id": "b", "values": ["1"]}]},
    {"revenueRows": [{"id": "a", "values": "1"}]},
    {"periods": {"type": "weekly"}},
])
def test_strict_rejects(doc):
    with pytest.raises(SystemExit):
        normalize_snapshot(doc, mode="strict")

def test_non_mapping_snapshot_rejected():
    with pytest.raises(SystemExit):
        normalize_snapshot(["not", "a", "mapping"])

def test_load_model_config_splits_settings():
    data, settings = load_model_config(io.StringIO("settings: { discount_rate: 0.08 }\nrevenueRows: []\n"))
    assert settings == {"discount_rate": 0.08}
    assert "settings" not in data

def test_load_model_config_rejects_unknown_settings():
    with pytest.raises(ValueError):
        load_model_config(io.StringIO("settings: { theme: dark }\n"))

def test_load_snapshot_from_directory_exits(tmp_path):
    with pytest.raises(SystemExit):
        load_snapshot_from_file(tmp_path)

def test_sample_snapshot_is_strictly_valid():
    data, settings = load_snapshot_from_file(SAMPLE)
    snap = normalize_snapshot(data, mode="strict")
    assert settings["discount_rate"] == 0.10
    assert len(snap.debt_financing) == 6
    assert snap.revenue[0].per_unit == pytest.approx(1_300_000 / 14)

def test_validate_cli(tmp_path, capsys):
    bad = tmp_path / "bad.yaml"
    bad.write_text("revenueRows: [{ values: ['1'] }]\n", encoding="utf-8")
    assert _main([str(SAMPLE), "--mode", "strict"]) == 0
    assert _main([str(bad), "--mode", "strict"]) == 1
    assert _main([str(tmp_path / "empty_dir_missing")]) == 1
    assert "OK:" in capsys.readouterr().out

def test_hand_entered_balances_are_recomputed():
    snap = normalize_snapshot({
        "debtFinancingRows": [
            {"id": "beginning-balance", "label": "Opening", "values": ["100", "7", "7"]},
            {"id": "draws", "values": ["50", "0", "0"]},
            {"id": "principal-repayment", "values": ["0", "30", "120"]},
            {"id": "ending-balance", "values": ["999", "999", "999"], "isCalculated": True},
        ],
    }, mode="strict")
    beginning, ending = snap.debt_financing[0], snap.debt_financing[3]
    assert [float(v) for v in beginning.values] == [100.0, 150.0, 120.0]
    assert [float(v) for v in ending.values] == [150.0, 120.0, 0.0]
    assert beginning.label == "Opening"
    assert beginning.is_calculated and ending.is_calculated
    assert ending.total == 270.0
    # no balance rows are invented
    only_draws = normalize_snapshot({"debtFinancingRows": [{"id": "draws", "values": ["5"]}]})
    assert [r.id for r in only_draws.debt_financing] == ["draws"]
