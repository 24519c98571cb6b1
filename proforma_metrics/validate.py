# proforma_metrics/validate.py
from __future__ import annotations
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .config import load_model_config, validation_mode
from .finance.cashflow import period_count, with_derived_totals
from .finance.debt import with_balances
from .logger import get_logger
from .schema import CATEGORY_SCHEMA, COMPOSITE_CONSTRAINTS, PERIOD_KEYS, PERIOD_TYPES, ROW_SCHEMA, top_level_keys
from .types import PeriodMeta, Row, TableSnapshot

logger = get_logger(__name__)


def _pick(d: Dict[str, Any], keys: Iterable[str], default: Any = None) -> Any:
    for k in keys:
        if k in d:
            return d[k]
    return default


def _as_bool(v: Any) -> bool:
    if isinstance(v, str):
        return v.strip().lower() in ("true", "yes", "1")
    return bool(v)


def _cell_text(v: Any) -> str:
    return "" if v is None else str(v)


def _parse_values(raw: Any, *, where: str, strict: bool) -> Tuple[str, ...]:
    if isinstance(raw, (list, tuple)):
        return tuple(_cell_text(v) for v in raw)
    if isinstance(raw, dict):
        # older snapshots keyed cells by period label
        return tuple(_cell_text(v) for v in raw.values())
    if strict:
        raise SystemExit(f"{where}: 'values' must be a list")
    logger.debug("%s: unusable values %r; treating as empty", where, raw)
    return ()


def _parse_row(raw: Any, *, category: str, index: int, strict: bool) -> Optional[Row]:
    where = f"{category}[{index}]"
    if not isinstance(raw, dict):
        if strict:
            raise SystemExit(f"{where}: row must be a mapping")
        return None

    if strict:
        missing = [name for name, entry in ROW_SCHEMA.items() if entry["required"] and _pick(raw, entry["keys"]) is None]
        if missing:
            raise SystemExit(f"{where}: missing required row keys: {missing}")

    row_id = _pick(raw, ROW_SCHEMA["id"]["keys"])
    return Row(
        id=str(row_id) if row_id is not None else f"{category}-{index + 1}",
        label=str(_pick(raw, ROW_SCHEMA["label"]["keys"], "") or ""),
        values=_parse_values(_pick(raw, ROW_SCHEMA["values"]["keys"]), where=where, strict=strict),
        is_calculated=_as_bool(_pick(raw, ROW_SCHEMA["is_calculated"]["keys"], False)),
    )


def _parse_periods(raw: Any, *, strict: bool) -> PeriodMeta:
    if not isinstance(raw, dict):
        if raw is not None and strict:
            raise SystemExit("periods must be a mapping")
        return PeriodMeta()
    ptype = str(raw.get("type", raw.get("period_type", "yearly")) or "yearly").lower()
    if ptype not in PERIOD_TYPES:
        if strict:
            raise SystemExit(f"periods.type must be one of {list(PERIOD_TYPES)}: {ptype!r}")
        ptype = "yearly"
    count = raw.get("count")
    try:
        count = int(count) if count is not None else None
    except (TypeError, ValueError):
        if strict:
            raise SystemExit(f"periods.count must be an integer: {count!r}")
        count = None
    start = raw.get("startDate", raw.get("start_date"))
    return PeriodMeta(
        period_type=ptype,
        start_date=str(start) if start is not None else None,
        count=count,
    )


def _fit(row: Row, n: int) -> Row:
    if len(row.values) == n:
        return row
    vals = row.values[:n] + ("",) * max(0, n - len(row.values))
    return Row(id=row.id, label=row.label, values=vals, is_calculated=row.is_calculated)


def normalize_snapshot(data: Dict[str, Any], *, mode: str = "relaxed") -> TableSnapshot:
    """
    Turn a snapshot document into a TableSnapshot:
      - relaxed: tolerate junk (skip non-mapping rows, synthesize ids,
        zero-pad/truncate rows to the period count)
      - strict : reject unknown top-level keys, malformed rows, duplicate
        ids and rows whose length differs from the period count
    Debt balance rows, row totals and per-unit values are always recomputed.
    """
    strict = mode == "strict"
    if not isinstance(data, dict):
        raise SystemExit("snapshot must be a mapping")

    if strict:
        unknown = [k for k in data.keys() if k not in top_level_keys()]
        if unknown:
            raise SystemExit(f"unknown top-level keys (strict mode): {unknown}")

    categories: Dict[str, Tuple[Row, ...]] = {}
    for category, entry in CATEGORY_SCHEMA.items():
        raw_rows = _pick(data, entry["keys"], []) or []
        if not isinstance(raw_rows, list):
            if strict:
                raise SystemExit(f"{category}: rows must be a list")
            raw_rows = []
        rows = [_parse_row(r, category=category, index=i, strict=strict) for i, r in enumerate(raw_rows)]
        parsed = tuple(r for r in rows if r is not None)
        if strict:
            for c in COMPOSITE_CONSTRAINTS:
                if not c["check"](parsed):
                    raise SystemExit(f"{category}: {c['message']}")
        categories[entry["field"]] = parsed

    snapshot = TableSnapshot(periods=_parse_periods(_pick(data, PERIOD_KEYS), strict=strict), **categories)

    n = period_count(snapshot)
    if n is not None:
        fitted: Dict[str, Tuple[Row, ...]] = {}
        for category, entry in CATEGORY_SCHEMA.items():
            rows = categories[entry["field"]]
            bad = [r.id for r in rows if len(r.values) != n]
            if bad and strict:
                raise SystemExit(f"{category}: rows {bad} do not have {n} periods")
            fitted[entry["field"]] = tuple(_fit(r, n) for r in rows)
        fitted["debt_financing"] = with_balances(fitted["debt_financing"], n)
        snapshot = TableSnapshot(periods=snapshot.periods, **fitted)

    return with_derived_totals(snapshot)


def validate_snapshot_dict(data: Dict[str, Any], *, mode: str = "relaxed") -> None:
    normalize_snapshot(data, mode=mode)


def load_snapshot_from_file(path: Path) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """Returns (snapshot_dict, settings)."""
    p = Path(path)
    if p.is_dir():
        # scenario_runner handles directories; keep this function file-only
        raise SystemExit(f"{p} is a directory (expected a file)")
    try:
        return load_model_config(p)
    except ValueError as e:
        raise SystemExit(f"{p}: {e}") from e


def iter_input_files(p: Path) -> Iterable[Path]:
    if p.is_file():
        yield p
    elif p.is_dir():
        for ext in ("*.yaml", "*.yml", "*.json"):
            yield from sorted(p.glob(ext))


def _main(argv: List[str] | None = None) -> int:
    import argparse
    parser = argparse.ArgumentParser(prog="proforma_metrics.validate", add_help=True)
    parser.add_argument("paths", nargs="+", help="YAML/JSON snapshot files or directories to validate")
    parser.add_argument("--mode", choices=["strict", "relaxed"], default=None, help="validation mode")
    args = parser.parse_args(argv)

    mode = validation_mode(args.mode)
    had_error = False

    for raw in args.paths:
        target = Path(raw)
        any_seen = False
        for f in iter_input_files(target):
            any_seen = True
            try:
                data, _ = load_snapshot_from_file(f)
                validate_snapshot_dict(data, mode=mode)
                print(f"OK: {f}")
            except SystemExit as e:
                print(f"{f}: {e}", file=sys.stderr)
                had_error = True
        if not any_seen:
            print(f"{target}: no YAML/JSON files found", file=sys.stderr)
            had_error = True

    return 1 if had_error else 0


if __name__ == "__main__":
    raise SystemExit(_main())
