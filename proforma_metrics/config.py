from __future__ import annotations

from typing import Any, Dict, Tuple
import os
import io
import yaml

# ---------- Environment defaults ----------
DISCOUNT_RATE = float(os.getenv("PROFORMA_DISCOUNT_RATE", "0.10"))
IRR_TOLERANCE = float(os.getenv("PROFORMA_IRR_TOLERANCE", "1e-7"))
IRR_MAX_ITER = int(os.getenv("PROFORMA_IRR_MAX_ITER", "200"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s [%(levelname)s] %(name)s: %(message)s")

SETTINGS_KEYS = ("discount_rate",)


def validation_mode(flag: str | None = None) -> str:
    """Explicit flag wins; else VALIDATION_MODE; else relaxed."""
    if flag in ("strict", "relaxed"):
        return flag
    env = (os.environ.get("VALIDATION_MODE") or "").lower()
    return env if env in ("strict", "relaxed") else "relaxed"


def _split_snapshot_and_settings(d: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    settings = d.pop("settings", None) or {}
    if not isinstance(settings, dict):
        raise ValueError("'settings' must be a mapping")
    unknown = [k for k in settings if k not in SETTINGS_KEYS]
    if unknown:
        raise ValueError(f"unknown settings keys: {unknown}")
    return d, settings


def load_model_config(
    source: str | os.PathLike | io.StringIO,
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Load a YAML (or JSON, which YAML accepts) snapshot document from a path
    or text stream. Returns (snapshot_dict, settings).
    """
    text: str
    if hasattr(source, "read"):
        text = str(source.read())
    else:
        p = os.fspath(source)
        with open(p, "r", encoding="utf-8") as f:
            text = f.read()

    try:
        cfg = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"could not parse snapshot document: {e}") from e
    if not isinstance(cfg, dict):
        raise ValueError("snapshot document must be a mapping at the top level")

    return _split_snapshot_and_settings(dict(cfg))


def discount_rate_from(settings: Dict[str, Any], override: float | None = None) -> float:
    if override is not None:
        return float(override)
    rate = settings.get("discount_rate")
    return float(rate) if rate is not None else DISCOUNT_RATE
