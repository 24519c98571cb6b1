# proforma_metrics/finance/irr.py
from __future__ import annotations

import math
from typing import Iterable, List, Optional

import numpy_financial as npf

# Bisection search domain: -99.99% to 500% per period.
IRR_LOWER = -0.9999
IRR_UPPER = 5.0


# ---------- NPV ----------
def npv(rate: float, cashflows: Iterable[float]) -> float:
    """
    Classic discounted cash flow, first flow undiscounted:
        NPV(r) = sum_{t=0..N} CF[t] / (1+r)^t
    May return inf/nan for rate <= -1; callers check finiteness.
    """
    cfs = [float(cf) for cf in cashflows]
    if not cfs:
        return 0.0
    return float(npf.npv(float(rate), cfs))


def has_sign_change(cashflows: Iterable[float]) -> bool:
    cfs = list(cashflows)
    return any(cf < 0 for cf in cfs) and any(cf > 0 for cf in cfs)


# ---------- IRR (periodic) ----------
def _irr_bisection(cashflows: List[float], *, tol: float, max_iter: int) -> Optional[float]:
    """
    Bracketed bisection on NPV(r)=0. Returns None if NPV does not change sign
    over the search domain or the bracket does not shrink below tol.
    """
    lo, hi = IRR_LOWER, IRR_UPPER
    f_lo = npv(lo, cashflows)
    f_hi = npv(hi, cashflows)

    # long series overflow at the lower bound (inf - inf)
    if math.isnan(f_lo) or math.isnan(f_hi):
        return None
    if f_lo == 0.0:
        return lo
    if f_hi == 0.0:
        return hi
    if (f_lo > 0 and f_hi > 0) or (f_lo < 0 and f_hi < 0):
        return None

    for _ in range(max_iter):
        mid = (lo + hi) / 2.0
        f_mid = npv(mid, cashflows)
        if abs(f_mid) < tol:
            return mid
        # keep the sub-interval where sign changes
        if (f_lo < 0 and f_mid > 0) or (f_lo > 0 and f_mid < 0):
            hi, f_hi = mid, f_mid
        else:
            lo, f_lo = mid, f_mid
        if hi - lo < tol:
            return (lo + hi) / 2.0
    return None


def irr(cashflows: Iterable[float], *, tol: float = 1e-7, max_iter: int = 200) -> Optional[float]:
    """
    Periodic IRR as a decimal rate (0.18 = 18%), or None when no real root
    is found. numpy-financial picks the real root closest to 10%; when it
    reports nan we fall back to bisection.
    """
    cfs = [float(x) for x in cashflows]
    if len(cfs) < 2 or not has_sign_change(cfs):
        return None

    val = float(npf.irr(cfs))
    if math.isfinite(val):
        return val
    return _irr_bisection(cfs, tol=tol, max_iter=max_iter)


__all__ = ["npv", "irr", "has_sign_change", "IRR_LOWER", "IRR_UPPER"]
