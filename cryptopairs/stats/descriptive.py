# cryptopairs/stats/descriptive.py
"""
Scalar statistics over 1-D numeric sequences.

Policy: these helpers never raise on short or degenerate input; they return
NaN instead (documented per function). Result records built on top of them
(`RegressionResult`, `StationarityResult`) translate NaN into an explicit
undefined value.
"""
from __future__ import annotations
from typing import Sequence, Union
import numpy as np
import pandas as pd

__all__ = ["as_array", "mean", "stdev", "correlation", "RELATIVE_TOL", "negligible_spread"]

ArrayLike = Union[Sequence[float], np.ndarray, pd.Series]

# dispersion below this fraction of the level is floating-point noise
RELATIVE_TOL = 1e-12


def as_array(x: ArrayLike) -> np.ndarray:
    """1-D float64 view of `x` (pandas index is dropped)."""
    if isinstance(x, pd.Series):
        x = x.to_numpy(dtype=np.float64)
    return np.asarray(x, dtype=np.float64).reshape(-1)


def mean(x: ArrayLike) -> float:
    """Arithmetic mean; NaN for an empty series."""
    a = as_array(x)
    if a.size == 0:
        return np.nan
    return float(a.sum() / a.size)


def stdev(x: ArrayLike) -> float:
    """
    Sample standard deviation (ddof=1). NaN when n < 2; exactly 0.0 for a
    constant series.
    """
    a = as_array(x)
    n = a.size
    if n < 2:
        return np.nan
    if np.all(a == a[0]):
        return 0.0
    d = a - mean(a)
    return float(np.sqrt(np.dot(d, d) / (n - 1)))


def negligible_spread(sd: float, level: float) -> bool:
    """
    True when `sd` is not a usable dispersion around `level`: NaN, zero, or
    at most RELATIVE_TOL * max(1, |level|). A spread like log(A) - log(2A)
    is a constant plus ~1e-16 of rounding and must not be scored.
    """
    if sd is None or not np.isfinite(sd):
        return True
    scale = abs(level) if level is not None and np.isfinite(level) else 0.0
    return sd <= RELATIVE_TOL * max(1.0, scale)


def correlation(x: ArrayLike, y: ArrayLike) -> float:
    """
    Pearson correlation over the first min(len(x), len(y)) elements.
    NaN when fewer than 2 aligned points or either side has zero variance.
    """
    a, b = as_array(x), as_array(y)
    n = min(a.size, b.size)
    if n < 2:
        return np.nan
    a, b = a[:n], b[:n]
    if np.all(a == a[0]) or np.all(b == b[0]):
        return np.nan
    da = a - mean(a)
    db = b - mean(b)
    den = np.sqrt(np.dot(da, da) * np.dot(db, db))
    if not np.isfinite(den) or den == 0:
        return np.nan
    return float(np.clip(np.dot(da, db) / den, -1.0, 1.0))
