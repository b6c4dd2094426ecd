# cryptopairs/stats/transforms.py
from __future__ import annotations
from typing import Tuple, Union
import numpy as np

from .descriptive import ArrayLike, as_array, mean, negligible_spread, stdev

__all__ = ["LOG_FLOOR", "safe_log", "log_returns", "rolling_zscore", "align_last"]

LOG_FLOOR = 1e-12


def safe_log(value: Union[float, ArrayLike]):
    """
    Natural log of max(value, 1e-12). Zero or negative prices map to
    log(1e-12) instead of -inf. Scalars in, float out; sequences in, array out.
    """
    if np.ndim(value) == 0:
        return float(np.log(max(float(value), LOG_FLOOR)))
    return np.log(np.maximum(as_array(value), LOG_FLOOR))


def log_returns(prices: ArrayLike) -> np.ndarray:
    """safe_log(p[i]) - safe_log(p[i-1]) for i in [1, n); length n-1."""
    lp = safe_log(as_array(prices))
    return np.diff(lp)


def rolling_zscore(series: ArrayLike, window: int) -> np.ndarray:
    """
    Rolling z-score with trailing mean/stdev (ddof=1).

    The window is clamped to >= 2. Before the first full window the available
    prefix is used instead (index i looks at min(window, i+1) points). Output
    is NaN wherever that window's stdev is not finite or negligible relative
    to its mean (see `negligible_spread`), so index 0 is always NaN.
    """
    s = as_array(series)
    w = max(2, int(window))
    out = np.full(s.size, np.nan)
    for i in range(s.size):
        chunk = s[max(0, i - w + 1): i + 1]
        sd = stdev(chunk)
        m = mean(chunk)
        if not negligible_spread(sd, m):
            out[i] = (s[i] - m) / sd
    return out


def align_last(a: ArrayLike, b: ArrayLike) -> Tuple[np.ndarray, np.ndarray]:
    """
    Truncate two series to a common length by keeping the most recent
    observations of each (series are ordered oldest -> newest).
    """
    x, y = as_array(a), as_array(b)
    n = min(x.size, y.size)
    return x[x.size - n:], y[y.size - n:]
