# cryptopairs/stats/stationarity.py
"""
Lightweight Dickey-Fuller style stationarity test for a spread/residual
series (the second step of an Engle-Granger check).

Model:  Δy_t = a + b * y_{t-1} + e_t, fit by OLS with a single lag.

Limitations (callers should surface these as-is):
- The verdicts compare the t-statistic of b against fixed approximate
  critical values for a no-trend Dickey-Fuller test (5%: -2.86, 10%: -2.57).
  They are NOT exact p-values.
- No lag augmentation, no trend term, no small-sample correction.

A more negative t-statistic is stronger evidence of mean reversion.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import numpy as np

from .descriptive import ArrayLike, as_array, mean, negligible_spread, stdev
from .regression import Undefined, ols_fit

__all__ = [
    "MIN_ADF_OBS",
    "CRITICAL_5PCT",
    "CRITICAL_10PCT",
    "StationarityResult",
    "adf_test",
]

MIN_ADF_OBS = 60
CRITICAL_5PCT = -2.86
CRITICAL_10PCT = -2.57


@dataclass(frozen=True)
class StationarityResult:
    """t-statistic of the lag coefficient plus coarse pass flags (None = undefined)."""

    t_stat: Optional[float]
    pass5: Optional[bool]
    pass10: Optional[bool]
    reason: Optional[Undefined] = None

    @property
    def defined(self) -> bool:
        return self.reason is None

    @classmethod
    def undefined(cls, reason: Undefined) -> "StationarityResult":
        return cls(t_stat=None, pass5=None, pass10=None, reason=reason)


def adf_test(y: ArrayLike) -> StationarityResult:
    """
    Single-lag ADF regression on `y`.

    Requires at least 60 observations; otherwise, or when the lagged series
    has negligible variance relative to its level, the residual dof is not
    positive, or the standard error of b is zero/non-finite, every field of
    the result is undefined.
    """
    s = as_array(y)
    if s.size < MIN_ADF_OBS:
        return StationarityResult.undefined(Undefined.INSUFFICIENT_DATA)

    dy = np.diff(s)
    y_lag = s[:-1]
    n_obs = dy.size

    # a level-constant series carrying only rounding noise has no dynamics to test
    if negligible_spread(stdev(y_lag), mean(y_lag)):
        return StationarityResult.undefined(Undefined.DEGENERATE_VARIANCE)

    fit = ols_fit(y_lag, dy)
    if not fit.defined:
        return StationarityResult.undefined(fit.reason)
    b, a = fit.slope, fit.intercept

    dof = n_obs - 2
    if dof <= 0:
        return StationarityResult.undefined(Undefined.NO_DEGREES_OF_FREEDOM)

    resid = dy - (a + b * y_lag)
    sse = float(np.dot(resid, resid))
    sigma2 = sse / dof
    # (n_obs - 1) * var(y_lag) is the centered sum of squares of y_lag
    d = y_lag - y_lag.mean()
    sxx = float(np.dot(d, d))
    if not np.isfinite(sxx) or sxx <= 0:
        return StationarityResult.undefined(Undefined.DEGENERATE_VARIANCE)
    se_b = np.sqrt(sigma2 / sxx)
    if not np.isfinite(se_b) or se_b == 0:
        return StationarityResult.undefined(Undefined.DEGENERATE_STDERR)

    t_stat = float(b / se_b)
    return StationarityResult(
        t_stat=t_stat,
        pass5=t_stat < CRITICAL_5PCT,
        pass10=t_stat < CRITICAL_10PCT,
    )
