# cryptopairs/stats/regression.py
"""
Single-predictor ordinary least squares.

Deliberately minimal: no weighting, no regularization, no outlier handling.
It is a fast hedge-ratio heuristic for screening, not a precision estimator.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import numpy as np

from .descriptive import ArrayLike, as_array, mean

__all__ = ["Undefined", "RegressionResult", "ols_fit"]


class Undefined(str, Enum):
    """Why a statistic could not be computed."""

    INSUFFICIENT_DATA = "insufficient data"
    DEGENERATE_VARIANCE = "zero or non-finite variance"
    NO_DEGREES_OF_FREEDOM = "no residual degrees of freedom"
    DEGENERATE_STDERR = "zero or non-finite standard error"


@dataclass(frozen=True)
class RegressionResult:
    """y ~ intercept + slope * x. Both are None when `reason` is set."""

    slope: Optional[float]
    intercept: Optional[float]
    reason: Optional[Undefined] = None

    @property
    def defined(self) -> bool:
        return self.reason is None

    @classmethod
    def undefined(cls, reason: Undefined) -> "RegressionResult":
        return cls(slope=None, intercept=None, reason=reason)


def ols_fit(x: ArrayLike, y: ArrayLike) -> RegressionResult:
    """
    Fit y = alpha + beta * x over the first min(len(x), len(y)) points.

    beta = cov(x, y) / var(x), alpha = mean(y) - beta * mean(x).
    Undefined when fewer than 2 aligned points, or var(x) is zero or not finite.
    """
    a, b = as_array(x), as_array(y)
    n = min(a.size, b.size)
    if n < 2:
        return RegressionResult.undefined(Undefined.INSUFFICIENT_DATA)
    a, b = a[:n], b[:n]
    if np.all(a == a[0]):
        return RegressionResult.undefined(Undefined.DEGENERATE_VARIANCE)

    mx, my = mean(a), mean(b)
    dx = a - mx
    dy = b - my
    sxx = float(np.dot(dx, dx))
    if not np.isfinite(sxx) or sxx == 0:
        return RegressionResult.undefined(Undefined.DEGENERATE_VARIANCE)

    beta = float(np.dot(dx, dy)) / sxx
    if not np.isfinite(beta):
        return RegressionResult.undefined(Undefined.DEGENERATE_VARIANCE)
    alpha = my - beta * mx
    return RegressionResult(slope=beta, intercept=float(alpha))
