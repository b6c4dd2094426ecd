# cryptopairs/strategies/signals.py
"""
Pair signal evaluation: hedge ratio -> log spread -> rolling z-score -> action.

Exports
-------
- Action
- PairSignal
- classify_action(z, entry_threshold)
- evaluate_pair(prices_a, prices_b, config)

`evaluate_pair` is a pure function of its inputs. The exit threshold travels
with the result as advisory metadata; no position state is tracked here.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional
import numpy as np
import pandas as pd

from cryptopairs.config import SignalConfig
from cryptopairs.stats.descriptive import ArrayLike, mean, negligible_spread, stdev
from cryptopairs.stats.regression import ols_fit
from cryptopairs.stats.transforms import align_last, rolling_zscore, safe_log

__all__ = ["Action", "PairSignal", "classify_action", "evaluate_pair"]


class Action(str, Enum):
    SHORT_A_LONG_B = "SHORT A / LONG B"
    LONG_A_SHORT_B = "LONG A / SHORT B"
    WAIT = "WAIT"

    def describe(self, symbol_a: str = "A", symbol_b: str = "B") -> str:
        if self is Action.SHORT_A_LONG_B:
            return f"SHORT {symbol_a} / LONG {symbol_b}"
        if self is Action.LONG_A_SHORT_B:
            return f"LONG {symbol_a} / SHORT {symbol_b}"
        return "WAIT"


def _finite_or_none(v: float) -> Optional[float]:
    return float(v) if v is not None and np.isfinite(v) else None


@dataclass(frozen=True, eq=False)
class PairSignal:
    """
    Snapshot of one pair evaluation. Scalars are None when undefined;
    `spread` and `zscores` hold NaN where undefined.
    """

    hedge_ratio: Optional[float]
    intercept: Optional[float]
    spread_now: Optional[float]
    rolling_mean: Optional[float]
    rolling_std: Optional[float]
    z_now: Optional[float]
    action: Action
    entry_threshold: float
    exit_threshold: float
    window: int
    beta_window: int
    spread: np.ndarray
    zscores: np.ndarray

    @property
    def n_obs(self) -> int:
        return int(self.spread.size)

    def frame(self, index: Optional[pd.Index] = None) -> pd.DataFrame:
        """Spread and z-score as a DataFrame (index defaults to a RangeIndex)."""
        return pd.DataFrame({"spread": self.spread, "z": self.zscores}, index=index)


def classify_action(z: Optional[float], entry_threshold: float) -> Action:
    """z >= entry -> short A/long B; z <= -entry -> long A/short B; else wait."""
    if z is None or not np.isfinite(z):
        return Action.WAIT
    if z >= entry_threshold:
        return Action.SHORT_A_LONG_B
    if z <= -entry_threshold:
        return Action.LONG_A_SHORT_B
    return Action.WAIT


def evaluate_pair(
    prices_a: ArrayLike,
    prices_b: ArrayLike,
    config: SignalConfig | None = None,
) -> PairSignal:
    """
    Evaluate the spread log(A) - beta * log(B) for two close-price histories
    ordered oldest -> newest.

    - Unequal lengths: the most recent n = min(len(A), len(B)) bars are kept.
    - beta is fit once, on the last min(beta_lookback, n) log prices.
    - The spread uses that single beta over the full aligned history.
    - z-score window is min(z_lookback, n).
    """
    cfg = config or SignalConfig()
    a, b = align_last(prices_a, prices_b)
    n = a.size
    y = safe_log(a)
    x = safe_log(b)

    w_beta = min(cfg.beta_lookback, n)
    w_z = min(cfg.z_lookback, n)
    fit = ols_fit(x[n - w_beta:], y[n - w_beta:])

    if fit.defined:
        spread = y - fit.slope * x
    else:
        spread = np.full(n, np.nan)
    zscores = rolling_zscore(spread, w_z)

    if n:
        tail = spread[n - max(2, w_z):]
        spread_now = _finite_or_none(spread[-1])
        roll_mean = _finite_or_none(mean(tail))
        sd = stdev(tail)
        roll_std = None if negligible_spread(sd, roll_mean) else float(sd)
        z_now = _finite_or_none(zscores[-1])
    else:
        spread_now = roll_mean = roll_std = z_now = None

    return PairSignal(
        hedge_ratio=fit.slope,
        intercept=fit.intercept,
        spread_now=spread_now,
        rolling_mean=roll_mean,
        rolling_std=roll_std,
        z_now=z_now,
        action=classify_action(z_now, cfg.entry_threshold),
        entry_threshold=cfg.entry_threshold,
        exit_threshold=cfg.exit_threshold,
        window=w_z,
        beta_window=w_beta,
        spread=spread,
        zscores=zscores,
    )
