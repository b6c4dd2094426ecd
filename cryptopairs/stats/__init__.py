# cryptopairs/stats/__init__.py
"""
Statistics utilities for the cryptopairs package:
- Descriptive statistics (mean, sample stdev, Pearson correlation)
- Series transforms (safe log, log returns, rolling z-score, alignment)
- Single-predictor OLS (hedge ratio)
- ADF-style stationarity test on a spread
"""

from .descriptive import mean, stdev, correlation
from .transforms import safe_log, log_returns, rolling_zscore, align_last
from .regression import Undefined, RegressionResult, ols_fit
from .stationarity import (
    CRITICAL_5PCT,
    CRITICAL_10PCT,
    MIN_ADF_OBS,
    StationarityResult,
    adf_test,
)

__all__ = [
    "mean",
    "stdev",
    "correlation",
    "safe_log",
    "log_returns",
    "rolling_zscore",
    "align_last",
    "Undefined",
    "RegressionResult",
    "ols_fit",
    "CRITICAL_5PCT",
    "CRITICAL_10PCT",
    "MIN_ADF_OBS",
    "StationarityResult",
    "adf_test",
]
