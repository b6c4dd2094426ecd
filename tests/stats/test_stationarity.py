"""Tests for the single-lag Dickey-Fuller stationarity check."""

import numpy as np
import pytest

from cryptopairs.stats.regression import Undefined
from cryptopairs.stats.stationarity import (
    CRITICAL_5PCT,
    CRITICAL_10PCT,
    MIN_ADF_OBS,
    adf_test,
)


def ar1(seed: int, n: int, phi: float) -> np.ndarray:
    rng = np.random.default_rng(seed)
    e = rng.normal(size=n)
    y = np.zeros(n)
    for t in range(1, n):
        y[t] = phi * y[t - 1] + e[t]
    return y


class TestAdfUndefined:
    """Inputs for which no verdict is produced."""

    def test_too_short(self):
        res = adf_test(np.arange(MIN_ADF_OBS - 1, dtype=float))
        assert res.t_stat is None and res.pass5 is None and res.pass10 is None
        assert res.reason is Undefined.INSUFFICIENT_DATA

    def test_minimum_length_is_defined(self):
        assert adf_test(ar1(1, MIN_ADF_OBS, 0.5)).defined

    def test_constant_series(self):
        res = adf_test([0.0] * 100)
        assert not res.defined
        assert res.reason is Undefined.DEGENERATE_VARIANCE

    def test_all_nan(self):
        assert adf_test(np.full(100, np.nan)).t_stat is None


class TestAdfVerdicts:
    """Mean-reverting vs random-walk behaviour of the single-lag test."""

    def test_mean_reverting_passes(self):
        res = adf_test(ar1(42, 250, 0.5))
        assert res.t_stat < CRITICAL_5PCT
        assert res.pass5 is True
        assert res.pass10 is True

    def test_random_walks_mostly_fail(self):
        passes5 = [adf_test(ar1(seed, 200, 1.0)).pass5 for seed in range(20)]
        passes10 = [adf_test(ar1(seed, 200, 1.0)).pass10 for seed in range(20)]
        assert sum(passes5) <= 5
        assert sum(passes10) <= 8

    def test_pass_flags_follow_critical_values(self):
        for seed in range(10):
            res = adf_test(ar1(seed, 120, 0.9))
            assert res.pass5 == (res.t_stat < CRITICAL_5PCT)
            assert res.pass10 == (res.t_stat < CRITICAL_10PCT)
            if res.pass5:
                assert res.pass10

    def test_t_stat_matches_statsmodels_ols(self):
        sm = pytest.importorskip("statsmodels.api")
        y = ar1(3, 300, 0.8)
        dy, ylag = np.diff(y), y[:-1]
        expected = sm.OLS(dy, sm.add_constant(ylag)).fit().tvalues[1]
        assert adf_test(y).t_stat == pytest.approx(expected, rel=1e-8)


def test_noise_around_a_constant_is_undefined():
    rng = np.random.default_rng(11)
    y = 3.0 + rng.normal(scale=1e-16, size=200)
    res = adf_test(y)
    assert res.t_stat is None and res.pass5 is None
    assert res.reason is Undefined.DEGENERATE_VARIANCE
