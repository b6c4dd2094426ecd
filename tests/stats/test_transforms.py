"""Tests for log, return, z-score and alignment transforms."""

import math

import numpy as np
import pandas as pd
import pytest

from cryptopairs.stats.transforms import LOG_FLOOR, align_last, log_returns, rolling_zscore, safe_log


class TestSafeLog:
    """Natural log with a floor for non-positive prices."""

    def test_positive_values(self):
        assert safe_log(math.e) == pytest.approx(1.0)

    def test_zero_and_negative_are_floored(self):
        floor = math.log(LOG_FLOOR)
        assert safe_log(0.0) == pytest.approx(floor)
        assert safe_log(-5.0) == pytest.approx(floor)

    def test_scalar_returns_float(self):
        assert isinstance(safe_log(2.0), float)

    def test_array_input(self):
        out = safe_log([1.0, 0.0, 10.0])
        assert out.shape == (3,)
        assert np.all(np.isfinite(out))
        assert out[0] == 0.0


class TestLogReturns:
    """Consecutive log price differences."""

    def test_length_is_n_minus_one(self):
        assert log_returns([100.0, 110.0, 99.0]).size == 2

    def test_values(self):
        r = log_returns([100.0, 200.0, 100.0])
        assert r[0] == pytest.approx(math.log(2))
        assert r[1] == pytest.approx(-math.log(2))

    def test_single_price_gives_empty(self):
        assert log_returns([100.0]).size == 0


class TestRollingZscore:
    """Trailing z-score with prefix windows before the first full window."""

    def test_first_value_is_nan(self, rng):
        z = rolling_zscore(rng.normal(size=20), 5)
        assert math.isnan(z[0])
        assert np.all(np.isfinite(z[1:]))

    def test_prefix_window_before_full(self):
        z = rolling_zscore([1.0, 2.0, 3.0], 10)
        assert z[1] == pytest.approx(0.5 / math.sqrt(0.5))
        assert z[2] == pytest.approx(1.0)

    def test_matches_pandas_rolling_after_warmup(self, rng):
        s = rng.normal(size=60)
        w = 12
        z = rolling_zscore(s, w)
        roll = pd.Series(s).rolling(w)
        expected = ((pd.Series(s) - roll.mean()) / roll.std(ddof=1)).to_numpy()
        np.testing.assert_allclose(z[w - 1:], expected[w - 1:], rtol=1e-9, atol=1e-12)

    def test_constant_window_is_nan(self):
        z = rolling_zscore([1.0, 1.0, 1.0, 1.0, 2.0], 3)
        assert np.all(np.isnan(z[:4]))
        assert np.isfinite(z[4])

    def test_window_clamped_to_two(self):
        s = [1.0, 3.0, 2.0, 5.0]
        np.testing.assert_array_equal(rolling_zscore(s, 1), rolling_zscore(s, 2))

    def test_empty(self):
        assert rolling_zscore([], 5).size == 0


class TestAlignLast:
    """Common-length truncation keeps the newest observations."""

    def test_keeps_tail(self):
        a, b = align_last([1, 2, 3, 4, 5], [10, 20])
        np.testing.assert_array_equal(a, [4.0, 5.0])
        np.testing.assert_array_equal(b, [10.0, 20.0])

    def test_equal_lengths_unchanged(self):
        a, b = align_last([1, 2], [3, 4])
        assert a.size == b.size == 2


def test_rolling_zscore_ignores_rounding_noise():
    s = np.full(50, -0.6931471805599453)
    s[::3] += 1e-16
    s[1::7] -= 2e-16
    assert np.all(np.isnan(rolling_zscore(s, 20)))
