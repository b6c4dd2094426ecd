"""Pytest configuration and shared fixtures."""

from typing import Callable, Dict, List, Sequence

import numpy as np
import pytest

from cryptopairs.market_data.binance import PriceBar

HOUR_MS = 3_600_000


def make_bars(prices: Sequence[float], start_ms: int = 1_700_000_000_000) -> List[PriceBar]:
    """Hourly PriceBars whose close follows `prices`."""
    bars = []
    for i, p in enumerate(prices):
        t0 = start_ms + i * HOUR_MS
        bars.append(PriceBar(
            open_time=t0, close_time=t0 + HOUR_MS - 1,
            open=float(p), high=float(p) * 1.001, low=float(p) * 0.999,
            close=float(p), volume=1000.0,
        ))
    return bars


def random_walk_prices(rng: np.random.Generator, n: int, start: float = 100.0, vol: float = 0.01) -> np.ndarray:
    return start * np.exp(np.cumsum(rng.normal(0.0, vol, n)))


def cointegrated_prices(rng: np.random.Generator, base: np.ndarray, loading: float = 0.8,
                        noise: float = 0.002, phi: float = 0.5) -> np.ndarray:
    """
    Alt prices with ln(alt) = loading * ln(base) + 0.5 + u, u an AR(1) process.
    """
    u = np.zeros(base.size)
    e = rng.normal(0.0, noise, base.size)
    for t in range(1, base.size):
        u[t] = phi * u[t - 1] + e[t]
    return np.exp(loading * np.log(base) + 0.5 + u)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(7)


@pytest.fixture
def base_prices(rng) -> np.ndarray:
    """720 hourly BTC-like closes."""
    return random_walk_prices(rng, 720, start=60_000.0)


@pytest.fixture
def fake_fetch() -> Callable[[Dict[str, object]], Callable]:
    """
    Build a fetch(symbol, interval, limit) stand-in from {symbol: prices or
    exception}. Records every call in `fetch.calls`.
    """
    def factory(table: Dict[str, object]):
        calls = []

        def fetch(symbol, interval, limit):
            calls.append((symbol, interval, limit))
            value = table[symbol]
            if isinstance(value, BaseException):
                raise value
            return make_bars(np.asarray(value)[-limit:])

        fetch.calls = calls
        return fetch
    return factory


@pytest.fixture
def bars_from_prices():
    return make_bars


@pytest.fixture
def random_walk():
    return random_walk_prices


@pytest.fixture
def cointegrated():
    return cointegrated_prices
