# cryptopairs/market_data/binance.py
"""
Binance spot klines over the public REST API, with host failover.

Exports
-------
- PriceBar
- BINANCE_HOSTS
- fetch_klines(symbol, interval, limit, ...)
- bars_to_frame(bars)
- closes(bars)
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence
import logging
import numpy as np
import pandas as pd
import requests

from cryptopairs.errors import PriceFetchError

__all__ = ["PriceBar", "BINANCE_HOSTS", "KLINES_PATH", "fetch_klines", "bars_to_frame", "closes"]

logger = logging.getLogger(__name__)

BINANCE_HOSTS = (
    "https://api.binance.com",
    "https://api1.binance.com",
    "https://api2.binance.com",
    "https://api3.binance.com",
    "https://data-api.binance.vision",
)
KLINES_PATH = "/api/v3/klines"


@dataclass(frozen=True)
class PriceBar:
    open_time: int      # ms since epoch
    close_time: int     # ms since epoch
    open: float
    high: float
    low: float
    close: float
    volume: float

    @classmethod
    def from_kline(cls, row: Sequence[Any]) -> "PriceBar":
        """Binance kline row: [open_time, o, h, l, c, v, close_time, ...]."""
        return cls(
            open_time=int(row[0]),
            close_time=int(row[6]),
            open=float(row[1]),
            high=float(row[2]),
            low=float(row[3]),
            close=float(row[4]),
            volume=float(row[5]),
        )


def _get_json_with_failover(
    session: requests.Session,
    symbol: str,
    params: dict,
    hosts: Sequence[str],
    timeout: float,
):
    last_err: Optional[Exception] = None
    for host in hosts:
        url = host.rstrip("/") + KLINES_PATH
        try:
            resp = session.get(url, params=params, timeout=timeout)
        except requests.RequestException as e:
            logger.debug("klines %s via %s failed: %s", symbol, host, e)
            last_err = e
            continue
        if not resp.ok:
            logger.debug("klines %s via %s returned HTTP %s", symbol, host, resp.status_code)
            last_err = PriceFetchError(symbol, f"HTTP {resp.status_code} via {host}")
            continue
        try:
            return resp.json()
        except ValueError as e:
            last_err = e
            continue
    raise PriceFetchError(symbol, f"all hosts failed (last error: {last_err})") from last_err


def fetch_klines(
    symbol: str,
    interval: str,
    limit: int,
    *,
    session: Optional[requests.Session] = None,
    hosts: Sequence[str] = BINANCE_HOSTS,
    timeout: float = 10.0,
) -> List[PriceBar]:
    """
    Fetch up to `limit` bars for `symbol` at `interval` (e.g. "1h", "4h"),
    ordered oldest -> newest. Hosts are tried in order; raises PriceFetchError
    when every host fails or the payload is malformed.
    """
    sym = str(symbol).strip().upper()
    if limit < 1:
        raise ValueError("limit must be a positive integer")
    params = {"symbol": sym, "interval": interval, "limit": str(int(limit))}
    sess = session or requests.Session()
    try:
        data = _get_json_with_failover(sess, sym, params, hosts, timeout)
    finally:
        if session is None:
            sess.close()

    if not isinstance(data, list):
        raise PriceFetchError(sym, f"unexpected payload type {type(data).__name__}")
    try:
        bars = [PriceBar.from_kline(row) for row in data]
    except (TypeError, ValueError, IndexError) as e:
        raise PriceFetchError(sym, f"malformed kline row: {e}") from e
    bars.sort(key=lambda b: b.open_time)
    return bars


def bars_to_frame(bars: Sequence[PriceBar]) -> pd.DataFrame:
    """OHLCV DataFrame indexed by close time ('datetime', UTC)."""
    cols = ["open_time", "close_time", "open", "high", "low", "close", "volume"]
    df = pd.DataFrame([[getattr(b, c) for c in cols] for b in bars], columns=cols)
    df.index = pd.to_datetime(df["close_time"], unit="ms", utc=True).rename("datetime")
    return df.drop(columns=["close_time"])


def closes(bars: Sequence[PriceBar]) -> np.ndarray:
    return np.array([b.close for b in bars], dtype=np.float64)
