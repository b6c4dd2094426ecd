# cryptopairs/screener/scan.py
"""
Screen a universe of symbols against one base symbol and rank them by
statistical tradability (return correlation + ADF on the log spread +
rolling z-score).

Exports
-------
- Status, ScreenerRow
- classify_status(corr, pass5, pass10, z_now, entry_threshold)
- screen_symbol(symbol, base_prices, alt_prices, config)
- screen(base_prices, universe_prices, config)   # pure, parallel over symbols
- rank_rows(rows), filter_ready(rows, entry_threshold)
- fetch_universe(fetch, symbols, config)          # threaded retrieval
- run_scan(fetch, config)                         # fetch + screen + rank

Alignment everywhere keeps the most recent n bars of each series.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union
import logging
import numpy as np
from joblib import Parallel, delayed
from threadpoolctl import threadpool_limits
from tqdm import tqdm

from cryptopairs.config import ScreenerConfig
from cryptopairs.errors import ScanError
from cryptopairs.market_data.binance import PriceBar, closes
from cryptopairs.stats.descriptive import ArrayLike, as_array, correlation
from cryptopairs.stats.regression import ols_fit
from cryptopairs.stats.stationarity import adf_test
from cryptopairs.stats.transforms import align_last, log_returns, rolling_zscore, safe_log

__all__ = [
    "Status",
    "ScreenerRow",
    "FETCH_FAILED",
    "classify_status",
    "screen_symbol",
    "screen",
    "rank_rows",
    "filter_ready",
    "fetch_universe",
    "run_scan",
]

logger = logging.getLogger(__name__)

FETCH_FAILED = "fetch failed"
STRONG_CORR = 0.75
POTENTIAL_CORR = 0.70
WEAK_CORR = 0.65
MISSING_CORR_RANK = -999.0

# prices, or the exception raised while retrieving them
PricesOrFailure = Union[ArrayLike, BaseException, None]
Fetcher = Callable[[str, str, int], Sequence[PriceBar]]


class Status(str, Enum):
    STRONG = "STRONG"
    POTENTIAL = "POTENTIAL"
    WAIT = "WAIT"

    @property
    def rank(self) -> int:
        return {"STRONG": 0, "POTENTIAL": 1, "WAIT": 2}[self.value]


@dataclass(frozen=True)
class ScreenerRow:
    symbol: str
    correlation: Optional[float]
    hedge_ratio: Optional[float]
    adf_t: Optional[float]
    coint_pass5: Optional[bool]
    z_now: Optional[float]
    z_max_abs: Optional[float]
    status: Status
    note: str
    error: Optional[str] = None

    @property
    def fetch_failed(self) -> bool:
        return self.note == FETCH_FAILED

    def is_ready(self, entry_threshold: float) -> bool:
        """STRONG with |z| at or beyond the entry threshold."""
        return (
            self.status is Status.STRONG
            and self.z_now is not None
            and abs(self.z_now) >= entry_threshold
        )


def _finite(v) -> Optional[float]:
    return float(v) if v is not None and np.isfinite(v) else None


def classify_status(
    corr: Optional[float],
    pass5: Optional[bool],
    pass10: Optional[bool],
    z_now: Optional[float],
    entry_threshold: float,
) -> Tuple[Status, str]:
    """
    First matching rule wins. An undefined correlation fails every threshold;
    an undefined ADF verdict counts as a failed one.
    """
    has_corr = corr is not None and np.isfinite(corr)
    z_ready = z_now is not None and np.isfinite(z_now) and abs(z_now) >= entry_threshold

    if has_corr and corr >= STRONG_CORR and pass5 is True:
        return Status.STRONG, "STRONG, entry ready" if z_ready else "STRONG, wait for Z"
    if has_corr and corr >= POTENTIAL_CORR and (pass5 is True or pass10 is True):
        return Status.POTENTIAL, "POTENTIAL, entry ready" if z_ready else "POTENTIAL, watch"
    if has_corr and corr >= WEAK_CORR and z_ready:
        return Status.POTENTIAL, "correlation adequate, cointegration weak"
    if has_corr and corr < WEAK_CORR:
        return Status.WAIT, "correlation low"
    return Status.WAIT, "cointegration fails"


def _failed_row(symbol: str, error: Optional[str] = None) -> ScreenerRow:
    return ScreenerRow(
        symbol=symbol, correlation=None, hedge_ratio=None, adf_t=None,
        coint_pass5=None, z_now=None, z_max_abs=None,
        status=Status.WAIT, note=FETCH_FAILED, error=error,
    )


def screen_symbol(
    symbol: str,
    base_prices: ArrayLike,
    alt_prices: PricesOrFailure,
    config: ScreenerConfig,
) -> ScreenerRow:
    """Metrics and status for one symbol against the base (no I/O)."""
    if alt_prices is None or isinstance(alt_prices, BaseException):
        return _failed_row(symbol, None if alt_prices is None else str(alt_prices))

    base = as_array(base_prices)
    alt = as_array(alt_prices)

    ln_base, ln_alt = align_last(safe_log(base), safe_log(alt))
    r_base, r_alt = align_last(log_returns(base), log_returns(alt))
    n, rn = ln_base.size, r_base.size

    # correlation on returns
    w_corr = min(config.corr_lookback, rn)
    rho = correlation(r_alt[rn - w_corr:], r_base[rn - w_corr:])

    # hedge ratio: ln(base) ~ alpha + beta * ln(alt)
    w_beta = min(config.beta_lookback, n)
    fit = ols_fit(ln_alt[n - w_beta:], ln_base[n - w_beta:])
    if fit.defined:
        spread = ln_base - fit.slope * ln_alt
    else:
        spread = np.full(n, np.nan)

    adf = adf_test(spread)

    w_z = min(config.z_lookback, spread.size)
    z = rolling_zscore(spread, w_z)
    z_now = _finite(z[-1]) if z.size else None
    z_window = z[z.size - w_z:]
    z_window = np.abs(z_window[np.isfinite(z_window)])
    z_max_abs = float(z_window.max()) if z_window.size else None

    corr = _finite(rho)
    status, note = classify_status(corr, adf.pass5, adf.pass10, z_now, config.entry_threshold)
    return ScreenerRow(
        symbol=symbol,
        correlation=corr,
        hedge_ratio=fit.slope,
        adf_t=adf.t_stat,
        coint_pass5=adf.pass5,
        z_now=z_now,
        z_max_abs=z_max_abs,
        status=status,
        note=note,
    )


def _screen_worker(symbol, base_prices, alt_prices, config):
    # Cap BLAS threads inside each worker
    with threadpool_limits(limits=1):
        return screen_symbol(symbol, base_prices, alt_prices, config)


def rank_rows(rows: Iterable[ScreenerRow]) -> List[ScreenerRow]:
    """Tier ascending (STRONG, POTENTIAL, WAIT), then correlation descending."""
    def key(r: ScreenerRow):
        corr = r.correlation if r.correlation is not None else MISSING_CORR_RANK
        return (r.status.rank, -corr)
    return sorted(rows, key=key)


def filter_ready(rows: Iterable[ScreenerRow], entry_threshold: float) -> List[ScreenerRow]:
    """Keep only STRONG rows whose |z| reaches the entry threshold."""
    return [r for r in rows if r.is_ready(entry_threshold)]


def screen(
    base_prices: ArrayLike,
    universe_prices: Mapping[str, PricesOrFailure],
    config: ScreenerConfig | None = None,
) -> List[ScreenerRow]:
    """
    Screen every symbol of `universe_prices` against `base_prices` and return
    the ranked rows. A value that is an exception (or None) marks a failed
    retrieval and produces a "fetch failed" row instead of aborting.

    Symbols are evaluated as independent joblib tasks; each returns its own
    row and ranking happens after all of them finished.
    """
    cfg = config or ScreenerConfig()
    base = as_array(base_prices)

    rows: List[ScreenerRow] = []
    items = []
    for sym, prices in universe_prices.items():
        if prices is None or isinstance(prices, BaseException):
            rows.append(_failed_row(sym, None if prices is None else str(prices)))
        else:
            items.append((sym, prices))

    if items:
        n_jobs = cfg.n_workers if cfg.n_workers is not None else -1
        tasks = (delayed(_screen_worker)(sym, base, prices, cfg) for sym, prices in items)
        it = Parallel(n_jobs=n_jobs, prefer=cfg.prefer, return_as="generator")(tasks)
        if cfg.show_progress:
            it = tqdm(it, total=len(items), desc="Screening", leave=False)
        rows.extend(it)

    ranked = rank_rows(rows)
    if cfg.only_ready:
        ranked = filter_ready(ranked, cfg.entry_threshold)
    return ranked


def _fetch_closes(fetch: Fetcher, symbol: str, cfg: ScreenerConfig) -> np.ndarray:
    return closes(fetch(symbol, cfg.interval, cfg.bars))


def _fetch_worker(fetch: Fetcher, symbol: str, cfg: ScreenerConfig) -> PricesOrFailure:
    # Failures are returned, not raised, so one symbol cannot abort the batch
    try:
        return _fetch_closes(fetch, symbol, cfg)
    except Exception as e:
        logger.warning("price retrieval failed for %s: %s", symbol, e)
        return e


def fetch_universe(
    fetch: Fetcher,
    symbols: Sequence[str],
    config: ScreenerConfig,
) -> Dict[str, PricesOrFailure]:
    """
    Retrieve close prices for `symbols` concurrently (joblib threads, I/O
    bound). A failing symbol maps to the exception it raised.
    """
    symbols = list(symbols)
    if not symbols:
        return {}
    results = Parallel(n_jobs=config.fetch_workers, prefer="threads")(
        delayed(_fetch_worker)(fetch, sym, config) for sym in symbols
    )
    return dict(zip(symbols, results))


def run_scan(fetch: Fetcher, config: ScreenerConfig | None = None) -> List[ScreenerRow]:
    """
    Fetch the base and every universe symbol, then screen and rank.

    Raises ScanError when the base symbol cannot be retrieved (or has too few
    bars to compute returns); individual universe failures are row-level.
    """
    cfg = config or ScreenerConfig()
    logger.info("scan start base=%s symbols=%d interval=%s bars=%d",
                cfg.base, len(cfg.alts), cfg.interval, cfg.bars)
    try:
        base = _fetch_closes(fetch, cfg.base, cfg)
    except Exception as e:
        raise ScanError(f"base symbol {cfg.base} unavailable: {e}") from e
    if base.size < 2:
        raise ScanError(f"base symbol {cfg.base} returned {base.size} bars")

    universe = fetch_universe(fetch, cfg.alts, cfg)
    rows = screen(base, universe, cfg)
    n_failed = sum(1 for v in universe.values() if isinstance(v, BaseException))
    logger.info("scan done rows=%d failed=%d", len(rows), n_failed)
    return rows
