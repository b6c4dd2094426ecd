# cryptopairs/alerts.py
"""
Edge-triggered z-score alerts for one pair.

An alert fires only on the bar where the z-score crosses a level, comparing
the previous z with the current one:

- ENTRY SHORT  : prev < entry      and cur >= entry
- ENTRY LONG   : prev > -entry     and cur <= -entry
- EXIT         : |prev| > exit     and |cur| <= exit
- RISK         : |prev| < risk     and |cur| >= risk

Nothing fires when either z-score is undefined.

The z-score is that of the OLS-hedged spread log(A) - beta * log(B) from
`evaluate_pair` (beta fit on the last `beta_lookback` bars). It is not the
fixed 1:1 ratio log(A / B), so alerts and `signal` output always agree.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence
import logging
import numpy as np

from cryptopairs.config import AlertConfig
from cryptopairs.market_data.binance import PriceBar, closes
from cryptopairs.notify import Notifier
from cryptopairs.strategies.signals import PairSignal, evaluate_pair

__all__ = ["AlertKind", "Alert", "AlertCheck", "detect_alerts", "check_pair_alerts"]

logger = logging.getLogger(__name__)


class AlertKind(str, Enum):
    ENTRY_SHORT = "ENTRY_SHORT"
    ENTRY_LONG = "ENTRY_LONG"
    EXIT = "EXIT"
    RISK = "RISK"


@dataclass(frozen=True)
class Alert:
    kind: AlertKind
    z: float
    message: str


@dataclass(frozen=True)
class AlertCheck:
    signal: PairSignal
    alerts: List[Alert]
    delivered: List[bool]

    @property
    def z_now(self) -> Optional[float]:
        return self.signal.z_now


def detect_alerts(
    z_prev: Optional[float],
    z_cur: Optional[float],
    config: AlertConfig,
) -> List[Alert]:
    """Alerts for the step z_prev -> z_cur, in ENTRY/EXIT/RISK order."""
    if z_prev is None or z_cur is None or not (np.isfinite(z_prev) and np.isfinite(z_cur)):
        return []
    a, b = config.symbol_a, config.symbol_b
    entry, ext, risk = config.entry_threshold, config.exit_threshold, config.risk_threshold
    tag = f"z={z_cur:.2f}"

    out: List[Alert] = []
    if z_prev < entry <= z_cur:
        out.append(Alert(AlertKind.ENTRY_SHORT, z_cur, f"ENTRY SHORT {a} / LONG {b} | {tag}"))
    if z_prev > -entry >= z_cur:
        out.append(Alert(AlertKind.ENTRY_LONG, z_cur, f"ENTRY LONG {a} / SHORT {b} | {tag}"))
    if abs(z_prev) > ext >= abs(z_cur):
        out.append(Alert(AlertKind.EXIT, z_cur, f"EXIT {a}/{b} | {tag}"))
    if abs(z_prev) < risk <= abs(z_cur):
        out.append(Alert(AlertKind.RISK, z_cur, f"RISK {a}/{b} | {tag}"))
    return out


def check_pair_alerts(
    fetch: Callable[[str, str, int], Sequence[PriceBar]],
    notifier: Notifier,
    config: AlertConfig | None = None,
) -> AlertCheck:
    """
    Fetch both legs, evaluate the pair and send one notification per alert.
    Retrieval errors propagate; notification failures are only logged.
    """
    cfg = config or AlertConfig()
    prices_a = closes(fetch(cfg.symbol_a, cfg.interval, cfg.bars))
    prices_b = closes(fetch(cfg.symbol_b, cfg.interval, cfg.bars))
    signal = evaluate_pair(prices_a, prices_b, cfg.signal_config())

    z = signal.zscores
    z_prev = float(z[-2]) if z.size >= 2 else None
    z_cur = float(z[-1]) if z.size >= 1 else None
    alerts = detect_alerts(z_prev, z_cur, cfg)

    delivered = []
    for alert in alerts:
        try:
            ok = bool(notifier.notify(alert.message))
        except Exception:
            logger.exception("notifier raised for alert %s", alert.kind.value)
            ok = False
        if not ok:
            logger.warning("alert not delivered: %s", alert.message)
        delivered.append(ok)
    logger.info("alert check %s/%s z=%s alerts=%d", cfg.symbol_a, cfg.symbol_b, signal.z_now, len(alerts))
    return AlertCheck(signal=signal, alerts=alerts, delivered=delivered)
