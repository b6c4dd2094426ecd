# cryptopairs/config.py
"""
Call-time configuration for the evaluator, the screener and the alert check.

Every entry point takes one of these frozen dataclasses explicitly; there is
no module-level mutable state, so concurrent scans with different parameters
cannot interfere.

YAML layout accepted by `load_config`:

    signal:   {beta_lookback: 240, z_lookback: 240, entry_threshold: 2.0}
    screener: {base: BTCUSDT, universe: [ETHUSDT, SOLUSDT], bars: 720}
    alert:    {symbol_a: BTCUSDT, symbol_b: ETHUSDT, z_lookback: 168}

Missing sections fall back to defaults. `universe` may also be a packaged
universe name (`layer1`) or the path of a ticker file (`mine.csv`).
"""
from __future__ import annotations
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple
import yaml

from cryptopairs.errors import ConfigError
from cryptopairs.universes import DEFAULT_UNIVERSE, resolve_universe

__all__ = [
    "SignalConfig",
    "ScreenerConfig",
    "AlertConfig",
    "AppConfig",
    "load_config",
]


def _check_lookback(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 2:
        raise ConfigError(f"{name} must be an integer >= 2, got {value!r}")


def _check_positive(name: str, value: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value > 0:
        raise ConfigError(f"{name} must be > 0, got {value!r}")


@dataclass(frozen=True)
class SignalConfig:
    """Windows and thresholds for a single pair evaluation."""

    beta_lookback: int = 240
    z_lookback: int = 240
    entry_threshold: float = 2.0
    exit_threshold: float = 0.7   # advisory only, not enforced by the evaluator

    def __post_init__(self) -> None:
        _check_lookback("beta_lookback", self.beta_lookback)
        _check_lookback("z_lookback", self.z_lookback)
        _check_positive("entry_threshold", self.entry_threshold)
        if not 0 <= self.exit_threshold < self.entry_threshold:
            raise ConfigError("exit_threshold must be in [0, entry_threshold)")


@dataclass(frozen=True)
class ScreenerConfig:
    """Universe scan against one base symbol."""

    base: str = "BTCUSDT"
    universe: Tuple[str, ...] = DEFAULT_UNIVERSE
    interval: str = "1h"
    bars: int = 720
    corr_lookback: int = 240
    beta_lookback: int = 240
    z_lookback: int = 240
    entry_threshold: float = 2.0
    only_ready: bool = False
    n_workers: Optional[int] = 1      # None -> all cores
    prefer: str = "threads"           # joblib backend hint: "threads" | "processes"
    fetch_workers: int = 8
    show_progress: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "base", str(self.base).strip().upper())
        # packaged name, ticker file or symbol list
        try:
            symbols = resolve_universe(self.universe)
        except (OSError, ValueError, KeyError) as e:
            raise ConfigError(f"cannot resolve universe {self.universe!r}: {e}") from e
        object.__setattr__(self, "universe", symbols)
        _check_lookback("bars", self.bars)
        _check_lookback("corr_lookback", self.corr_lookback)
        _check_lookback("beta_lookback", self.beta_lookback)
        _check_lookback("z_lookback", self.z_lookback)
        _check_positive("entry_threshold", self.entry_threshold)
        if self.n_workers is not None and self.n_workers == 0:
            raise ConfigError("n_workers must be non-zero (use None for all cores)")
        if self.prefer not in ("threads", "processes"):
            raise ConfigError(f"prefer must be 'threads' or 'processes', got {self.prefer!r}")
        if self.fetch_workers < 1:
            raise ConfigError("fetch_workers must be >= 1")

    @property
    def alts(self) -> Tuple[str, ...]:
        """Universe without the base symbol."""
        return tuple(s for s in self.universe if s != self.base)


@dataclass(frozen=True)
class AlertConfig:
    """Edge-triggered z-score alerts for one fixed pair."""

    symbol_a: str = "BTCUSDT"
    symbol_b: str = "ETHUSDT"
    interval: str = "1h"
    bars: int = 200
    beta_lookback: int = 200
    z_lookback: int = 168
    entry_threshold: float = 2.0
    exit_threshold: float = 0.7
    risk_threshold: float = 3.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbol_a", str(self.symbol_a).strip().upper())
        object.__setattr__(self, "symbol_b", str(self.symbol_b).strip().upper())
        _check_lookback("bars", self.bars)
        _check_lookback("beta_lookback", self.beta_lookback)
        _check_lookback("z_lookback", self.z_lookback)
        _check_positive("entry_threshold", self.entry_threshold)
        if not 0 <= self.exit_threshold < self.entry_threshold:
            raise ConfigError("exit_threshold must be in [0, entry_threshold)")
        if not self.risk_threshold > self.entry_threshold:
            raise ConfigError("risk_threshold must exceed entry_threshold")

    def signal_config(self) -> SignalConfig:
        return SignalConfig(
            beta_lookback=self.beta_lookback,
            z_lookback=self.z_lookback,
            entry_threshold=self.entry_threshold,
            exit_threshold=self.exit_threshold,
        )


@dataclass(frozen=True)
class AppConfig:
    signal: SignalConfig = field(default_factory=SignalConfig)
    screener: ScreenerConfig = field(default_factory=ScreenerConfig)
    alert: AlertConfig = field(default_factory=AlertConfig)


def _build(cls, overrides: Optional[Mapping[str, Any]], section: str):
    if overrides is None:
        return cls()
    if not isinstance(overrides, Mapping):
        raise ConfigError(f"section {section!r} must be a mapping")
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ConfigError(f"unknown keys in {section!r}: {', '.join(unknown)}")
    kwargs = dict(overrides)
    if "universe" in kwargs and isinstance(kwargs["universe"], list):
        kwargs["universe"] = tuple(kwargs["universe"])
    try:
        return replace(cls(), **kwargs)
    except TypeError as e:
        raise ConfigError(f"invalid value in {section!r}: {e}") from e


def load_config(path: Optional[str | Path] = None) -> AppConfig:
    """
    Load an AppConfig from a YAML file; `None` returns the defaults.
    """
    if path is None:
        return AppConfig()
    p = Path(path)
    if not p.is_file():
        raise ConfigError(f"config file not found: {p}")
    with open(p, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"top level of {p} must be a mapping")
    unknown = sorted(set(raw) - {"signal", "screener", "alert"})
    if unknown:
        raise ConfigError(f"unknown sections in {p}: {', '.join(unknown)}")
    return AppConfig(
        signal=_build(SignalConfig, raw.get("signal"), "signal"),
        screener=_build(ScreenerConfig, raw.get("screener"), "screener"),
        alert=_build(AlertConfig, raw.get("alert"), "alert"),
    )
