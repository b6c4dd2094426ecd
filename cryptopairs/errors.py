# cryptopairs/errors.py
"""
Exception hierarchy. Numeric edge cases never raise (they resolve to
undefined results); only collaborator failures and bad configuration do.
"""
from __future__ import annotations

__all__ = ["CryptoPairsError", "PriceFetchError", "ScanError", "ConfigError"]


class CryptoPairsError(Exception):
    """Base class for all package errors."""


class PriceFetchError(CryptoPairsError):
    """Price history for one symbol could not be retrieved."""

    def __init__(self, symbol: str, message: str):
        super().__init__(f"{symbol}: {message}")
        self.symbol = symbol


class ScanError(CryptoPairsError):
    """A whole scan cannot proceed (e.g. the base symbol has no data)."""


class ConfigError(CryptoPairsError, ValueError):
    """Invalid configuration value or unknown configuration key."""
