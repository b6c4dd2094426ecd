from __future__ import annotations

__all__ = ["PriceBar", "fetch_klines", "bars_to_frame", "closes"]

# --- binance: ---
from .binance import PriceBar, fetch_klines, bars_to_frame, closes
