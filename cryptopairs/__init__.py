# cryptopairs/__init__.py
"""
Statistical-arbitrage signals for crypto pairs: OLS hedge ratio, ADF-style
spread stationarity, rolling z-score and a multi-symbol screener.
"""
__version__ = "0.1.0"
