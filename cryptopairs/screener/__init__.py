# cryptopairs/screener/__init__.py
"""
Multi-symbol screener: rank a universe against one base symbol.
"""
from .scan import (
    FETCH_FAILED,
    Status,
    ScreenerRow,
    classify_status,
    screen_symbol,
    screen,
    rank_rows,
    filter_ready,
    fetch_universe,
    run_scan,
)
from .report import rows_to_frame, format_table

__all__ = [
    "FETCH_FAILED",
    "Status",
    "ScreenerRow",
    "classify_status",
    "screen_symbol",
    "screen",
    "rank_rows",
    "filter_ready",
    "fetch_universe",
    "run_scan",
    "rows_to_frame",
    "format_table",
]
