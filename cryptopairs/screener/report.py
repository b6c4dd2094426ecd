# cryptopairs/screener/report.py
"""
Read-only views of screener rows for display: a pandas DataFrame and a
plain-text table.
"""
from __future__ import annotations
from typing import Iterable, Optional
import pandas as pd

from .scan import ScreenerRow

__all__ = ["ROW_COLUMNS", "rows_to_frame", "format_table"]

ROW_COLUMNS = [
    "symbol", "status", "correlation", "hedge_ratio", "adf_t",
    "coint_pass5", "z_now", "z_max_abs", "note",
]


def rows_to_frame(rows: Iterable[ScreenerRow]) -> pd.DataFrame:
    """One record per row, in the given (ranked) order, indexed by symbol."""
    records = [
        {
            "symbol": r.symbol,
            "status": r.status.value,
            "correlation": r.correlation,
            "hedge_ratio": r.hedge_ratio,
            "adf_t": r.adf_t,
            "coint_pass5": r.coint_pass5,
            "z_now": r.z_now,
            "z_max_abs": r.z_max_abs,
            "note": r.note,
        }
        for r in rows
    ]
    df = pd.DataFrame(records, columns=ROW_COLUMNS)
    return df.set_index("symbol")


def _fmt(v: Optional[float], digits: int = 2) -> str:
    return "-" if v is None else f"{v:.{digits}f}"


def format_table(rows: Iterable[ScreenerRow]) -> str:
    """Fixed-width text table; undefined values print as '-'."""
    header = f"{'SYMBOL':<12}{'STATUS':<11}{'CORR':>7}{'BETA':>8}{'ADF t':>8}{'COINT':>7}{'Z':>7}{'|Z|max':>8}  NOTE"
    lines = [header, "-" * len(header)]
    for r in rows:
        coint = "-" if r.coint_pass5 is None else ("yes" if r.coint_pass5 else "no")
        lines.append(
            f"{r.symbol:<12}{r.status.value:<11}{_fmt(r.correlation):>7}{_fmt(r.hedge_ratio, 3):>8}"
            f"{_fmt(r.adf_t):>8}{coint:>7}{_fmt(r.z_now):>7}{_fmt(r.z_max_abs):>8}  {r.note}"
        )
    return "\n".join(lines)
