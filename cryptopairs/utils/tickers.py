# cryptopairs/utils/tickers.py
from __future__ import annotations
from pathlib import Path
from typing import Iterable, Tuple
import json
import pandas as pd

__all__ = ["TICKER_SUFFIXES", "load_tickers", "clean_symbols"]

QUOTE_ASSET = "USDT"
TICKER_SUFFIXES = (".txt", ".list", ".csv", ".json")


def load_tickers(path: str | Path, *, csv_col: str | None = None) -> Tuple[str, ...]:
    """
    Read exchange symbols from a .txt/.list (one per line, '#' comments),
    .csv (ticker/symbol column) or .json (list of str or of dicts) file.
    """
    p = Path(path); suf = p.suffix.lower()
    if suf in {".txt", ".list"}:
        vals = [ln.strip() for ln in p.read_text(encoding="utf-8").splitlines()
                if ln.strip() and not ln.lstrip().startswith("#")]
        return clean_symbols(vals)
    if suf == ".csv":
        df = pd.read_csv(p)
        col = csv_col or _guess_symbol_col(df.columns)
        return clean_symbols(df[col].astype(str).tolist())
    if suf == ".json":
        obj = json.loads(p.read_text(encoding="utf-8"))
        if isinstance(obj, list) and all(isinstance(x, str) for x in obj):
            return clean_symbols(obj)
        if isinstance(obj, list) and all(isinstance(x, dict) for x in obj):
            for key in ("symbol", "ticker", "Symbol", "SYMBOL"):
                if all(key in d for d in obj):
                    return clean_symbols([d[key] for d in obj])
        raise ValueError(f"Unrecognized JSON format: {p}")
    raise ValueError(f"Unsupported file type: {suf}")


def clean_symbols(vals: Iterable[str], quote: str = QUOTE_ASSET) -> Tuple[str, ...]:
    """
    Strip, upper-case, keep only `quote`-quoted symbols and drop duplicates.
    First-seen order is kept (it is the display order of the universe).
    """
    s = (pd.Series(list(vals), dtype="string")
           .str.strip().str.upper()
           .dropna())
    s = s[(s != "") & s.str.endswith(quote)].drop_duplicates()
    return tuple(str(v) for v in s)


def _guess_symbol_col(cols: Iterable[str]) -> str:
    cols = list(cols)
    for c in ("symbol", "ticker", "Symbol", "Ticker", "SYMBOL", "TICKER"):
        if c in cols: return c
    return cols[0]
