from __future__ import annotations
from importlib.resources import files
from pathlib import Path
from typing import Iterable, Sequence, Tuple, Union
import re

from ..utils.tickers import TICKER_SUFFIXES, clean_symbols, load_tickers

__all__ = [
    "DEFAULT_UNIVERSE_NAME",
    "DEFAULT_UNIVERSE",
    "parse_universe",
    "resolve_universe",
    "load_universe",
    "list_universes",
]

DEFAULT_UNIVERSE_NAME = "majors"


def parse_universe(text: str) -> Tuple[str, ...]:
    """
    Parse a comma/whitespace separated symbol list, e.g. "ethusdt, SOLUSDT".
    Non-USDT symbols and duplicates are dropped.
    """
    return clean_symbols(t for t in re.split(r"[,\s]+", text or "") if t)


def _tickers_dir():
    return files(__package__) / "tickers"


def list_universes(extensions: Iterable[str] = TICKER_SUFFIXES) -> list[str]:
    """Names available under cryptopairs/universes/tickers (without extension)."""
    base = _tickers_dir()
    names: set[str] = set()
    for entry in base.iterdir():
        if entry.is_file() and entry.name.lower().endswith(tuple(extensions)):
            names.add(entry.name.rsplit(".", 1)[0])
    return sorted(names)


def load_universe(name: str) -> Tuple[str, ...]:
    """
    Load a packaged symbol universe by base name (e.g. 'majors').
    Searches cryptopairs/universes/tickers/<name>.(txt|list|csv|json).
    """
    base = _tickers_dir()
    for ext in TICKER_SUFFIXES:
        p = base / f"{name}{ext}"
        if p.is_file():
            return load_tickers(Path(str(p)))
    raise FileNotFoundError(
        f"No packaged universe named {name!r}. "
        f"Available: {', '.join(list_universes()) or '(none)'}"
    )


def resolve_universe(value: Union[str, Sequence[str]]) -> Tuple[str, ...]:
    """
    Turn a universe value into symbols. Accepted forms:

    - a packaged name:         "majors", "layer1"
    - a ticker file path:      "my_universe.csv" (.txt/.list/.csv/.json)
    - a symbol list:           "ETHUSDT,SOLUSDT" or ["ETHUSDT", "SOLUSDT"]
    """
    if value is None:
        return ()
    if not isinstance(value, str):
        return clean_symbols(value)
    text = value.strip()
    if text and not re.search(r"[,\s]", text):
        if text.lower() in list_universes():
            return load_universe(text.lower())
        if text.lower().endswith(TICKER_SUFFIXES):
            return load_tickers(text)
    return parse_universe(text)


DEFAULT_UNIVERSE: Tuple[str, ...] = load_universe(DEFAULT_UNIVERSE_NAME)
