#!/usr/bin/env python
# cryptopairs/cli.py
from __future__ import annotations
import argparse
import json
import logging
import sys
from dataclasses import replace
from typing import Optional, Sequence
import numpy as np

from cryptopairs.alerts import check_pair_alerts
from cryptopairs.config import load_config
from cryptopairs.errors import CryptoPairsError
from cryptopairs.market_data import bars_to_frame, closes, fetch_klines
from cryptopairs.notify import LogNotifier, TelegramNotifier
from cryptopairs.screener import format_table, rows_to_frame, run_scan
from cryptopairs.strategies import evaluate_pair

logger = logging.getLogger("cryptopairs")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # Silence noisy HTTP logs unless debugging
    if level.upper() != "DEBUG":
        logging.getLogger("urllib3").setLevel(logging.WARNING)


# ===========================================================
# COMMAND HANDLERS
# ===========================================================

def cmd_scan(args) -> int:
    cfg = load_config(args.config).screener
    overrides = {}
    if args.base is not None:
        overrides["base"] = args.base
    if args.universe is not None:
        overrides["universe"] = args.universe
    if args.interval is not None:
        overrides["interval"] = args.interval
    if args.bars is not None:
        overrides["bars"] = args.bars
    if args.ready_only:
        overrides["only_ready"] = True
    if args.workers is not None:
        overrides["n_workers"] = args.workers
    if overrides:
        cfg = replace(cfg, **overrides)

    rows = run_scan(fetch_klines, cfg)
    if args.json:
        print(rows_to_frame(rows).reset_index().to_json(orient="records", indent=2))
    else:
        print(format_table(rows))
    return 0


def cmd_signal(args) -> int:
    app = load_config(args.config)
    cfg = app.signal
    # interval/bars validated by ScreenerConfig
    overrides = {}
    if args.interval is not None:
        overrides["interval"] = args.interval
    if args.bars is not None:
        overrides["bars"] = args.bars
    fetch_cfg = replace(app.screener, **overrides) if overrides else app.screener
    a, b = args.symbol_a.upper(), args.symbol_b.upper()
    bars_a = fetch_klines(a, fetch_cfg.interval, fetch_cfg.bars)
    bars_b = fetch_klines(b, fetch_cfg.interval, fetch_cfg.bars)
    sig = evaluate_pair(closes(bars_a), closes(bars_b), cfg)
    out = {
        "symbol_a": a,
        "symbol_b": b,
        "hedge_ratio": sig.hedge_ratio,
        "spread": sig.spread_now,
        "rolling_mean": sig.rolling_mean,
        "rolling_std": sig.rolling_std,
        "z": sig.z_now,
        "action": sig.action.describe(a, b),
        "entry_threshold": sig.entry_threshold,
        "exit_threshold": sig.exit_threshold,
        "window": sig.window,
    }
    if args.history > 0:
        # aligned bars are the most recent n of leg A
        index = bars_to_frame(bars_a).index[len(bars_a) - sig.n_obs:]
        tail = sig.frame(index).tail(args.history)
        out["history"] = [
            {"datetime": ts.isoformat(), "spread": _json_float(row.spread), "z": _json_float(row.z)}
            for ts, row in tail.iterrows()
        ]
    print(json.dumps(out, indent=2))
    return 0


def _json_float(v) -> Optional[float]:
    return float(v) if np.isfinite(v) else None


def cmd_alert(args) -> int:
    cfg = load_config(args.config).alert
    notifier = TelegramNotifier.from_env()
    if not notifier.configured:
        logger.warning("Telegram credentials not set; alerts go to the log")
        notifier = LogNotifier()
    result = check_pair_alerts(fetch_klines, notifier, cfg)
    print(json.dumps({
        "z": result.z_now,
        "alerts": [a.message for a in result.alerts],
        "delivered": result.delivered,
    }, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cryptopairs", description="Crypto pair stat-arb signals and screener")
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--log-level", default="INFO")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("scan", help="Screen a universe against the base symbol")
    p.add_argument("--base")
    p.add_argument("--universe", help="Packaged name (majors, layer1), ticker file, or ETHUSDT,SOLUSDT")
    p.add_argument("--interval")
    p.add_argument("--bars", type=int)
    p.add_argument("--workers", type=int)
    p.add_argument("--ready-only", action="store_true", help="Only STRONG rows with |z| >= entry")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_scan)

    p = sub.add_parser("signal", help="Evaluate one pair")
    p.add_argument("symbol_a")
    p.add_argument("symbol_b")
    p.add_argument("--interval")
    p.add_argument("--bars", type=int)
    p.add_argument("--history", type=int, default=0, help="Include the last N spread/z values")
    p.set_defaults(func=cmd_signal)

    p = sub.add_parser("alert", help="Check z-score crossings and notify")
    p.set_defaults(func=cmd_alert)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.func(args)
    except CryptoPairsError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
