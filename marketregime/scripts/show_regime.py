"""MarketRegime – Composite regime inspection CLI.

Computes the composite market regime, persists it (recording any label
transitions) and prints the indicator breakdown and recent change log.

Readings come from the cached market data in the key-value store unless
explicit values are supplied on the command line.

Example
-------

    python -m marketregime.scripts.show_regime --vix 22.5 --spread-bps -15 --changes 10
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from marketregime.core.config import get_config
from marketregime.core.kv_store import build_store
from marketregime.core.logging import get_logger, setup_logging
from marketregime.regime.engine import build_engine
from marketregime.regime.metrics import MarketMetrics, StaticMarketMetricsSource


logger = get_logger(__name__)

_READING_FLAGS = {
    "vix": "VIX level",
    "yield_10y": "10Y Treasury yield (percent)",
    "yield_5y": "5Y Treasury yield (percent)",
    "spread_bps": "2s10s spread in basis points",
    "dxy_change": "Dollar index daily change (percent)",
    "spx_change": "S&P 500 daily change (percent)",
    "credit_stress": "Credit stress reading (defaults to VIX)",
    "stock_bond_corr": "SPY-TLT correlation",
}


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Compute and show the composite market regime.",
    )

    for dest, help_text in _READING_FLAGS.items():
        parser.add_argument(
            "--" + dest.replace("_", "-"),
            dest=dest,
            type=float,
            default=None,
            help=help_text,
        )
    parser.add_argument(
        "--changes",
        type=int,
        default=10,
        help="Number of change-log entries to show (default: 10)",
    )

    args = parser.parse_args(argv)

    if args.changes < 0:
        parser.error("--changes must be non-negative")

    return args


def _metrics_from_args(args: argparse.Namespace) -> Optional[MarketMetrics]:
    if all(getattr(args, dest) is None for dest in _READING_FLAGS):
        return None
    return MarketMetrics(
        vix=args.vix,
        yield_10y=args.yield_10y,
        yield_5y=args.yield_5y,
        spread_2s10s_bps=args.spread_bps,
        dxy_change=args.dxy_change,
        spx_change=args.spx_change,
        credit_stress=args.credit_stress,
        stock_bond_correlation=args.stock_bond_corr,
    )


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)

    config = get_config()
    setup_logging(config)

    store = build_store(config)
    metrics = _metrics_from_args(args)
    source = StaticMarketMetricsSource(metrics) if metrics is not None else None
    engine = build_engine(config, store, source)

    state = engine.compute()

    overall = state.overall
    print(f"Overall regime: {overall.label.value} (score={overall.score:+.2f})")
    print("".ljust(80, "="))
    for ind in state.indicators.values():
        print(f"  {ind.name:16s} {ind.display_value:>10s}  {ind.label:14s} score={ind.score:+.2f}")

    if args.changes:
        print()
        print("Recent regime changes")
        print("".ljust(80, "="))
        log = engine.get_change_log(args.changes)
        if not log:
            print("  none recorded yet")
        for change in log:
            print(f"  {change.date}  {change.indicator:16s} {change.from_label} -> {change.to_label}")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
