"""MarketRegime – Correlation monitor inspection CLI.

Simulates a return panel, estimates the rolling correlation matrix and
prints the matrix, the active correlation regime alerts and the baseline
comparison table.

Example
-------

    python -m marketregime.scripts.show_correlations --window 30 --seed 7
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from marketregime.core.config import get_config
from marketregime.core.kv_store import build_store
from marketregime.core.logging import get_logger, setup_logging
from marketregime.correlation.baselines import WINDOWS
from marketregime.correlation.monitor import build_monitor


logger = get_logger(__name__)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Show the simulated cross-asset correlation matrix and regime alerts.",
    )

    parser.add_argument(
        "--window",
        type=int,
        choices=list(WINDOWS),
        default=None,
        help="Rolling window in trading days (default: CORRELATION_WINDOW)",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="Number of simulated trading days (default: SIMULATION_DAYS)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible run (default: RANDOM_SEED)",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not write alert summaries to the key-value store",
    )

    args = parser.parse_args(argv)

    if args.days is not None and args.days <= 0:
        parser.error("--days must be positive")

    return args


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)

    config = get_config()
    setup_logging(config)

    overrides = {}
    if args.days is not None:
        overrides["simulation_days"] = args.days
    if args.window is not None:
        overrides["correlation_window"] = args.window
    if args.seed is not None:
        overrides["random_seed"] = args.seed
    if overrides:
        config = config.model_copy(update=overrides)

    store = None if args.no_cache else build_store(config)
    monitor = build_monitor(config, store)
    snapshot = monitor.initialise()

    frame = snapshot.matrix.to_frame()
    print(f"Correlation matrix (window={snapshot.window}, observations={snapshot.matrix.observations})")
    print("".ljust(80, "="))
    print(frame.round(2).to_string())
    print()

    print(f"Regime alerts ({len(snapshot.alerts)})")
    print("".ljust(80, "="))
    if not snapshot.alerts:
        print("  none")
    for alert in snapshot.alerts:
        delta = alert.current_value - alert.baseline_value
        print(
            f"  [{alert.severity.value.upper():8s}] {alert.title}: {alert.display_name} "
            f"current={alert.current_value:+.3f} baseline={alert.baseline_value:+.3f} "
            f"delta={delta:+.3f}"
        )
    print()

    print("Baseline comparison")
    print("".ljust(80, "="))
    print(f"  {'pair':10s} {'current':>8s} {'1Y':>7s} {'5Y':>7s} {'d1Y':>7s} {'d5Y':>7s}")
    for row in snapshot.comparison:
        print(
            f"  {row.pair:10s} {row.current:8.3f} {row.baseline_1y:7.2f} {row.baseline_5y:7.2f} "
            f"{row.delta_1y:+7.3f} {row.delta_5y:+7.3f}  {row.delta_class_1y}"
        )


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
