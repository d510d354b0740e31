"""MarketRegime – Correlation monitor session.

:class:`CorrelationMonitor` holds the state of one correlation monitor
view: the simulated return panel, the selected rolling window, the
current matrix and its alerts. It wires together the return simulator,
the rolling estimator and the regime classifier.

Thread safety: ``refresh`` is guarded by a non-blocking lock; a refresh
arriving while another is in flight is dropped and the current snapshot
returned. State reads and window changes are serialised by a second
lock.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from marketregime.core.config import MarketRegimeConfig
from marketregime.core.kv_store import KeyValueStore
from marketregime.core.logging import get_logger
from marketregime.correlation.alerts import CorrelationRegimeClassifier
from marketregime.correlation.baselines import (
    BASELINE_1Y,
    DEFAULT_WINDOW,
    INSTRUMENTS,
    WINDOWS,
    BaselineTable,
)
from marketregime.correlation.comparison import (
    ComparisonRow,
    HeatmapCell,
    build_comparison_table,
    build_heatmap_cells,
)
from marketregime.correlation.estimator import rolling_correlation_matrix
from marketregime.correlation.storage import AlertCacheStorage
from marketregime.correlation.types import CorrelationMatrix, RegimeAlert
from marketregime.synthetic import GaussianSampler, ReturnSimulator


logger = get_logger(__name__)


@dataclass(frozen=True)
class CorrelationSnapshot:
    """Everything the correlation view renders for one state."""

    instruments: List[Dict[str, str]]
    matrix: CorrelationMatrix
    alerts: List[RegimeAlert]
    comparison: List[ComparisonRow]
    heatmap: List[HeatmapCell]
    window: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "window": self.window,
            "instruments": self.instruments,
            "matrix": self.matrix.to_dict(),
            "alerts": [a.to_dict() for a in self.alerts],
            "comparison": [r.to_dict() for r in self.comparison],
            "heatmap": [c.to_dict() for c in self.heatmap],
        }


@dataclass
class CorrelationMonitor:
    """Session object for the cross-asset correlation monitor.

    Attributes:
        simulator: Source of the synthetic return panel.
        classifier: Correlation regime classifier.
        baselines: Baselines used for the comparison table and heatmap.
        days: Simulation horizon in trading days.
        window: Currently selected rolling window.
    """

    simulator: ReturnSimulator
    classifier: CorrelationRegimeClassifier
    baselines: BaselineTable = field(default_factory=BaselineTable)
    days: int = 250
    window: int = DEFAULT_WINDOW

    returns: Optional[pd.DataFrame] = field(default=None, init=False)
    matrix: Optional[CorrelationMatrix] = field(default=None, init=False)
    alerts: List[RegimeAlert] = field(default_factory=list, init=False)

    def __post_init__(self) -> None:
        if self.window not in WINDOWS:
            raise ValueError(f"window must be one of {WINDOWS}, got {self.window}")
        self._refresh_lock = threading.Lock()
        self._state_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def initialised(self) -> bool:
        return self.returns is not None

    def initialise(self) -> CorrelationSnapshot:
        """Simulate a fresh return panel and compute matrix and alerts."""

        returns = self.simulator.simulate_returns(self.days)
        with self._state_lock:
            self.returns = returns
            self._recompute()
            return self._snapshot()

    def change_window(self, window: int) -> CorrelationSnapshot:
        """Switch the rolling window and recompute from the held returns.

        Raises:
            ValueError: If ``window`` is not one of 30, 60 or 90.
        """

        if window not in WINDOWS:
            raise ValueError(f"window must be one of {WINDOWS}, got {window}")

        if not self.initialised:
            self.window = window
            return self.initialise()

        with self._state_lock:
            self.window = window
            self._recompute()
            return self._snapshot()

    def refresh(self) -> CorrelationSnapshot:
        """Regenerate the return panel, unless a refresh is already running."""

        if not self._refresh_lock.acquire(blocking=False):
            logger.warning("CorrelationMonitor.refresh: refresh already in flight; skipped")
            return self.snapshot()
        try:
            return self.initialise()
        finally:
            self._refresh_lock.release()

    def snapshot(self) -> CorrelationSnapshot:
        """Return the current state, initialising on first use."""

        if not self.initialised:
            return self.initialise()
        with self._state_lock:
            return self._snapshot()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _recompute(self) -> None:
        if self.returns is None:
            raise RuntimeError("CorrelationMonitor has no return panel; call initialise() first")
        self.matrix = rolling_correlation_matrix(self.returns, self.window)
        self.alerts = self.classifier.classify(self.matrix)
        logger.info(
            "CorrelationMonitor: window=%d days=%d alerts=%d",
            self.window,
            len(self.returns),
            len(self.alerts),
        )

    def _snapshot(self) -> CorrelationSnapshot:
        if self.matrix is None:
            raise RuntimeError("CorrelationMonitor has no matrix; call initialise() first")
        instruments = [
            {
                "symbol": inst.symbol,
                "display_name": inst.display_name,
                "category": inst.category.value,
            }
            for inst in self.simulator.instruments
        ]
        return CorrelationSnapshot(
            instruments=instruments,
            matrix=self.matrix,
            alerts=list(self.alerts),
            comparison=build_comparison_table(self.matrix, self.baselines),
            heatmap=build_heatmap_cells(self.matrix, self.baselines),
            window=self.window,
        )


def build_monitor(config: MarketRegimeConfig, store: Optional[KeyValueStore] = None) -> CorrelationMonitor:
    """Construct a :class:`CorrelationMonitor` from configuration.

    When ``store`` is given the alert summaries are cached under
    ``corr_alerts`` after every classification.
    """

    sim_cfg = config.simulation
    sampler = GaussianSampler.from_seed(sim_cfg.seed)
    baselines = BaselineTable()

    simulator = ReturnSimulator(instruments=INSTRUMENTS, baseline=BASELINE_1Y, sampler=sampler)
    classifier = CorrelationRegimeClassifier(
        baselines=baselines,
        cache=AlertCacheStorage(store) if store is not None else None,
    )

    return CorrelationMonitor(
        simulator=simulator,
        classifier=classifier,
        baselines=baselines,
        days=sim_cfg.days,
        window=sim_cfg.window,
    )
