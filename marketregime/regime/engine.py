"""MarketRegime – Composite regime engine.

This module orchestrates one regime computation:

1. Fetch :class:`MarketMetrics` from the configured source (unless the
   caller supplies them).
2. Classify the six indicators and combine them into the overall regime.
3. Under a lock, compare against the previously stored state, record
   label transitions in the change log and persist the new state.

The first run (no stored state) records no transitions. Persistence is
non-critical: failures are logged by :class:`RegimeStateStore` and the
computed state is still returned.
"""

from __future__ import annotations

# ============================================================================
# Imports
# ============================================================================

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from marketregime.core.config import MarketRegimeConfig
from marketregime.core.kv_store import KeyValueStore
from marketregime.core.logging import get_logger
from marketregime.regime.indicators import classify_metrics
from marketregime.regime.metrics import CachedMarketDataSource, MarketMetrics, MarketMetricsSource
from marketregime.regime.scorer import overall_regime
from marketregime.regime.storage import DEFAULT_LOG_LIMIT, RegimeStateStore
from marketregime.regime.types import OVERALL_INDICATOR_NAME, CompositeRegimeState, RegimeChange

logger = get_logger(__name__)


def detect_changes(
    previous: Optional[CompositeRegimeState],
    current: CompositeRegimeState,
) -> List[RegimeChange]:
    """Return label transitions from ``previous`` to ``current``.

    The overall regime comes first, followed by each indicator in
    display order. Indicators missing from ``previous`` are not reported.
    """

    if previous is None:
        return []

    stamp = current.timestamp.isoformat()
    changes: List[RegimeChange] = []

    if previous.overall.label != current.overall.label:
        changes.append(
            RegimeChange(
                date=stamp,
                indicator=OVERALL_INDICATOR_NAME,
                from_label=previous.overall.label.value,
                to_label=current.overall.label.value,
            )
        )

    for key, indicator in current.indicators.items():
        prior = previous.indicators.get(key)
        if prior is not None and prior.label != indicator.label:
            changes.append(
                RegimeChange(
                    date=stamp,
                    indicator=indicator.name,
                    from_label=prior.label,
                    to_label=indicator.label,
                )
            )

    return changes


@dataclass
class RegimeEngine:
    """Orchestrator for the composite market regime.

    Attributes:
        source: Provider of market metrics.
        storage: Repository for the previous state and change log.
        change_log_limit: Maximum number of change-log entries kept.
    """

    source: MarketMetricsSource
    storage: RegimeStateStore
    change_log_limit: int = DEFAULT_LOG_LIMIT
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    # ========================================================================
    # Public API Methods
    # ========================================================================

    def compute(self, metrics: Optional[MarketMetrics] = None) -> CompositeRegimeState:
        """Compute, persist and return the current composite regime.

        Concurrent calls are serialised; each one sees the state saved by
        the previous call.
        """

        if metrics is None:
            metrics = self.source.get_metrics()

        indicators = classify_metrics(metrics)
        state = CompositeRegimeState(
            indicators=indicators,
            overall=overall_regime(indicators),
            timestamp=datetime.now(timezone.utc),
        )

        with self._lock:
            previous = self.storage.get_previous()
            changes = detect_changes(previous, state)
            if changes:
                self.storage.append_changes(changes, self.change_log_limit)
            self.storage.save(state)

        logger.info(
            "RegimeEngine.compute: label=%s score=%.3f indicators_with_data=%d changes=%d",
            state.overall.label.value,
            state.overall.score,
            sum(1 for ind in indicators.values() if ind.has_data),
            len(changes),
        )

        return state

    def get_latest(self) -> Optional[CompositeRegimeState]:
        """Return the most recently stored state without recomputing."""

        return self.storage.get_previous()

    def get_change_log(self, limit: Optional[int] = None) -> List[RegimeChange]:
        """Return the change log, newest first, optionally truncated."""

        log = self.storage.get_change_log()
        if limit is not None:
            log = log[: max(limit, 0)]
        return log


def build_engine(
    config: MarketRegimeConfig,
    store: KeyValueStore,
    source: Optional[MarketMetricsSource] = None,
) -> RegimeEngine:
    """Construct a :class:`RegimeEngine` reading the dashboard caches by default."""

    return RegimeEngine(
        source=source if source is not None else CachedMarketDataSource(store),
        storage=RegimeStateStore(store),
        change_log_limit=config.change_log_limit,
    )
