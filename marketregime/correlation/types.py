"""MarketRegime – Correlation monitor types.

This module defines the value objects exchanged between the rolling
correlation estimator, the correlation regime classifier and the render
consumers (heatmap, alert cards, comparison table).

Thread safety: Dataclasses are immutable value objects; this module is
stateless.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
import pandas as pd

from marketregime.core.types import FloatMatrix


# ============================================================================
# Correlation matrix
# ============================================================================


@dataclass(frozen=True)
class CorrelationMatrix:
    """NxN correlation matrix indexed by the instrument ordering.

    Invariants: symmetric, diagonal exactly 1.0, entries in [-1, 1].
    Rolling Pearson estimates on finite samples are not guaranteed to be
    positive semi-definite.

    Attributes:
        symbols: Row/column ordering.
        values: Matrix entries, shape ``(N, N)``.
        window: Number of trailing observations requested for the
            estimate.
        observations: Number of observations actually used
            (``min(window, len(series))``).
    """

    symbols: Tuple[str, ...]
    values: FloatMatrix
    window: int
    observations: int

    def __post_init__(self) -> None:
        n = len(self.symbols)
        if self.values.shape != (n, n):
            raise ValueError(
                f"CorrelationMatrix values shape {self.values.shape} does not match {n} symbols"
            )

    def index_of(self, symbol: str) -> int:
        try:
            return self.symbols.index(symbol)
        except ValueError as exc:
            raise KeyError(symbol) from exc

    def get(self, first: str, second: str) -> float:
        """Return the correlation between two symbols."""

        return float(self.values[self.index_of(first), self.index_of(second)])

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.values, index=list(self.symbols), columns=list(self.symbols))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbols": list(self.symbols),
            "values": np.round(self.values, 6).tolist(),
            "window": self.window,
            "observations": self.observations,
        }


# ============================================================================
# Alerts
# ============================================================================


class AlertType(str, Enum):
    """Rule that produced a :class:`RegimeAlert`."""

    SIGN_FLIP = "sign-flip"
    WEAKENING = "weakening"
    DECOUPLING = "decoupling"
    DEVIATION = "deviation"


class Severity(str, Enum):
    MODERATE = "moderate"
    HIGH = "high"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class RegimeAlert:
    """A correlation that departs from its historical baseline.

    Attributes:
        pair: Canonical pair key (e.g. "SPY-TLT").
        display_name: Human-readable pair name (e.g. "S&P 500 / 20Y Treasury").
        current_value: Current rolling correlation.
        baseline_value: 1Y baseline correlation.
        alert_type: Rule that fired.
        title: Short alert title (e.g. "Stock-Bond Correlation Flip").
        severity: ``high`` when the deviation exceeds the severe threshold.
        direction: Whether the correlation moved up or down versus baseline.
        description: Analyst-facing explanation.
    """

    pair: str
    display_name: str
    current_value: float
    baseline_value: float
    alert_type: AlertType
    title: str
    severity: Severity
    direction: Direction
    description: str

    @property
    def deviation(self) -> float:
        """Absolute distance between current and baseline correlation."""

        return abs(self.current_value - self.baseline_value)

    def summary(self) -> Dict[str, str]:
        """Lightweight summary cached for cross-view widgets."""

        return {
            "pair": self.pair,
            "type": self.title,
            "severity": self.severity.value,
            "message": f"{self.title}: {self.display_name}",
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pair": self.pair,
            "display_name": self.display_name,
            "current_value": self.current_value,
            "baseline_value": self.baseline_value,
            "delta": self.current_value - self.baseline_value,
            "alert_type": self.alert_type.value,
            "title": self.title,
            "severity": self.severity.value,
            "direction": self.direction.value,
            "description": self.description,
        }


def sort_alerts(alerts: Sequence[RegimeAlert]) -> List[RegimeAlert]:
    """Order alerts high severity first, then by descending deviation."""

    return sorted(
        alerts,
        key=lambda a: (0 if a.severity is Severity.HIGH else 1, -a.deviation),
    )
