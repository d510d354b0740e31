"""MarketRegime – Presentation data for the regime dashboard.

Pure helpers that turn regime values into the numbers and colours the
gauge, indicator cards and change-log table render. Nothing here draws.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Sequence

from marketregime.regime.types import CompositeRegimeState, IndicatorColor, RegimeChange

COLOR_HEX: Dict[IndicatorColor, str] = {
    IndicatorColor.GREEN: "#3fb950",
    IndicatorColor.YELLOW: "#d29922",
    IndicatorColor.ORANGE: "#db6d28",
    IndicatorColor.RED: "#f85149",
}
FALLBACK_HEX = "#8b949e"

CHANGE_LOG_ROWS = 20

_GREEN_LABELS = {"low", "steep", "normal", "bullish", "weakening"}
_YELLOW_LABELS = {"flat", "moderate", "stable", "transitioning"}


def color_hex(color: IndicatorColor | str) -> str:
    try:
        return COLOR_HEX[IndicatorColor(color)]
    except ValueError:
        return FALLBACK_HEX


def clamp_score(score: float) -> float:
    return max(-1.0, min(1.0, score))


def bar_percent(score: float) -> int:
    """Map a score in [-1, 1] onto a 0-100 bar width."""

    return int(round((score + 1.0) / 2.0 * 100.0))


def needle_angle(score: float) -> float:
    """Gauge needle angle in radians: -1 → -π, 0 → -π/2, +1 → 0."""

    return -math.pi + (clamp_score(score) + 1.0) / 2.0 * math.pi


def label_color(label: str) -> str:
    """Colour used for a label in the change-log table."""

    lowered = label.lower()
    if "risk-on" in lowered or lowered in _GREEN_LABELS:
        return COLOR_HEX[IndicatorColor.GREEN]
    if "neutral" in lowered or lowered in _YELLOW_LABELS:
        return COLOR_HEX[IndicatorColor.YELLOW]
    if "elevated" in lowered or lowered == "strengthening":
        return COLOR_HEX[IndicatorColor.ORANGE]
    return COLOR_HEX[IndicatorColor.RED]


def indicator_cards(state: CompositeRegimeState) -> List[Dict[str, Any]]:
    return [
        {
            **ind.to_dict(),
            "hex": color_hex(ind.color),
            "bar_percent": bar_percent(ind.score),
        }
        for ind in state.indicators.values()
    ]


def gauge(state: CompositeRegimeState) -> Dict[str, Any]:
    return {
        "score": state.overall.score,
        "label": state.overall.label.value,
        "color": state.overall.color,
        "needle_angle": needle_angle(state.overall.score),
    }


def change_log_rows(log: Sequence[RegimeChange], limit: int = CHANGE_LOG_ROWS) -> List[Dict[str, str]]:
    return [
        {
            **change.to_dict(),
            "from_color": label_color(change.from_label),
            "to_color": label_color(change.to_label),
        }
        for change in log[:limit]
    ]
