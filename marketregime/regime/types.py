"""MarketRegime – Composite regime types.

This module defines the data structures produced by the composite
regime scorer: per-indicator classifications, the overall weighted
regime, the persisted composite state and change-log entries.

External dependencies:
- None beyond the standard library.

Database tables accessed:
- None directly. States are persisted via
  :mod:`marketregime.regime.storage`.

Thread safety: Dataclasses are immutable value objects; this module
itself is stateless.

Author: MarketRegime Team
Created: 2026-02-04
Last Modified: 2026-02-11
Status: Development
Version: v0.2.0
"""

from __future__ import annotations

# ============================================================================
# Imports
# ============================================================================

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional

# ============================================================================
# Labels
# ============================================================================


class IndicatorColor(str, Enum):
    """Traffic-light colour attached to an indicator classification."""

    GREEN = "green"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"


class OverallLabel(str, Enum):
    """Overall composite regime label.

    - ``RISK_ON`` – composite score below -0.3.
    - ``NEUTRAL`` – composite score in [-0.3, 0.3).
    - ``RISK_OFF`` – composite score at or above 0.3.
    """

    RISK_ON = "Risk-On"
    NEUTRAL = "Neutral"
    RISK_OFF = "Risk-Off"


NO_DATA_LABEL = "No Data"
NO_DATA_DISPLAY = "--"
OVERALL_INDICATOR_NAME = "Overall Regime"

# ============================================================================
# Core dataclasses
# ============================================================================


@dataclass(frozen=True)
class IndicatorClassification:
    """Classification of one market indicator.

    Attributes:
        key: Stable indicator key (e.g. "vix").
        name: Display name (e.g. "VIX Regime").
        display_value: Formatted raw value, or "--" when missing.
        label: Band label (e.g. "Elevated") or "No Data".
        color: Traffic-light colour of the band.
        score: Risk score in [-1, 1]; positive means risk-off.
        raw_value: Raw input value, or ``None`` when missing.
    """

    key: str
    name: str
    display_value: str
    label: str
    color: IndicatorColor
    score: float
    raw_value: Optional[float] = None

    @property
    def has_data(self) -> bool:
        return self.raw_value is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "display_value": self.display_value,
            "label": self.label,
            "color": self.color.value,
            "score": self.score,
            "raw_value": self.raw_value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "IndicatorClassification":
        raw = data.get("raw_value")
        return cls(
            key=str(data["key"]),
            name=str(data.get("name", data["key"])),
            display_value=str(data.get("display_value", NO_DATA_DISPLAY)),
            label=str(data["label"]),
            color=IndicatorColor(data.get("color", IndicatorColor.YELLOW.value)),
            score=float(data.get("score", 0.0)),
            raw_value=float(raw) if raw is not None else None,
        )


@dataclass(frozen=True)
class OverallRegime:
    """Weighted composite of the indicator scores."""

    score: float
    label: OverallLabel
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "label": self.label.value, "color": self.color}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OverallRegime":
        return cls(
            score=float(data["score"]),
            label=OverallLabel(data["label"]),
            color=str(data.get("color", "")),
        )


@dataclass(frozen=True)
class CompositeRegimeState:
    """Full regime snapshot persisted between runs.

    Attributes:
        indicators: Indicator key → classification, in display order.
        overall: Weighted overall regime.
        timestamp: Time of computation (UTC).
    """

    indicators: Mapping[str, IndicatorClassification]
    overall: OverallRegime
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "indicators": {key: ind.to_dict() for key, ind in self.indicators.items()},
            "overall": self.overall.to_dict(),
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CompositeRegimeState":
        """Rebuild a state from :meth:`to_dict` output.

        Raises:
            KeyError, ValueError, TypeError: If ``data`` is malformed.
        """

        raw_indicators = data["indicators"]
        indicators: Dict[str, IndicatorClassification] = {}
        for key, raw in raw_indicators.items():
            payload = dict(raw)
            payload.setdefault("key", key)
            indicators[key] = IndicatorClassification.from_dict(payload)

        return cls(
            indicators=indicators,
            overall=OverallRegime.from_dict(data["overall"]),
            timestamp=datetime.fromisoformat(str(data["timestamp"])),
        )


@dataclass(frozen=True)
class RegimeChange:
    """One entry in the regime change log.

    Attributes:
        date: ISO-8601 timestamp of the computation that saw the change.
        indicator: Indicator display name, or "Overall Regime".
        from_label: Previous label.
        to_label: New label.
    """

    date: str
    indicator: str
    from_label: str
    to_label: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "date": self.date,
            "indicator": self.indicator,
            "from": self.from_label,
            "to": self.to_label,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RegimeChange":
        return cls(
            date=str(data["date"]),
            indicator=str(data["indicator"]),
            from_label=str(data["from"]),
            to_label=str(data["to"]),
        )
