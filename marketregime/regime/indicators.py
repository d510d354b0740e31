"""MarketRegime – Market indicator classification.

Each of the six regime indicators maps a raw reading onto an ordered
table of threshold bands. The first matching band wins:

- upper-bound tables (VIX, stock-bond correlation, credit stress, dollar
  trend) match when ``value < bound``;
- lower-bound tables (yield curve, equity trend) match when
  ``value >= bound``.

The final band of every table has an infinite bound so it always
matches. Missing or NaN readings classify as "No Data" with a neutral
score of 0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from marketregime.regime.metrics import MarketMetrics
from marketregime.regime.types import (
    NO_DATA_DISPLAY,
    NO_DATA_LABEL,
    IndicatorClassification,
    IndicatorColor,
)

G, Y, O, R = IndicatorColor.GREEN, IndicatorColor.YELLOW, IndicatorColor.ORANGE, IndicatorColor.RED
INF = math.inf


class BoundKind(str, Enum):
    UPPER = "upper"
    LOWER = "lower"


@dataclass(frozen=True)
class ThresholdBand:
    bound: float
    label: str
    color: IndicatorColor
    score: float


@dataclass(frozen=True)
class IndicatorSpec:
    """Threshold table and weight of one regime indicator.

    Attributes:
        key: Stable indicator key.
        name: Display name.
        weight: Weight in the composite score.
        kind: Whether band bounds are upper (``<``) or lower (``>=``).
        bands: Ordered bands; the last one always matches.
        display_format: Format applied to the raw value when no explicit
            display string is supplied.
    """

    key: str
    name: str
    weight: float
    kind: BoundKind
    bands: Tuple[ThresholdBand, ...]
    display_format: str = "{:.2f}"

    def band_for(self, value: float) -> ThresholdBand:
        for band in self.bands:
            if self.kind is BoundKind.UPPER and value < band.bound:
                return band
            if self.kind is BoundKind.LOWER and value >= band.bound:
                return band
        return self.bands[-1]


VIX = IndicatorSpec(
    key="vix",
    name="VIX Regime",
    weight=0.25,
    kind=BoundKind.UPPER,
    bands=(
        ThresholdBand(15, "Low", G, -1.0),
        ThresholdBand(20, "Normal", Y, -0.3),
        ThresholdBand(30, "Elevated", O, 0.5),
        ThresholdBand(INF, "Crisis", R, 1.0),
    ),
)

YIELD_CURVE = IndicatorSpec(
    key="yield_curve",
    name="Yield Curve",
    weight=0.20,
    kind=BoundKind.LOWER,
    bands=(
        ThresholdBand(50, "Steep", G, -1.0),
        ThresholdBand(0, "Flat", Y, 0.2),
        ThresholdBand(-INF, "Inverted", R, 1.0),
    ),
    display_format="{:.0f}bp",
)

STOCK_BOND_CORR = IndicatorSpec(
    key="stock_bond_corr",
    name="Stock-Bond Corr",
    weight=0.15,
    kind=BoundKind.UPPER,
    bands=(
        ThresholdBand(-0.2, "Normal", G, -1.0),
        ThresholdBand(0.1, "Transitioning", Y, 0.2),
        ThresholdBand(INF, "Flipped", R, 1.0),
    ),
)

CREDIT_STRESS = IndicatorSpec(
    key="credit_stress",
    name="Credit Stress",
    weight=0.15,
    kind=BoundKind.UPPER,
    bands=(
        ThresholdBand(15, "Low", G, -1.0),
        ThresholdBand(20, "Moderate", Y, -0.2),
        ThresholdBand(25, "Elevated", O, 0.5),
        ThresholdBand(INF, "High", R, 1.0),
    ),
)

DOLLAR_TREND = IndicatorSpec(
    key="dollar_trend",
    name="Dollar Trend",
    weight=0.10,
    kind=BoundKind.UPPER,
    bands=(
        ThresholdBand(-0.3, "Weakening", G, -0.5),
        ThresholdBand(0.3, "Stable", Y, 0.0),
        ThresholdBand(INF, "Strengthening", O, 0.7),
    ),
    display_format="{:+.2f}%",
)

EQUITY_TREND = IndicatorSpec(
    key="equity_trend",
    name="Equity Trend",
    weight=0.15,
    kind=BoundKind.LOWER,
    bands=(
        ThresholdBand(0.5, "Bullish", G, -1.0),
        ThresholdBand(-0.5, "Neutral", Y, 0.0),
        ThresholdBand(-INF, "Bearish", R, 1.0),
    ),
    display_format="{:+.2f}%",
)

# Display order of the regime dashboard.
INDICATORS: Mapping[str, IndicatorSpec] = MappingProxyType({
    spec.key: spec
    for spec in (VIX, YIELD_CURVE, STOCK_BOND_CORR, CREDIT_STRESS, DOLLAR_TREND, EQUITY_TREND)
})


def _is_missing(value: Optional[float]) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def no_data(spec: IndicatorSpec) -> IndicatorClassification:
    return IndicatorClassification(
        key=spec.key,
        name=spec.name,
        display_value=NO_DATA_DISPLAY,
        label=NO_DATA_LABEL,
        color=IndicatorColor.YELLOW,
        score=0.0,
        raw_value=None,
    )


def classify_indicator(
    spec: IndicatorSpec,
    value: Optional[float],
    display_value: Optional[str] = None,
) -> IndicatorClassification:
    """Classify ``value`` against ``spec``'s threshold table.

    ``display_value`` overrides the formatted raw value (e.g. the index
    level shown next to a percent-change driven trend).
    """

    if _is_missing(value):
        return no_data(spec)

    raw = float(value)  # type: ignore[arg-type]
    band = spec.band_for(raw)
    return IndicatorClassification(
        key=spec.key,
        name=spec.name,
        display_value=display_value if display_value else spec.display_format.format(raw),
        label=band.label,
        color=band.color,
        score=band.score,
        raw_value=raw,
    )


def classify_metrics(metrics: MarketMetrics) -> Dict[str, IndicatorClassification]:
    """Classify all six indicators from one metrics snapshot, in display order."""

    return {
        VIX.key: classify_indicator(VIX, metrics.vix),
        YIELD_CURVE.key: classify_indicator(YIELD_CURVE, metrics.yield_spread_bps()),
        STOCK_BOND_CORR.key: classify_indicator(STOCK_BOND_CORR, metrics.stock_bond_input()),
        CREDIT_STRESS.key: classify_indicator(CREDIT_STRESS, metrics.credit_stress_input()),
        DOLLAR_TREND.key: classify_indicator(DOLLAR_TREND, metrics.dxy_change, metrics.dxy_display),
        EQUITY_TREND.key: classify_indicator(EQUITY_TREND, metrics.spx_change, metrics.spx_display),
    }
