"""MarketRegime – Composite regime scorer."""

from __future__ import annotations

from typing import Mapping

from marketregime.regime.indicators import INDICATORS, IndicatorSpec
from marketregime.regime.types import IndicatorClassification, OverallLabel, OverallRegime

RISK_ON_BELOW = -0.3
NEUTRAL_BELOW = 0.3

OVERALL_COLORS = {
    OverallLabel.RISK_ON: "#3fb950",
    OverallLabel.NEUTRAL: "#d29922",
    OverallLabel.RISK_OFF: "#f85149",
}


def composite_score(
    indicators: Mapping[str, IndicatorClassification],
    specs: Mapping[str, IndicatorSpec] = INDICATORS,
) -> float:
    """Weighted mean of indicator scores over indicators with data.

    Indicators without data are left out of both the weighted sum and the
    total weight, so a missing reading never pulls the score towards
    Neutral. Returns 0.0 when no indicator has data.
    """

    weighted = 0.0
    total = 0.0
    for key, classification in indicators.items():
        spec = specs.get(key)
        if spec is None or not classification.has_data:
            continue
        weighted += classification.score * spec.weight
        total += spec.weight

    if total <= 0.0:
        return 0.0
    return weighted / total


def label_for_score(score: float) -> OverallLabel:
    if score < RISK_ON_BELOW:
        return OverallLabel.RISK_ON
    if score < NEUTRAL_BELOW:
        return OverallLabel.NEUTRAL
    return OverallLabel.RISK_OFF


def overall_regime(
    indicators: Mapping[str, IndicatorClassification],
    specs: Mapping[str, IndicatorSpec] = INDICATORS,
) -> OverallRegime:
    """Combine indicator classifications into the overall regime."""

    score = composite_score(indicators, specs)
    label = label_for_score(score)
    return OverallRegime(score=score, label=label, color=OVERALL_COLORS[label])
