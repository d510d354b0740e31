"""MarketRegime – Correlation regime classifier.

Compares a current correlation matrix against the 1Y baseline and emits
severity-tagged :class:`RegimeAlert` objects. Rules are evaluated in a
fixed priority order:

1. Sign flip: SPY-TLT above 0 (stock-bond correlation turned positive).
2. Weakening: SPY-VIX above -0.5 (VIX less negatively tied to equities).
3. Decoupling: DXY-EEM above -0.3 (EM less sensitive to the dollar).
4. Deviation: any other pair more than 0.30 away from its baseline.

Pairs handled by rules 1-3 are excluded from the deviation scan, so each
pair produces at most one alert. Pairs without a baseline are skipped.
The threshold values have no statistical derivation and are kept as
configuration constants in :class:`AlertThresholds`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from marketregime.core.logging import get_logger
from marketregime.correlation.baselines import INSTRUMENTS, BaselineTable
from marketregime.correlation.storage import AlertCacheStorage
from marketregime.correlation.types import (
    AlertType,
    CorrelationMatrix,
    Direction,
    RegimeAlert,
    Severity,
    sort_alerts,
)


logger = get_logger(__name__)


class AlertThresholds(BaseModel):
    """Thresholds used by :class:`CorrelationRegimeClassifier`.

    Attributes:
        sign_flip: SPY-TLT level above which the stock-bond sign flip fires.
        weakening: SPY-VIX level above which the VIX-equity link is
            considered weakened.
        decoupling: DXY-EEM level above which dollar/EM decoupling fires.
        deviation: Minimum absolute distance from baseline for the generic
            deviation scan.
        moderate: Moderate-deviation level from the dashboard's threshold
            table. Carried for tuning; no rule reads it yet.
        severe: Deviation above which an alert is tagged ``high``.
    """

    model_config = ConfigDict(frozen=True)

    sign_flip: float = 0.0
    weakening: float = -0.5
    decoupling: float = -0.3
    deviation: float = 0.30
    moderate: float = 0.2
    severe: float = 0.4


@dataclass(frozen=True)
class _PairRule:
    pair: Tuple[str, str]
    alert_type: AlertType
    title: str
    description: str


_SPECIAL_RULES: Tuple[_PairRule, ...] = (
    _PairRule(
        pair=("SPY", "TLT"),
        alert_type=AlertType.SIGN_FLIP,
        title="Stock-Bond Correlation Flip",
        description=(
            "Stock-bond correlation has turned positive. Historically negative, this "
            "suggests both risk assets and safe havens are moving together - a potential "
            "sign of inflation-driven regime or liquidity crisis."
        ),
    ),
    _PairRule(
        pair=("SPY", "VIX"),
        alert_type=AlertType.WEAKENING,
        title="VIX-Equity Decoupling",
        description=(
            "VIX is less negatively correlated with equities than usual. This can indicate "
            "hedging demand is abnormally low or the vol surface is distorted. Tail risk "
            "may be underpriced."
        ),
    ),
    _PairRule(
        pair=("DXY", "EEM"),
        alert_type=AlertType.DECOUPLING,
        title="Dollar-EM Decoupling",
        description=(
            "EM equities are less sensitive to dollar strength than historical norms. May "
            "indicate capital flow shifts, local central bank intervention, or "
            "commodity-driven EM resilience."
        ),
    ),
)

DEVIATION_TITLE = "Significant Deviation"


def _default_names() -> Dict[str, str]:
    return {inst.symbol: inst.display_name for inst in INSTRUMENTS}


@dataclass
class CorrelationRegimeClassifier:
    """Detect correlation regime changes against historical baselines.

    Attributes:
        baselines: Baseline table; only the 1Y mapping drives alerts.
        thresholds: Rule thresholds.
        cache: Optional alert-summary cache written after every pass.
        display_names: Symbol → display name used for pair names.
    """

    baselines: BaselineTable = field(default_factory=BaselineTable)
    thresholds: AlertThresholds = field(default_factory=AlertThresholds)
    cache: Optional[AlertCacheStorage] = None
    display_names: Mapping[str, str] = field(default_factory=_default_names)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def classify(self, matrix: CorrelationMatrix) -> List[RegimeAlert]:
        """Return alerts for ``matrix``, most severe first.

        The same matrix always yields the same list in the same order.
        When a cache is configured the alert summaries are written to it.
        """

        alerts: List[RegimeAlert] = []
        handled: set[str] = set()

        for rule in _SPECIAL_RULES:
            alert = self._apply_special_rule(matrix, rule)
            handled.add(self._key(*rule.pair))
            if alert is not None:
                alerts.append(alert)

        alerts.extend(self._scan_deviations(matrix, handled))
        ordered = sort_alerts(alerts)

        if self.cache is not None:
            self.cache.save_summaries(ordered)

        high = sum(1 for a in ordered if a.severity is Severity.HIGH)
        logger.info(
            "CorrelationRegimeClassifier.classify: window=%d alerts=%d high=%d moderate=%d",
            matrix.window,
            len(ordered),
            high,
            len(ordered) - high,
        )

        return ordered

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _key(self, first: str, second: str) -> str:
        return self.baselines.key(first, second)

    def _pair_name(self, first: str, second: str) -> str:
        return f"{self.display_names.get(first, first)} / {self.display_names.get(second, second)}"

    def _severity(self, deviation: float) -> Severity:
        return Severity.HIGH if deviation > self.thresholds.severe else Severity.MODERATE

    def _rule_threshold(self, alert_type: AlertType) -> float:
        if alert_type is AlertType.SIGN_FLIP:
            return self.thresholds.sign_flip
        if alert_type is AlertType.WEAKENING:
            return self.thresholds.weakening
        return self.thresholds.decoupling

    def _apply_special_rule(self, matrix: CorrelationMatrix, rule: _PairRule) -> Optional[RegimeAlert]:
        first, second = rule.pair
        key = self._key(first, second)
        baseline = self.baselines.one_year.get(key)
        if baseline is None or first not in matrix.symbols or second not in matrix.symbols:
            return None

        current = matrix.get(first, second)
        if current <= self._rule_threshold(rule.alert_type):
            return None

        return RegimeAlert(
            pair=key,
            display_name=self._pair_name(first, second),
            current_value=current,
            baseline_value=baseline,
            alert_type=rule.alert_type,
            title=rule.title,
            severity=self._severity(abs(current - baseline)),
            direction=Direction.UP,
            description=rule.description,
        )

    def _scan_deviations(self, matrix: CorrelationMatrix, handled: set[str]) -> List[RegimeAlert]:
        alerts: List[RegimeAlert] = []
        symbols = matrix.symbols

        for i in range(len(symbols)):
            for j in range(i + 1, len(symbols)):
                first, second = symbols[i], symbols[j]
                try:
                    key = self._key(first, second)
                except ValueError:
                    continue
                if key in handled:
                    continue

                baseline = self.baselines.one_year.get(key)
                if baseline is None:
                    continue

                current = float(matrix.values[i, j])
                deviation = abs(current - baseline)
                if deviation <= self.thresholds.deviation:
                    continue

                more_positive = current > baseline
                direction_text = "more positive" if more_positive else "more negative"
                alerts.append(
                    RegimeAlert(
                        pair=key,
                        display_name=self._pair_name(*key.split("-", 1)),
                        current_value=current,
                        baseline_value=baseline,
                        alert_type=AlertType.DEVIATION,
                        title=DEVIATION_TITLE,
                        severity=self._severity(deviation),
                        direction=Direction.UP if more_positive else Direction.DOWN,
                        description=(
                            f"Correlation is {direction_text} than 1Y average by {deviation:.2f}. "
                            "This pair has moved outside normal bounds and warrants monitoring."
                        ),
                    )
                )

        return alerts
