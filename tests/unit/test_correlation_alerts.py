"""MarketRegime: Tests for the correlation regime classifier."""

from __future__ import annotations

from typing import Dict

import numpy as np
import pytest

from marketregime.core.kv_store import CORRELATION_ALERTS_KEY, InMemoryKeyValueStore
from marketregime.correlation import (
    AlertCacheStorage,
    AlertType,
    BaselineTable,
    CorrelationMatrix,
    CorrelationRegimeClassifier,
    Direction,
    Severity,
)
from marketregime.correlation.baselines import BASELINE_1Y, SYMBOLS


def _matrix(overrides: Dict[str, float] | None = None) -> CorrelationMatrix:
    """Build a matrix equal to the 1Y baseline, with selected overrides."""

    table = BaselineTable()
    n = len(SYMBOLS)
    values = np.eye(n)
    pairs = dict(BASELINE_1Y)
    pairs.update(overrides or {})
    for i in range(n):
        for j in range(i + 1, n):
            v = pairs[table.key(SYMBOLS[i], SYMBOLS[j])]
            values[i, j] = values[j, i] = v
    return CorrelationMatrix(symbols=SYMBOLS, values=values, window=60, observations=60)


class TestCorrelationRegimeClassifier:
    def test_baseline_matrix_produces_no_alerts(self) -> None:
        assert CorrelationRegimeClassifier().classify(_matrix()) == []

    def test_stock_bond_sign_flip(self) -> None:
        alerts = CorrelationRegimeClassifier().classify(_matrix({"SPY-TLT": 0.10}))

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.pair == "SPY-TLT"
        assert alert.alert_type is AlertType.SIGN_FLIP
        assert alert.title == "Stock-Bond Correlation Flip"
        assert alert.display_name == "S&P 500 / 20Y Treasury"
        assert alert.severity is Severity.HIGH
        assert alert.direction is Direction.UP
        assert alert.deviation == pytest.approx(0.45)

    def test_special_rule_moderate_severity(self) -> None:
        alerts = CorrelationRegimeClassifier().classify(_matrix({"SPY-VIX": -0.45}))

        assert [a.alert_type for a in alerts] == [AlertType.WEAKENING]
        assert alerts[0].severity is Severity.MODERATE
        assert alerts[0].title == "VIX-Equity Decoupling"

    def test_special_pairs_excluded_from_deviation_scan(self) -> None:
        # DXY-EEM moved far down: below its rule threshold, so no decoupling
        # alert, and it must not fall through to the generic deviation rule.
        alerts = CorrelationRegimeClassifier().classify(_matrix({"DXY-EEM": -0.95}))
        assert alerts == []

    def test_generic_deviation(self) -> None:
        alerts = CorrelationRegimeClassifier().classify(_matrix({"GLD-USO": -0.15}))

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.alert_type is AlertType.DEVIATION
        assert alert.title == "Significant Deviation"
        assert alert.display_name == "Gold / Oil"
        assert alert.direction is Direction.DOWN
        assert alert.severity is Severity.MODERATE
        assert "more negative than 1Y average by 0.35" in alert.description

    def test_small_deviation_is_ignored(self) -> None:
        alerts = CorrelationRegimeClassifier().classify(_matrix({"GLD-USO": 0.45}))
        assert alerts == []

    def test_ordering_high_first_then_deviation(self) -> None:
        alerts = CorrelationRegimeClassifier().classify(
            _matrix({"GLD-USO": 0.55, "HYG-EEM": 0.05, "TLT-GLD": -0.08})
        )

        assert [a.pair for a in alerts] == ["HYG-EEM", "TLT-GLD", "GLD-USO"]
        assert [a.severity for a in alerts] == [Severity.HIGH, Severity.MODERATE, Severity.MODERATE]

    def test_classification_is_idempotent(self) -> None:
        classifier = CorrelationRegimeClassifier()
        matrix = _matrix({"SPY-TLT": 0.2, "GLD-USO": -0.2, "SPY-VIX": -0.3})

        assert classifier.classify(matrix) == classifier.classify(matrix)

    def test_missing_baseline_is_skipped(self) -> None:
        baseline = dict(BASELINE_1Y)
        del baseline["GLD-USO"]
        classifier = CorrelationRegimeClassifier(baselines=BaselineTable(one_year=baseline))

        assert classifier.classify(_matrix({"GLD-USO": -0.9})) == []

    def test_summaries_written_to_cache(self) -> None:
        store = InMemoryKeyValueStore()
        classifier = CorrelationRegimeClassifier(cache=AlertCacheStorage(store))

        classifier.classify(_matrix({"SPY-TLT": 0.10}))

        assert store.get(CORRELATION_ALERTS_KEY) == [
            {
                "pair": "SPY-TLT",
                "type": "Stock-Bond Correlation Flip",
                "severity": "high",
                "message": "Stock-Bond Correlation Flip: S&P 500 / 20Y Treasury",
            }
        ]
