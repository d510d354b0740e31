"""MarketRegime: Tests for comparison table and heatmap builders."""

from __future__ import annotations

import numpy as np
import pytest

from marketregime.correlation import (
    BaselineTable,
    CorrelationMatrix,
    build_comparison_table,
    build_heatmap_cells,
    delta_class,
)
from marketregime.correlation.baselines import BASELINE_1Y, KEY_PAIRS, SYMBOLS


def _baseline_matrix(**overrides: float) -> CorrelationMatrix:
    table = BaselineTable()
    n = len(SYMBOLS)
    values = np.eye(n)
    for i in range(n):
        for j in range(i + 1, n):
            key = table.key(SYMBOLS[i], SYMBOLS[j])
            values[i, j] = values[j, i] = overrides.get(key.replace("-", "_"), BASELINE_1Y[key])
    return CorrelationMatrix(symbols=SYMBOLS, values=values, window=60, observations=60)


class TestDeltaClass:
    @pytest.mark.parametrize(
        "delta,expected",
        [(0.0, "green"), (0.15, "green"), (0.16, "yellow"), (-0.2, "yellow"), (0.31, "red"), (-0.5, "red")],
    )
    def test_tiers(self, delta: float, expected: str) -> None:
        assert delta_class(delta) == expected


class TestComparisonTable:
    def test_covers_all_key_pairs_with_canonical_keys(self) -> None:
        rows = build_comparison_table(_baseline_matrix(), BaselineTable())

        assert len(rows) == len(KEY_PAIRS)
        pairs = {row.pair for row in rows}
        assert "GLD-DXY" in pairs
        assert "DXY-GLD" not in pairs

    def test_sorted_by_absolute_one_year_delta(self) -> None:
        rows = build_comparison_table(_baseline_matrix(SPY_TLT=0.10, GLD_USO=0.0), BaselineTable())

        assert rows[0].pair == "SPY-TLT"
        assert rows[0].delta_1y == pytest.approx(0.45)
        assert rows[0].delta_5y == pytest.approx(0.35)
        assert rows[0].delta_class_1y == "red"
        assert rows[1].pair == "GLD-USO"
        assert rows[1].delta_class_1y == "yellow"
        deltas = [abs(r.delta_1y) for r in rows]
        assert deltas == sorted(deltas, reverse=True)

    def test_missing_five_year_falls_back_to_one_year(self) -> None:
        five_year = {"SPY-TLT": -0.25}
        rows = build_comparison_table(_baseline_matrix(), BaselineTable(five_year=five_year))
        by_pair = {r.pair: r for r in rows}

        assert by_pair["SPY-VIX"].baseline_5y == by_pair["SPY-VIX"].baseline_1y
        assert by_pair["SPY-VIX"].delta_5y == pytest.approx(0.0)
        assert by_pair["SPY-TLT"].baseline_5y == -0.25


class TestHeatmapCells:
    def test_cells_cover_matrix(self) -> None:
        cells = build_heatmap_cells(_baseline_matrix(SPY_TLT=0.10), BaselineTable())

        assert len(cells) == len(SYMBOLS) ** 2
        diagonal = [c for c in cells if c.is_diagonal]
        assert len(diagonal) == len(SYMBOLS)
        assert all(c.delta_1y is None and c.strength == "Strong" for c in diagonal)

    def test_labels_and_delta(self) -> None:
        cells = {(c.row, c.col): c for c in build_heatmap_cells(_baseline_matrix(SPY_TLT=0.10), BaselineTable())}

        spy_vix = cells[("SPY", "VIX")]
        assert spy_vix.strength == "Strong"
        assert spy_vix.direction == "Negative"

        tlt_spy = cells[("TLT", "SPY")]
        assert tlt_spy.strength == "Negligible"
        assert tlt_spy.direction == "Positive"
        assert tlt_spy.delta_1y == pytest.approx(0.45)

        assert cells[("SPY", "HYG")].strength == "Moderate"
        assert cells[("TLT", "VIX")].strength == "Weak"
        assert cells[("GLD", "HYG")].strength == "Negligible"
