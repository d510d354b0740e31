"""MarketRegime – Comparison table and heatmap cell data.

Pure builders that turn a :class:`CorrelationMatrix` into the row/cell
records consumed by the comparison table and the heatmap tooltip. No
rendering happens here.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Sequence

from marketregime.correlation.baselines import KEY_PAIRS, BaselineTable
from marketregime.correlation.types import CorrelationMatrix


RED_DELTA = 0.30
YELLOW_DELTA = 0.15


def delta_class(delta: float) -> str:
    """Colour class for an absolute change versus baseline."""

    magnitude = abs(delta)
    if magnitude > RED_DELTA:
        return "red"
    if magnitude > YELLOW_DELTA:
        return "yellow"
    return "green"


def strength_label(value: float) -> str:
    magnitude = abs(value)
    if magnitude > 0.7:
        return "Strong"
    if magnitude > 0.4:
        return "Moderate"
    if magnitude > 0.15:
        return "Weak"
    return "Negligible"


def direction_label(value: float) -> str:
    if value > 0:
        return "Positive"
    if value < 0:
        return "Negative"
    return "Zero"


@dataclass(frozen=True)
class ComparisonRow:
    pair: str
    current: float
    baseline_1y: float
    baseline_5y: float
    delta_1y: float
    delta_5y: float
    delta_class_1y: str
    delta_class_5y: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HeatmapCell:
    row: str
    col: str
    value: float
    is_diagonal: bool
    strength: str
    direction: str
    delta_1y: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_comparison_table(
    matrix: CorrelationMatrix,
    baselines: BaselineTable,
    pairs: Sequence[str] = KEY_PAIRS,
) -> List[ComparisonRow]:
    """Compare current correlations of ``pairs`` against 1Y and 5Y baselines.

    Keys are canonicalised first, so a pair listed in reverse order still
    resolves its baseline. Pairs whose symbols are missing from the
    matrix or that have no 1Y baseline are skipped. When the 5Y baseline
    is missing the 1Y value is used in its place. Rows are sorted by
    absolute 1Y delta, largest first.
    """

    rows: List[ComparisonRow] = []
    seen: set[str] = set()

    for raw in pairs:
        try:
            key = baselines.canonical(raw)
        except ValueError:
            continue
        if key in seen:
            continue
        seen.add(key)

        first, second = key.split("-", 1)
        if first not in matrix.symbols or second not in matrix.symbols:
            continue

        baseline_1y = baselines.one_year.get(key)
        if baseline_1y is None:
            continue
        baseline_5y = baselines.five_year.get(key, baseline_1y)

        current = matrix.get(first, second)
        delta_1y = current - baseline_1y
        delta_5y = current - baseline_5y
        rows.append(
            ComparisonRow(
                pair=key,
                current=current,
                baseline_1y=baseline_1y,
                baseline_5y=baseline_5y,
                delta_1y=delta_1y,
                delta_5y=delta_5y,
                delta_class_1y=delta_class(delta_1y),
                delta_class_5y=delta_class(delta_5y),
            )
        )

    rows.sort(key=lambda r: abs(r.delta_1y), reverse=True)
    return rows


def build_heatmap_cells(matrix: CorrelationMatrix, baselines: BaselineTable) -> List[HeatmapCell]:
    """Return one cell per (row, col) in row-major order."""

    cells: List[HeatmapCell] = []
    for i, row in enumerate(matrix.symbols):
        for j, col in enumerate(matrix.symbols):
            value = float(matrix.values[i, j])
            diagonal = i == j

            delta: Optional[float] = None
            if not diagonal:
                try:
                    baseline = baselines.one_year_for(row, col)
                except ValueError:
                    baseline = None
                if baseline is not None:
                    delta = value - baseline

            cells.append(
                HeatmapCell(
                    row=row,
                    col=col,
                    value=value,
                    is_diagonal=diagonal,
                    strength=strength_label(value),
                    direction=direction_label(value),
                    delta_1y=delta,
                )
            )
    return cells
