"""MarketRegime – Cross-asset universe and historical baselines.

Immutable reference data for the correlation monitor: the eight
instruments (in heatmap order), their annualised volatilities, and the
1-year and 5-year average pairwise correlations used as comparison
points for alerting and the comparison table.

Pair keys are canonical: the symbol that comes first in
:data:`INSTRUMENTS` is on the left (``"SPY-TLT"``, never ``"TLT-SPY"``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional, Tuple

from marketregime.core.types import WINDOWS, PairMapping
from marketregime.synthetic.types import AssetCategory, Instrument, pair_key


INSTRUMENTS: Tuple[Instrument, ...] = (
    Instrument("SPY", "S&P 500", AssetCategory.EQUITY, 0.18),
    Instrument("TLT", "20Y Treasury", AssetCategory.FIXED_INCOME, 0.15),
    Instrument("GLD", "Gold", AssetCategory.COMMODITY, 0.16),
    Instrument("DXY", "Dollar Index", AssetCategory.FX, 0.08),
    Instrument("VIX", "VIX", AssetCategory.VOLATILITY, 0.80),
    Instrument("HYG", "High Yield", AssetCategory.CREDIT, 0.08),
    Instrument("USO", "Oil", AssetCategory.COMMODITY, 0.35),
    Instrument("EEM", "EM Equities", AssetCategory.EQUITY, 0.22),
)

SYMBOLS: Tuple[str, ...] = tuple(inst.symbol for inst in INSTRUMENTS)

# 1Y average correlations.
BASELINE_1Y: PairMapping = MappingProxyType({
    "SPY-TLT": -0.35, "SPY-GLD": 0.05, "SPY-DXY": -0.15,
    "SPY-VIX": -0.82, "SPY-HYG": 0.65, "SPY-USO": 0.25, "SPY-EEM": 0.72,
    "TLT-GLD": 0.30, "TLT-DXY": -0.20, "TLT-VIX": 0.40, "TLT-HYG": -0.15,
    "TLT-USO": -0.10, "TLT-EEM": -0.25,
    "GLD-DXY": -0.45, "GLD-VIX": 0.15, "GLD-HYG": -0.05, "GLD-USO": 0.20, "GLD-EEM": 0.15,
    "DXY-VIX": 0.10, "DXY-HYG": -0.20, "DXY-USO": -0.30, "DXY-EEM": -0.55,
    "VIX-HYG": -0.60, "VIX-USO": -0.15, "VIX-EEM": -0.65,
    "HYG-USO": 0.30, "HYG-EEM": 0.55,
    "USO-EEM": 0.35,
})

# 5Y average correlations.
BASELINE_5Y: PairMapping = MappingProxyType({
    "SPY-TLT": -0.25, "SPY-GLD": 0.10, "SPY-DXY": -0.10,
    "SPY-VIX": -0.80, "SPY-HYG": 0.60, "SPY-USO": 0.30, "SPY-EEM": 0.68,
    "TLT-GLD": 0.25, "TLT-DXY": -0.15, "TLT-VIX": 0.35, "TLT-HYG": -0.10,
    "TLT-USO": -0.05, "TLT-EEM": -0.20,
    "GLD-DXY": -0.40, "GLD-VIX": 0.10, "GLD-HYG": 0.00, "GLD-USO": 0.15, "GLD-EEM": 0.10,
    "DXY-VIX": 0.05, "DXY-HYG": -0.15, "DXY-USO": -0.25, "DXY-EEM": -0.50,
    "VIX-HYG": -0.55, "VIX-USO": -0.10, "VIX-EEM": -0.60,
    "HYG-USO": 0.25, "HYG-EEM": 0.50,
    "USO-EEM": 0.30,
})

# Pairs highlighted in the comparison table.
KEY_PAIRS: Tuple[str, ...] = (
    "SPY-TLT", "SPY-VIX", "SPY-GLD", "SPY-HYG", "SPY-EEM",
    "TLT-GLD", "TLT-VIX", "VIX-HYG", "DXY-EEM", "DXY-GLD",
    "GLD-USO", "HYG-EEM", "DXY-USO", "VIX-EEM", "USO-EEM",
)

DEFAULT_WINDOW = 60


@dataclass(frozen=True)
class BaselineTable:
    """1Y and 5Y baseline correlations keyed by canonical pair key.

    Attributes:
        one_year: Canonical pair key → 1Y average correlation.
        five_year: Canonical pair key → 5Y average correlation.
        symbols: Symbol ordering used to canonicalise keys.
    """

    one_year: PairMapping = field(default_factory=lambda: BASELINE_1Y)
    five_year: PairMapping = field(default_factory=lambda: BASELINE_5Y)
    symbols: Tuple[str, ...] = SYMBOLS

    def key(self, first: str, second: str) -> str:
        return pair_key(self.symbols, first, second)

    def canonical(self, key: str) -> str:
        """Canonicalise a ``"A-B"`` key (``"DXY-GLD"`` → ``"GLD-DXY"``)."""

        first, second = key.split("-", 1)
        return self.key(first, second)

    def one_year_for(self, first: str, second: str) -> Optional[float]:
        return self.one_year.get(self.key(first, second))

    def five_year_for(self, first: str, second: str) -> Optional[float]:
        return self.five_year.get(self.key(first, second))
