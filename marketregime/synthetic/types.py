"""MarketRegime – Synthetic data types.

This module defines the reference data types consumed by the shared
simulation primitives: instruments with their asset category and
annualised volatility, canonical pair keys, and parameters for the
mean-reverting positioning process.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence


class AssetCategory(str, Enum):
    """Asset class of an instrument in the cross-asset universe."""

    EQUITY = "equity"
    FIXED_INCOME = "fixed-income"
    COMMODITY = "commodity"
    FX = "fx"
    VOLATILITY = "volatility"
    CREDIT = "credit"


@dataclass(frozen=True)
class Instrument:
    """Immutable instrument reference data.

    Attributes:
        symbol: Ticker-style identifier (e.g. "SPY").
        display_name: Human-readable name (e.g. "S&P 500").
        category: Asset category.
        annual_volatility: Annualised volatility used to scale simulated
            daily returns (e.g. 0.18 for 18%).
    """

    symbol: str
    display_name: str
    category: AssetCategory
    annual_volatility: float


@dataclass(frozen=True)
class MeanReversionParams:
    """Parameters of the weekly mean-reverting positioning process.

    Attributes:
        drift: Per-step drift applied to the level.
        vol: Shock volatility.
        mean_revert: Fraction of the gap to ``base`` closed per step.
        floor: Minimum level after each step.
    """

    drift: float
    vol: float
    mean_revert: float
    floor: float = 1000.0


def pair_key(symbols: Sequence[str], first: str, second: str) -> str:
    """Return the canonical ``"A-B"`` key for a pair of symbols.

    The symbol that appears earlier in ``symbols`` comes first, so
    ``pair_key(symbols, "TLT", "SPY") == "SPY-TLT"`` for the standard
    universe ordering.

    Raises:
        ValueError: If either symbol is not part of ``symbols``.
    """

    index = {symbol: i for i, symbol in enumerate(symbols)}
    try:
        i, j = index[first], index[second]
    except KeyError as exc:
        raise ValueError(f"Unknown symbol in pair ({first!r}, {second!r})") from exc
    if i <= j:
        return f"{first}-{second}"
    return f"{second}-{first}"
