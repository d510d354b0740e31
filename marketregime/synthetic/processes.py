"""MarketRegime – Shared simulation primitives.

Every simulated-data consumer in the dashboard (cross-asset returns,
positioning and flow widgets) builds on the same three primitives so
that random sources, correlation structure and z-score statistics are
implemented once:

- :func:`correlated_series` – impose a Cholesky factor on independent
  normals and scale per column.
- :func:`mean_reverting_series` – weekly level process with drift,
  proportional shocks and mean reversion towards a base level.
- :func:`zscore` – rolling z-score of the latest observation against a
  lookback window, flagging extremes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from marketregime.synthetic.cholesky import CholeskyFactor
from marketregime.synthetic.gaussian import GaussianSampler
from marketregime.synthetic.types import MeanReversionParams

EXTREME_ZSCORE = 2.0


def correlated_series(
    factor: CholeskyFactor,
    scales: Sequence[float],
    periods: int,
    sampler: GaussianSampler,
) -> NDArray[np.float64]:
    """Return a ``(periods, N)`` array of correlated, scaled draws.

    For each period ``N`` independent normals ``z`` are drawn, mapped to
    ``x = L @ z`` and multiplied element-wise by ``scales``.
    """

    lower = factor.lower
    n = lower.shape[0]
    if len(scales) != n:
        raise ValueError(f"Expected {n} scales, got {len(scales)}")
    if periods < 0:
        raise ValueError("periods must be non-negative")

    scale_vec = np.asarray(scales, dtype=float)
    out = np.empty((periods, n), dtype=float)
    for t in range(periods):
        z = sampler.standard_normals(n)
        out[t, :] = (lower @ z) * scale_vec
    return out


def mean_reverting_series(
    base: float,
    params: MeanReversionParams,
    periods: int,
    sampler: GaussianSampler,
    shock_scale: float = 0.05,
    drift_scale: float = 0.02,
) -> NDArray[np.float64]:
    """Simulate a rounded level process that reverts towards ``base``.

    Each step applies ``(base - level) * mean_revert`` plus a drift of
    ``level * drift * drift_scale`` and a shock of
    ``level * vol * N(0,1) * shock_scale``; the result is rounded and
    floored at ``params.floor``.
    """

    if periods < 0:
        raise ValueError("periods must be non-negative")

    level = float(base)
    out = np.empty(periods, dtype=float)
    for t in range(periods):
        reversion = (base - level) * params.mean_revert
        shock = level * params.vol * sampler.next_gaussian() * shock_scale
        drift = level * params.drift * drift_scale
        level = max(params.floor, float(round(level + reversion + drift + shock)))
        out[t] = level
    return out


@dataclass(frozen=True)
class ZScoreSummary:
    """Z-score of the latest observation against its lookback window."""

    current: float
    mean: float
    std: float
    zscore: float
    is_extreme: bool
    extreme_side: Optional[str]


def zscore(
    values: ArrayLike,
    lookback: int,
    extreme_threshold: float = EXTREME_ZSCORE,
) -> Optional[ZScoreSummary]:
    """Return the z-score of the last value over the last ``lookback`` values.

    Uses the population standard deviation. A flat window yields a
    z-score of 0. Returns ``None`` for an empty series.
    """

    if lookback <= 0:
        raise ValueError("lookback must be positive")

    arr = np.asarray(values, dtype=float)
    window = arr[-lookback:]
    if window.size == 0:
        return None

    current = float(window[-1])
    mean = float(window.mean())
    std = float(window.std())
    z = (current - mean) / std if std > 0 else 0.0

    is_extreme = abs(z) > extreme_threshold
    side: Optional[str] = None
    if is_extreme:
        side = "LONG" if z > 0 else "SHORT"

    return ZScoreSummary(
        current=current,
        mean=mean,
        std=std,
        zscore=z,
        is_extreme=is_extreme,
        extreme_side=side,
    )
