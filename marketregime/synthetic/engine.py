"""MarketRegime – Synthetic return simulator.

This module implements the return simulator behind the cross-asset
correlation monitor. Without live data it synthesises a daily-return
panel whose correlation structure resembles the historical baseline
with a random "current regime" perturbation:

1. Build a target correlation matrix: unit diagonal, off-diagonal
   baseline (0 when unknown) plus uniform noise in ``[-0.15, 0.15]``,
   clipped to ``[-0.99, 0.99]`` and mirrored for symmetry.
2. Factorise it with :func:`marketregime.synthetic.cholesky.cholesky`.
3. For each day draw independent normals, correlate them via ``L @ z``
   and scale by ``annual_vol / sqrt(252)``.

The output is deterministic for a seeded :class:`GaussianSampler`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np
import pandas as pd

from marketregime.core.logging import get_logger
from marketregime.core.types import FloatMatrix, PairMapping
from marketregime.synthetic.cholesky import DEFAULT_FLOOR, CholeskyFactor, cholesky
from marketregime.synthetic.gaussian import GaussianSampler
from marketregime.synthetic.processes import correlated_series
from marketregime.synthetic.types import Instrument, pair_key


logger = get_logger(__name__)

TRADING_DAYS_PER_YEAR = 252


@dataclass
class ReturnSimulator:
    """Generate correlated daily returns for a fixed instrument universe.

    Attributes:
        instruments: Ordered instrument universe; column order of the
            returned panel.
        baseline: Canonical pair key → baseline correlation used as the
            centre of the target matrix.
        sampler: Random source shared by the perturbation and the
            normal draws.
        perturbation: Half-width of the uniform noise added to each
            baseline correlation.
        clip: Absolute bound applied to perturbed correlations.
        floor: Radicand floor passed to the Cholesky factorisation.
    """

    instruments: Sequence[Instrument]
    baseline: PairMapping
    sampler: GaussianSampler = field(default_factory=GaussianSampler)
    perturbation: float = 0.15
    clip: float = 0.99
    floor: float = DEFAULT_FLOOR

    def __post_init__(self) -> None:
        if not self.instruments:
            raise ValueError("ReturnSimulator requires at least one instrument")
        self._floor_hits = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def symbols(self) -> List[str]:
        return [inst.symbol for inst in self.instruments]

    @property
    def floor_hits(self) -> int:
        """Number of factorisations so far in which the floor triggered."""

        return self._floor_hits

    def build_target_matrix(self) -> FloatMatrix:
        """Return a perturbed, clipped, symmetric target correlation matrix."""

        symbols = self.symbols
        n = len(symbols)
        target = np.eye(n, dtype=float)

        for i in range(n):
            for j in range(i + 1, n):
                base = float(self.baseline.get(pair_key(symbols, symbols[i], symbols[j]), 0.0))
                noise = self.sampler.uniform(-self.perturbation, self.perturbation)
                value = max(-self.clip, min(self.clip, base + noise))
                target[i, j] = value
                target[j, i] = value

        return target

    def factorise(self, target: FloatMatrix) -> CholeskyFactor:
        """Factorise ``target``, logging when the radicand floor triggers."""

        factor = cholesky(target, floor=self.floor)
        if factor.was_floored:
            self._floor_hits += 1
            logger.warning(
                "ReturnSimulator.factorise: target matrix not positive definite; "
                "floored rows=%s (floor hit %d time(s) so far)",
                [self.symbols[i] for i in factor.floored_rows],
                self._floor_hits,
            )
        return factor

    def correlated_draws(self, factor: CholeskyFactor, days: int) -> np.ndarray:
        """Return ``(days, N)`` correlated daily returns for ``factor``."""

        daily_vols = [
            inst.annual_volatility / math.sqrt(TRADING_DAYS_PER_YEAR) for inst in self.instruments
        ]
        return correlated_series(factor, daily_vols, days, self.sampler)

    def simulate_returns(self, days: int = 250) -> pd.DataFrame:
        """Return a ``(days, N)`` panel of simulated daily returns.

        Columns follow the instrument order; the index ``day`` runs from 0
        (oldest) to ``days - 1`` (most recent), so row ``i`` is the same
        simulated day for every instrument.
        """

        if days <= 0:
            raise ValueError("days must be positive")

        target = self.build_target_matrix()
        factor = self.factorise(target)

        values = self.correlated_draws(factor, days)

        returns = pd.DataFrame(
            values,
            columns=self.symbols,
            index=pd.RangeIndex(days, name="day"),
        )

        logger.info(
            "ReturnSimulator.simulate_returns: days=%d instruments=%d",
            days,
            len(self.instruments),
        )

        return returns
