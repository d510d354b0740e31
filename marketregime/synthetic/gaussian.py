"""MarketRegime – Standard normal random source.

Standard normal variates are produced with the Box-Muller transform on
top of an injected :class:`numpy.random.Generator`, which keeps every
simulated series reproducible when the generator is seeded.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import NDArray


@dataclass
class GaussianSampler:
    """Box-Muller sampler over a uniform(0, 1) source.

    Attributes:
        rng: Underlying numpy generator. Each normal draw consumes two
            uniforms (more if the first one is exactly zero).
    """

    rng: np.random.Generator = field(default_factory=np.random.default_rng)

    @classmethod
    def from_seed(cls, seed: Optional[int]) -> "GaussianSampler":
        """Return a sampler whose stream is fully determined by ``seed``.

        ``None`` draws fresh OS entropy.
        """

        return cls(rng=np.random.default_rng(seed))

    def next_gaussian(self) -> float:
        """Return one standard normal draw (mean 0, variance 1)."""

        u1 = self.rng.random()
        while u1 == 0.0:
            u1 = self.rng.random()
        u2 = self.rng.random()
        return math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)

    def standard_normals(self, n: int) -> NDArray[np.float64]:
        """Return ``n`` independent standard normal draws."""

        return np.array([self.next_gaussian() for _ in range(n)], dtype=float)

    def uniform(self, low: float, high: float) -> float:
        """Return a uniform draw in ``[low, high)`` from the same stream."""

        return low + (high - low) * self.rng.random()
