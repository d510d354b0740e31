"""MarketRegime – Cholesky factorisation for target correlation matrices.

Target matrices are built from baseline correlations plus random
perturbation and are therefore not guaranteed to be positive definite.
Instead of failing, the factorisation floors the diagonal radicand at a
small epsilon, which yields a degenerate (near-zero) pivot for rows that
would otherwise be invalid.

This is a known accuracy limitation: flooring is not a nearest
correlation matrix projection (e.g. Higham's algorithm), so ``L @ L.T``
only approximates the input when the floor triggers. The rows where it
did are reported on :class:`CholeskyFactor` so that callers can log a
diagnostic.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike

from marketregime.core.types import FloatMatrix

DEFAULT_FLOOR = 1e-10


@dataclass(frozen=True)
class CholeskyFactor:
    """Result of :func:`cholesky`.

    Attributes:
        lower: Lower-triangular factor ``L`` with ``L @ L.T ≈ A``.
        floored_rows: Indices of rows whose diagonal radicand fell below
            the floor. Empty for positive-definite input.
    """

    lower: FloatMatrix
    floored_rows: Tuple[int, ...] = ()

    @property
    def was_floored(self) -> bool:
        return bool(self.floored_rows)


def cholesky(matrix: ArrayLike, floor: float = DEFAULT_FLOOR) -> CholeskyFactor:
    """Factorise a symmetric matrix into a lower-triangular ``L``.

    For each row ``i`` and column ``j <= i``::

        L[i][j] = (A[i][j] - sum_k<j L[i][k] L[j][k]) / L[j][j]
        L[i][i] = sqrt(max(A[i][i] - sum_k<i L[i][k]^2, floor))

    Never raises on numeric grounds.

    Raises:
        ValueError: If ``matrix`` is not a square 2-D array.
    """

    a = np.asarray(matrix, dtype=float)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"cholesky expects a square matrix, got shape {a.shape}")

    n = a.shape[0]
    lower = np.zeros((n, n), dtype=float)
    floored: list[int] = []

    for i in range(n):
        for j in range(i + 1):
            acc = 0.0
            for k in range(j):
                acc += lower[i, k] * lower[j, k]

            if i == j:
                radicand = a[i, i] - acc
                if radicand < floor:
                    floored.append(i)
                    radicand = floor
                lower[i, j] = math.sqrt(radicand)
            else:
                lower[i, j] = (a[i, j] - acc) / lower[j, j]

    return CholeskyFactor(lower=lower, floored_rows=tuple(floored))
