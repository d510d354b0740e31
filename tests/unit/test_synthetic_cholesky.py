"""MarketRegime: Tests for the floored Cholesky factorisation."""

from __future__ import annotations

import numpy as np
import pytest

from marketregime.correlation.baselines import BASELINE_1Y, SYMBOLS
from marketregime.synthetic import cholesky, pair_key


def _baseline_matrix() -> np.ndarray:
    n = len(SYMBOLS)
    m = np.eye(n)
    for i in range(n):
        for j in range(i + 1, n):
            m[i, j] = m[j, i] = BASELINE_1Y[pair_key(SYMBOLS, SYMBOLS[i], SYMBOLS[j])]
    return m


class TestCholesky:
    def test_reconstructs_positive_definite_matrix(self) -> None:
        a = np.array([[1.0, 0.5, 0.2], [0.5, 1.0, 0.3], [0.2, 0.3, 1.0]])
        factor = cholesky(a)

        assert not factor.was_floored
        assert np.allclose(factor.lower @ factor.lower.T, a, atol=1e-9)
        assert np.allclose(np.triu(factor.lower, k=1), 0.0)

    def test_matches_numpy_on_identity(self) -> None:
        factor = cholesky(np.eye(4))
        assert np.allclose(factor.lower, np.eye(4))

    def test_floors_non_positive_definite_input(self) -> None:
        a = np.array([[1.0, 0.99, -0.99], [0.99, 1.0, 0.99], [-0.99, 0.99, 1.0]])
        factor = cholesky(a)

        assert factor.was_floored
        assert 2 in factor.floored_rows
        assert np.all(np.isfinite(factor.lower))

    def test_baseline_matrix_factorises(self) -> None:
        a = _baseline_matrix()
        factor = cholesky(a)

        if not factor.was_floored:
            assert np.allclose(factor.lower @ factor.lower.T, a, atol=1e-9)
        assert np.all(np.isfinite(factor.lower))

    def test_non_square_raises(self) -> None:
        with pytest.raises(ValueError):
            cholesky(np.ones((2, 3)))
