"""MarketRegime – Rolling correlation estimator.

Computes an NxN Pearson correlation matrix over the trailing ``window``
observations of a return panel. The matrix is always recomputed from
scratch; with eight instruments and windows of at most 90 days an
incremental update buys nothing.
"""

from __future__ import annotations

import math

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike

from marketregime.core.logging import get_logger
from marketregime.correlation.types import CorrelationMatrix


logger = get_logger(__name__)


def pearson_correlation(x: ArrayLike, y: ArrayLike) -> float:
    """Return the Pearson correlation of two series.

    Uses the single-pass sum formula over the first ``n = min(len(x),
    len(y))`` observations::

        r = (nΣxy - ΣxΣy) / sqrt((nΣx² - (Σx)²)(nΣy² - (Σy)²))

    Returns 0.0 when ``n < 2``, when either variance term is not positive
    or when the window holds non-finite values. The result is clipped to
    [-1, 1].
    """

    xs = np.asarray(x, dtype=float)
    ys = np.asarray(y, dtype=float)
    n = min(xs.size, ys.size)
    if n < 2:
        return 0.0

    xs = xs[:n]
    ys = ys[:n]

    sum_x = float(xs.sum())
    sum_y = float(ys.sum())
    sum_xy = float((xs * ys).sum())
    sum_x2 = float((xs * xs).sum())
    sum_y2 = float((ys * ys).sum())

    var_x = n * sum_x2 - sum_x * sum_x
    var_y = n * sum_y2 - sum_y * sum_y
    if not var_x > 0.0 or not var_y > 0.0:
        return 0.0

    r = (n * sum_xy - sum_x * sum_y) / math.sqrt(var_x * var_y)
    if not math.isfinite(r):
        return 0.0
    return max(-1.0, min(1.0, r))


def rolling_correlation_matrix(returns: pd.DataFrame, window: int) -> CorrelationMatrix:
    """Estimate the correlation matrix over the last ``window`` rows.

    Only the upper triangle is computed; the lower triangle mirrors it and
    the diagonal is exactly 1.0.

    Args:
        returns: Return panel with one column per instrument, oldest row
            first.
        window: Rolling window length in observations.

    Raises:
        ValueError: If ``window`` is not positive.
    """

    if window <= 0:
        raise ValueError("window must be positive")

    symbols = tuple(str(col) for col in returns.columns)
    tail = returns.tail(window).to_numpy(dtype=float)
    observations = tail.shape[0]
    n = len(symbols)

    values = np.eye(n, dtype=float)
    for i in range(n):
        for j in range(i + 1, n):
            r = pearson_correlation(tail[:, i], tail[:, j])
            values[i, j] = r
            values[j, i] = r

    logger.debug(
        "rolling_correlation_matrix: window=%d observations=%d instruments=%d",
        window,
        observations,
        n,
    )

    return CorrelationMatrix(
        symbols=symbols,
        values=values,
        window=window,
        observations=observations,
    )
