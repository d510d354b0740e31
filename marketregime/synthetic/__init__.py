"""MarketRegime – Shared statistical simulation package.

This package exposes the random source, Cholesky factorisation and
series generators reused by every simulated-data consumer.
"""

from .types import AssetCategory, Instrument, MeanReversionParams, pair_key
from .gaussian import GaussianSampler
from .cholesky import CholeskyFactor, cholesky
from .processes import ZScoreSummary, correlated_series, mean_reverting_series, zscore
from .engine import ReturnSimulator
