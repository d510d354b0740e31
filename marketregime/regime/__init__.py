"""MarketRegime – Composite market regime scoring.

Six market indicators are classified against threshold tables and
combined into one weighted Risk-On / Neutral / Risk-Off regime, with a
persisted change log of label transitions.
"""

from .types import (
    CompositeRegimeState,
    IndicatorClassification,
    IndicatorColor,
    OverallLabel,
    OverallRegime,
    RegimeChange,
)
from .metrics import (
    CachedMarketDataSource,
    MarketMetrics,
    MarketMetricsSource,
    StaticMarketMetricsSource,
    metrics_from_market_data,
    parse_number,
)
from .indicators import INDICATORS, IndicatorSpec, ThresholdBand, classify_indicator, classify_metrics
from .scorer import composite_score, overall_regime
from .storage import RegimeStateStore
from .engine import RegimeEngine, build_engine, detect_changes
