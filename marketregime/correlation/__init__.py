"""MarketRegime – Cross-asset correlation monitor.

Rolling correlation estimation over the simulated return panel,
baseline comparison and correlation regime alerts.
"""

from .baselines import (
    BASELINE_1Y,
    BASELINE_5Y,
    DEFAULT_WINDOW,
    INSTRUMENTS,
    KEY_PAIRS,
    SYMBOLS,
    WINDOWS,
    BaselineTable,
)
from .types import AlertType, CorrelationMatrix, Direction, RegimeAlert, Severity, sort_alerts
from .estimator import pearson_correlation, rolling_correlation_matrix
from .storage import AlertCacheStorage
from .alerts import AlertThresholds, CorrelationRegimeClassifier
from .comparison import (
    ComparisonRow,
    HeatmapCell,
    build_comparison_table,
    build_heatmap_cells,
    delta_class,
)
from .monitor import CorrelationMonitor, CorrelationSnapshot, build_monitor
