"""MarketRegime – Market metrics sources.

The regime engine reads its inputs through the :class:`MarketMetricsSource`
protocol. Two sources are provided:

- :class:`StaticMarketMetricsSource` returns fixed readings (tests,
  CLI overrides).
- :class:`CachedMarketDataSource` reads the market-data cache written by
  the dashboard's market panel plus the correlation alert cache, both
  through the key-value port.

Keys accessed:
- market_data
- corr_alerts
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol

from marketregime.core.kv_store import (
    CORRELATION_ALERTS_KEY,
    MARKET_DATA_KEY,
    KeyValueStore,
    StorageError,
)
from marketregime.core.logging import get_logger


logger = get_logger(__name__)

STOCK_BOND_PAIR = "SPY-TLT"
# Proxy correlations used when only the alert list is known.
FLIPPED_PROXY = 0.15
NORMAL_PROXY = -0.35

_NUMBER_RE = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


@dataclass(frozen=True)
class MarketMetrics:
    """One snapshot of regime inputs. Every field is optional.

    Attributes:
        vix: VIX level.
        yield_10y: 10Y Treasury yield in percent.
        yield_5y: 5Y Treasury yield in percent.
        spread_2s10s_bps: Explicit 2s10s spread in basis points.
        dxy_change: Dollar index daily change in percent.
        dxy_display: Dollar index display string.
        spx_change: S&P 500 daily change in percent.
        spx_display: S&P 500 display string.
        credit_stress: Explicit credit stress reading.
        stock_bond_correlation: Explicit SPY-TLT correlation.
        correlation_alerts: Cached correlation alert summaries, or
            ``None`` when unknown.
    """

    vix: Optional[float] = None
    yield_10y: Optional[float] = None
    yield_5y: Optional[float] = None
    spread_2s10s_bps: Optional[float] = None
    dxy_change: Optional[float] = None
    dxy_display: Optional[str] = None
    spx_change: Optional[float] = None
    spx_display: Optional[str] = None
    credit_stress: Optional[float] = None
    stock_bond_correlation: Optional[float] = None
    correlation_alerts: Optional[List[Dict[str, Any]]] = None

    def yield_spread_bps(self) -> Optional[float]:
        """2s10s spread, falling back to ``(10Y - 5Y) * 100``."""

        if self.spread_2s10s_bps is not None:
            return self.spread_2s10s_bps
        if self.yield_10y is not None and self.yield_5y is not None:
            return (self.yield_10y - self.yield_5y) * 100.0
        return None

    def stock_bond_input(self) -> Optional[float]:
        """Explicit stock-bond correlation, else a proxy from the alert list."""

        if self.stock_bond_correlation is not None:
            return self.stock_bond_correlation
        if self.correlation_alerts is None:
            return None
        if any(alert.get("pair") == STOCK_BOND_PAIR for alert in self.correlation_alerts):
            return FLIPPED_PROXY
        return NORMAL_PROXY

    def credit_stress_input(self) -> Optional[float]:
        """Explicit credit stress, else VIX as a proxy."""

        if self.credit_stress is not None:
            return self.credit_stress
        return self.vix


class MarketMetricsSource(Protocol):
    """Provider of the latest :class:`MarketMetrics`."""

    def get_metrics(self) -> MarketMetrics:  # pragma: no cover - interface
        ...


# ============================================================================
# Parsing helpers
# ============================================================================


def parse_number(value: Any) -> Optional[float]:
    """Parse a display string such as ``"4.25%"`` or ``"$5,123.40"``.

    Every character other than digits, ``.`` and ``-`` is stripped and
    the leading numeric prefix is parsed. Returns ``None`` when nothing
    numeric remains.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    cleaned = re.sub(r"[^0-9.\-]", "", str(value))
    match = _NUMBER_RE.match(cleaned)
    if match is None:
        return None
    return float(match.group(0))


def _find(items: List[Mapping[str, Any]], label: str) -> Optional[Mapping[str, Any]]:
    for item in items:
        if item.get("label") == label:
            return item
    return None


def _change(item: Optional[Mapping[str, Any]]) -> Optional[float]:
    if item is None:
        return None
    return parse_number(item.get("changeNum"))


def _display(item: Optional[Mapping[str, Any]]) -> Optional[str]:
    if item is None or item.get("value") is None:
        return None
    return str(item["value"])


def metrics_from_market_data(
    market_data: Optional[Mapping[str, Any]],
    alerts: Optional[List[Dict[str, Any]]],
) -> MarketMetrics:
    """Build :class:`MarketMetrics` from the cached market-panel payload.

    ``market_data`` has the shape ``{"data": [{"label", "value",
    "changeNum", "inverted"}, ...]}``.
    """

    items: List[Mapping[str, Any]] = []
    if isinstance(market_data, Mapping) and isinstance(market_data.get("data"), list):
        items = [item for item in market_data["data"] if isinstance(item, Mapping)]

    vix_item = _find(items, "VIX")
    y10_item = _find(items, "10Y Yield")
    y5_item = _find(items, "5Y Yield")
    spread_item = _find(items, "2s10s")
    dxy_item = _find(items, "DXY")
    spx_item = _find(items, "S&P 500")

    spread: Optional[float] = None
    if spread_item is not None:
        spread = parse_number(spread_item.get("value"))
        if spread is not None and spread_item.get("inverted"):
            spread = -abs(spread)

    return MarketMetrics(
        vix=parse_number(vix_item.get("value")) if vix_item else None,
        yield_10y=parse_number(y10_item.get("value")) if y10_item else None,
        yield_5y=parse_number(y5_item.get("value")) if y5_item else None,
        spread_2s10s_bps=spread,
        dxy_change=_change(dxy_item),
        dxy_display=_display(dxy_item),
        spx_change=_change(spx_item),
        spx_display=_display(spx_item),
        correlation_alerts=alerts,
    )


# ============================================================================
# Sources
# ============================================================================


@dataclass
class StaticMarketMetricsSource:
    """Return the same metrics on every call."""

    metrics: MarketMetrics

    def get_metrics(self) -> MarketMetrics:
        return self.metrics


@dataclass
class CachedMarketDataSource:
    """Read metrics from the dashboard caches in the key-value store."""

    store: KeyValueStore

    def _read(self, key: str) -> Any:
        try:
            return self.store.get(key)
        except StorageError as exc:
            logger.warning("CachedMarketDataSource: failed to read %s: %s", key, exc)
            return None

    def get_metrics(self) -> MarketMetrics:
        market_data = self._read(MARKET_DATA_KEY)
        raw_alerts = self._read(CORRELATION_ALERTS_KEY)
        alerts: Optional[List[Dict[str, Any]]] = None
        if isinstance(raw_alerts, list):
            alerts = [a for a in raw_alerts if isinstance(a, dict)]

        metrics = metrics_from_market_data(market_data, alerts)
        logger.debug(
            "CachedMarketDataSource.get_metrics: market_data=%s alerts=%s",
            market_data is not None,
            alerts is not None,
        )
        return metrics
