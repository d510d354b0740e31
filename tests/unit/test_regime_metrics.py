"""MarketRegime: Tests for market metrics sources."""

from __future__ import annotations

import pytest

from marketregime.core.kv_store import (
    CORRELATION_ALERTS_KEY,
    MARKET_DATA_KEY,
    InMemoryKeyValueStore,
    StorageError,
)
from marketregime.regime import (
    CachedMarketDataSource,
    MarketMetrics,
    StaticMarketMetricsSource,
    metrics_from_market_data,
    parse_number,
)


MARKET_DATA = {
    "data": [
        {"label": "VIX", "value": "18.40", "changeNum": -0.6},
        {"label": "10Y Yield", "value": "4.28%", "changeNum": 0.02},
        {"label": "5Y Yield", "value": "4.05%", "changeNum": 0.01},
        {"label": "DXY", "value": "104.12", "changeNum": 0.45},
        {"label": "S&P 500", "value": "$5,123.40", "changeNum": "-0.72%"},
    ]
}


class _FailingStore:
    def get(self, key: str):
        raise StorageError("unavailable")

    def set(self, key: str, value) -> None:
        raise StorageError("unavailable")


class TestParseNumber:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("4.28%", 4.28),
            ("$5,123.40", 5123.40),
            ("-15bp", -15.0),
            (18.4, 18.4),
            ("1.2.3", 1.2),
        ],
    )
    def test_parses(self, raw: object, expected: float) -> None:
        assert parse_number(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, "", "n/a", True])
    def test_unparseable(self, raw: object) -> None:
        assert parse_number(raw) is None


class TestMetricsFromMarketData:
    def test_maps_labels(self) -> None:
        metrics = metrics_from_market_data(MARKET_DATA, None)

        assert metrics.vix == pytest.approx(18.40)
        assert metrics.yield_spread_bps() == pytest.approx(23.0)
        assert metrics.dxy_change == pytest.approx(0.45)
        assert metrics.dxy_display == "104.12"
        assert metrics.spx_change == pytest.approx(-0.72)
        assert metrics.spx_display == "$5,123.40"
        assert metrics.stock_bond_input() is None

    def test_explicit_inverted_spread_wins(self) -> None:
        data = {"data": MARKET_DATA["data"] + [{"label": "2s10s", "value": "35bp", "inverted": True}]}
        metrics = metrics_from_market_data(data, None)

        assert metrics.yield_spread_bps() == -35.0

    def test_missing_payload(self) -> None:
        assert metrics_from_market_data(None, None) == MarketMetrics()

    def test_stock_bond_proxy_from_alerts(self) -> None:
        flipped = metrics_from_market_data(None, [{"pair": "SPY-TLT"}])
        calm = metrics_from_market_data(None, [{"pair": "GLD-USO"}])

        assert flipped.stock_bond_input() == 0.15
        assert calm.stock_bond_input() == -0.35

    def test_explicit_correlation_beats_proxy(self) -> None:
        metrics = MarketMetrics(stock_bond_correlation=-0.1, correlation_alerts=[{"pair": "SPY-TLT"}])
        assert metrics.stock_bond_input() == -0.1


class TestSources:
    def test_static_source(self) -> None:
        metrics = MarketMetrics(vix=12.0)
        assert StaticMarketMetricsSource(metrics).get_metrics() is metrics

    def test_cached_source_reads_store(self) -> None:
        store = InMemoryKeyValueStore()
        store.set(MARKET_DATA_KEY, MARKET_DATA)
        store.set(CORRELATION_ALERTS_KEY, [{"pair": "SPY-TLT", "type": "x", "severity": "high", "message": "m"}])

        metrics = CachedMarketDataSource(store).get_metrics()

        assert metrics.vix == pytest.approx(18.40)
        assert metrics.stock_bond_input() == 0.15

    def test_cached_source_survives_storage_errors(self) -> None:
        metrics = CachedMarketDataSource(_FailingStore()).get_metrics()  # type: ignore[arg-type]
        assert metrics == MarketMetrics()
