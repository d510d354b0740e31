"""MarketRegime: Tests for the correlation monitor session."""

from __future__ import annotations


import pytest

from marketregime.core.config import MarketRegimeConfig
from marketregime.core.kv_store import CORRELATION_ALERTS_KEY, InMemoryKeyValueStore
from marketregime.correlation import CorrelationMonitor, build_monitor


@pytest.fixture()
def config(monkeypatch: pytest.MonkeyPatch) -> MarketRegimeConfig:
    monkeypatch.setenv("RANDOM_SEED", "17")
    monkeypatch.setenv("SIMULATION_DAYS", "120")
    monkeypatch.setenv("CORRELATION_WINDOW", "60")
    return MarketRegimeConfig()


class TestCorrelationMonitor:
    def test_snapshot_initialises_lazily(self, config: MarketRegimeConfig) -> None:
        monitor = build_monitor(config)
        assert not monitor.initialised

        snapshot = monitor.snapshot()

        assert monitor.initialised
        assert snapshot.window == 60
        assert len(snapshot.instruments) == 8
        assert snapshot.matrix.observations == 60
        assert len(snapshot.heatmap) == 64
        assert len(snapshot.comparison) == 15

    def test_change_window_reuses_returns(self, config: MarketRegimeConfig) -> None:
        monitor = build_monitor(config)
        monitor.initialise()
        returns = monitor.returns

        snapshot = monitor.change_window(30)

        assert monitor.returns is returns
        assert snapshot.window == 30
        assert snapshot.matrix.window == 30

    def test_invalid_window_raises(self, config: MarketRegimeConfig) -> None:
        monitor = build_monitor(config)
        with pytest.raises(ValueError):
            monitor.change_window(45)

    def test_recompute_without_returns_raises(self, config: MarketRegimeConfig) -> None:
        monitor = build_monitor(config)

        with pytest.raises(RuntimeError):
            monitor._recompute()
        with pytest.raises(RuntimeError):
            monitor._snapshot()

    def test_refresh_regenerates_returns(self, config: MarketRegimeConfig) -> None:
        monitor = build_monitor(config)
        monitor.initialise()
        first = monitor.returns

        monitor.refresh()

        assert monitor.returns is not first

    def test_overlapping_refresh_is_dropped(self, config: MarketRegimeConfig) -> None:
        monitor = build_monitor(config)
        monitor.initialise()
        returns = monitor.returns

        monitor._refresh_lock.acquire()
        try:
            snapshot = monitor.refresh()
        finally:
            monitor._refresh_lock.release()

        assert monitor.returns is returns
        assert snapshot.window == monitor.window

    def test_alert_summaries_cached(self, config: MarketRegimeConfig) -> None:
        store = InMemoryKeyValueStore()
        monitor = build_monitor(config, store)
        snapshot = monitor.initialise()

        cached = store.get(CORRELATION_ALERTS_KEY)
        assert cached == [a.summary() for a in snapshot.alerts]

    def test_seeded_monitors_agree(self, config: MarketRegimeConfig) -> None:
        a = build_monitor(config).initialise()
        b = build_monitor(config).initialise()

        assert (a.matrix.values == b.matrix.values).all()
        assert a.alerts == b.alerts

    def test_invalid_initial_window_rejected(self, config: MarketRegimeConfig) -> None:
        monitor = build_monitor(config)
        with pytest.raises(ValueError):
            CorrelationMonitor(simulator=monitor.simulator, classifier=monitor.classifier, window=45)
