"""Integration tests for the MarketRegime dashboard endpoints.

The app's services are overridden with an in-memory store and a seeded
correlation monitor so the tests need neither a database nor files.
"""

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from marketregime.core.config import MarketRegimeConfig
from marketregime.core.kv_store import MARKET_DATA_KEY
from marketregime.monitoring.api import DashboardServices, get_services
from marketregime.monitoring.app import app


@pytest.fixture()
def services(monkeypatch: pytest.MonkeyPatch) -> Iterator[DashboardServices]:
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("RANDOM_SEED", "3")
    monkeypatch.setenv("SIMULATION_DAYS", "120")
    svc = DashboardServices.from_config(MarketRegimeConfig())
    app.dependency_overrides[get_services] = lambda: svc
    yield svc
    app.dependency_overrides.clear()


@pytest.fixture()
def client(services: DashboardServices) -> TestClient:
    return TestClient(app)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_correlations_shape(client: TestClient) -> None:
    response = client.get("/api/correlations")
    assert response.status_code == 200
    data = response.json()

    assert data["window"] == 60
    assert len(data["instruments"]) == 8
    assert len(data["matrix"]["values"]) == 8
    assert len(data["heatmap"]) == 64


def test_correlations_window_switch(client: TestClient) -> None:
    response = client.get("/api/correlations", params={"window": 30})
    assert response.status_code == 200
    assert response.json()["window"] == 30

    bad = client.get("/api/correlations", params={"window": 45})
    assert bad.status_code == 400


def test_refresh_alerts_and_comparison(client: TestClient) -> None:
    assert client.post("/api/correlations/refresh").status_code == 200

    alerts = client.get("/api/correlations/alerts").json()
    assert isinstance(alerts["alerts"], list)
    for alert in alerts["alerts"]:
        assert alert["severity"] in {"moderate", "high"}

    comparison = client.get("/api/correlations/comparison").json()
    assert len(comparison["rows"]) == 15


def test_regime_and_changes(client: TestClient, services: DashboardServices) -> None:
    services.store.set(
        MARKET_DATA_KEY,
        {"data": [{"label": "VIX", "value": "18.0"}, {"label": "2s10s", "value": "60bp"}]},
    )
    first = client.get("/api/regime")
    assert first.status_code == 200
    data = first.json()
    assert [ind["key"] for ind in data["indicators"]] == [
        "vix",
        "yield_curve",
        "stock_bond_corr",
        "credit_stress",
        "dollar_trend",
        "equity_trend",
    ]
    assert data["overall"]["label"] in {"Risk-On", "Neutral", "Risk-Off"}

    services.store.set(
        MARKET_DATA_KEY,
        {"data": [{"label": "VIX", "value": "24.0"}, {"label": "2s10s", "value": "60bp"}]},
    )
    client.get("/api/regime")

    changes = client.get("/api/regime/changes", params={"limit": 10}).json()["changes"]
    indicators = [c["indicator"] for c in changes]
    assert "VIX Regime" in indicators
    vix_change = next(c for c in changes if c["indicator"] == "VIX Regime")
    assert (vix_change["from"], vix_change["to"]) == ("Normal", "Elevated")
