"""MarketRegime – Dashboard data API.

REST endpoints exposing the correlation monitor and the composite regime
engine to the dashboard UI. Every response is plain render data; no
markup is produced here.

Services are built lazily from :func:`get_config` on first use and can
be replaced through FastAPI dependency overrides of :func:`get_services`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from marketregime.core.config import MarketRegimeConfig, get_config
from marketregime.core.kv_store import KeyValueStore, build_store
from marketregime.core.logging import get_logger
from marketregime.correlation.monitor import CorrelationMonitor, CorrelationSnapshot, build_monitor
from marketregime.regime import presentation
from marketregime.regime.engine import RegimeEngine, build_engine


router = APIRouter(prefix="/api", tags=["dashboard"])
logger = get_logger(__name__)


# ============================================================================
# Services
# ============================================================================


@dataclass
class DashboardServices:
    """Long-lived engines shared by all requests."""

    store: KeyValueStore
    monitor: CorrelationMonitor
    regime: RegimeEngine

    @classmethod
    def from_config(cls, config: MarketRegimeConfig) -> "DashboardServices":
        store = build_store(config)
        return cls(
            store=store,
            monitor=build_monitor(config, store),
            regime=build_engine(config, store),
        )


_services: Optional[DashboardServices] = None


def get_services() -> DashboardServices:
    global _services
    if _services is None:
        _services = DashboardServices.from_config(get_config())
    return _services


# ============================================================================
# Response Models
# ============================================================================


class CorrelationView(BaseModel):
    """Heatmap data for the current window."""

    window: int
    instruments: List[Dict[str, str]] = Field(default_factory=list)
    matrix: Dict[str, Any] = Field(default_factory=dict)
    heatmap: List[Dict[str, Any]] = Field(default_factory=list)


class AlertsView(BaseModel):
    window: int
    alerts: List[Dict[str, Any]] = Field(default_factory=list)


class ComparisonView(BaseModel):
    window: int
    rows: List[Dict[str, Any]] = Field(default_factory=list)


class RegimeView(BaseModel):
    """Composite regime with gauge and indicator card data."""

    timestamp: str
    overall: Dict[str, Any]
    indicators: List[Dict[str, Any]] = Field(default_factory=list)


class ChangeLogView(BaseModel):
    changes: List[Dict[str, str]] = Field(default_factory=list)


def _correlation_view(snapshot: CorrelationSnapshot) -> CorrelationView:
    payload = snapshot.to_dict()
    return CorrelationView(
        window=snapshot.window,
        instruments=payload["instruments"],
        matrix=payload["matrix"],
        heatmap=payload["heatmap"],
    )


# ============================================================================
# Correlation endpoints
# ============================================================================


@router.get("/correlations", response_model=CorrelationView)
async def get_correlations(
    window: Optional[int] = Query(None, description="Rolling window in trading days (30, 60 or 90)"),
    services: DashboardServices = Depends(get_services),
) -> CorrelationView:
    """Return the correlation matrix, switching window when requested."""

    monitor = services.monitor
    if window is None or (monitor.initialised and window == monitor.window):
        snapshot = monitor.snapshot()
    else:
        try:
            snapshot = monitor.change_window(window)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    return _correlation_view(snapshot)


@router.post("/correlations/refresh", response_model=CorrelationView)
async def refresh_correlations(services: DashboardServices = Depends(get_services)) -> CorrelationView:
    """Regenerate the simulated return panel and recompute."""

    return _correlation_view(services.monitor.refresh())


@router.get("/correlations/alerts", response_model=AlertsView)
async def get_correlation_alerts(services: DashboardServices = Depends(get_services)) -> AlertsView:
    snapshot = services.monitor.snapshot()
    return AlertsView(window=snapshot.window, alerts=[a.to_dict() for a in snapshot.alerts])


@router.get("/correlations/comparison", response_model=ComparisonView)
async def get_correlation_comparison(services: DashboardServices = Depends(get_services)) -> ComparisonView:
    snapshot = services.monitor.snapshot()
    return ComparisonView(window=snapshot.window, rows=[r.to_dict() for r in snapshot.comparison])


# ============================================================================
# Regime endpoints
# ============================================================================


@router.get("/regime", response_model=RegimeView)
async def get_regime(services: DashboardServices = Depends(get_services)) -> RegimeView:
    """Recompute the composite regime from the cached market data."""

    state = services.regime.compute()
    return RegimeView(
        timestamp=state.timestamp.isoformat(),
        overall=presentation.gauge(state),
        indicators=presentation.indicator_cards(state),
    )


@router.get("/regime/changes", response_model=ChangeLogView)
async def get_regime_changes(
    limit: int = Query(presentation.CHANGE_LOG_ROWS, ge=1, le=200, description="Maximum entries"),
    services: DashboardServices = Depends(get_services),
) -> ChangeLogView:
    log = services.regime.get_change_log(limit)
    return ChangeLogView(changes=presentation.change_log_rows(log, limit))
