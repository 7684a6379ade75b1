"""
Health endpoints.

Provides health check and metrics endpoints for monitoring.

Key behaviors:
- /health: Overall status from all registered checks
- /health/ready: Ready only when every check is healthy
- /health/live: Process is up
- /metrics: Request counters recorded by the app middleware

Startup time and counters belong to one application instance; create_app()
builds a fresh set for every app.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Protocol

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from src.adapters.memory_ledger import InMemoryLedgerStore

# --- Types ---


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class CheckResult:
    """Result of a single health check."""

    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0.0
    details: dict[str, Any] = field(default_factory=dict)


class HealthCheck(Protocol):
    name: str

    def check(self) -> CheckResult: ...


# --- Startup Tracker ---


class StartupTracker:
    """Records when one app finished its lifespan startup."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._started_at: float | None = None

    def mark_started(self) -> None:
        self._started_at = self._clock()

    @property
    def started(self) -> bool:
        return self._started_at is not None

    @property
    def uptime_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        return self._clock() - self._started_at


# --- Metrics Collector ---


@dataclass(frozen=True)
class MetricsSnapshot:
    request_count: int
    rejected_count: int
    error_count: int
    avg_response_time_ms: float
    uptime_seconds: float


class MetricsCollector:
    """
    Request counters for one app.

    4xx responses count as rejected (the ledger refused the request);
    5xx responses count as errors.
    """

    def __init__(self, tracker: StartupTracker) -> None:
        self._tracker = tracker
        self.reset()

    def record_request(self, response_time_ms: float, status_code: int = 200) -> None:
        self._request_count += 1
        self._total_response_time_ms += response_time_ms
        if status_code >= 500:
            self._error_count += 1
        elif status_code >= 400:
            self._rejected_count += 1

    def get_snapshot(self) -> MetricsSnapshot:
        avg = self._total_response_time_ms / self._request_count if self._request_count else 0.0
        return MetricsSnapshot(
            request_count=self._request_count,
            rejected_count=self._rejected_count,
            error_count=self._error_count,
            avg_response_time_ms=avg,
            uptime_seconds=self._tracker.uptime_seconds,
        )

    def reset(self) -> None:
        self._request_count = 0
        self._rejected_count = 0
        self._error_count = 0
        self._total_response_time_ms = 0.0


# --- Health Check Registry ---


class HealthCheckRegistry:
    def __init__(self) -> None:
        self._checks: list[HealthCheck] = []

    def register(self, check: HealthCheck) -> None:
        self._checks.append(check)

    def run_all(self) -> list[CheckResult]:
        return [check.check() for check in self._checks]


# --- Built-in Checks ---


class StartupCheck:
    """Unhealthy until the app lifespan has run."""

    name = "startup"

    def __init__(self, tracker: StartupTracker) -> None:
        self._tracker = tracker

    def check(self) -> CheckResult:
        if not self._tracker.started:
            return CheckResult(self.name, HealthStatus.UNHEALTHY, "Startup not complete")
        return CheckResult(
            self.name,
            HealthStatus.HEALTHY,
            "Startup complete",
            details={"uptime_seconds": self._tracker.uptime_seconds},
        )


class LedgerCheck:
    """
    Ledger consistency check.

    Degraded when the running total has drifted from the sum of envelope
    budgets, which only a non-atomic distribution failure can cause.
    """

    name = "ledger"

    def __init__(self, store: InMemoryLedgerStore, tolerance: float = 1e-6) -> None:
        self._store = store
        self._tolerance = tolerance

    def check(self) -> CheckResult:
        start = time.perf_counter()
        with self._store.lock:
            total = self._store.get_total()
            envelopes = self._store.list_all()
        computed = math.fsum(envelope.budget for envelope in envelopes)
        latency = (time.perf_counter() - start) * 1000
        details = {"envelopes": len(envelopes), "total_budget": total, "sum_of_budgets": computed}

        if abs(total - computed) > self._tolerance:
            return CheckResult(
                self.name,
                HealthStatus.DEGRADED,
                "Running total does not match envelope budgets",
                latency,
                details,
            )
        return CheckResult(self.name, HealthStatus.HEALTHY, "Ledger consistent", latency, details)


def overall_status(results: Sequence[CheckResult]) -> HealthStatus:
    """Unhealthy beats degraded beats healthy."""
    statuses = {r.status for r in results}
    if HealthStatus.UNHEALTHY in statuses:
        return HealthStatus.UNHEALTHY
    if HealthStatus.DEGRADED in statuses:
        return HealthStatus.DEGRADED
    return HealthStatus.HEALTHY


# --- FastAPI Router ---


def create_health_router(
    registry: HealthCheckRegistry,
    metrics: MetricsCollector,
    tracker: StartupTracker,
    version: str = "0.0.0",
) -> APIRouter:
    """
    Create FastAPI router for health endpoints.

    Args:
        registry: Health checks to run
        metrics: Metrics collector fed by the request middleware
        tracker: Startup tracker of the owning app
        version: Application version string
    """
    router = APIRouter(tags=["health"])

    @router.get("/health", response_model=None)
    def health_check() -> JSONResponse:
        results = registry.run_all()
        overall = overall_status(results)
        # Degraded still serves traffic
        code = (
            status.HTTP_503_SERVICE_UNAVAILABLE
            if overall == HealthStatus.UNHEALTHY
            else status.HTTP_200_OK
        )
        return JSONResponse(
            status_code=code,
            content={
                "status": overall.value,
                "version": version,
                "uptime_seconds": tracker.uptime_seconds,
                "checks": [{**asdict(r), "status": r.status.value} for r in results],
            },
        )

    @router.get("/health/ready", response_model=None)
    def readiness_check() -> JSONResponse:
        results = registry.run_all()
        ready = overall_status(results) == HealthStatus.HEALTHY
        return JSONResponse(
            status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "ready": ready,
                "checks": [
                    {"name": r.name, "status": r.status.value, "message": r.message}
                    for r in results
                ],
            },
        )

    @router.get("/health/live", response_model=None)
    def liveness_check() -> JSONResponse:
        return JSONResponse({"alive": True, "uptime_seconds": tracker.uptime_seconds})

    @router.get("/metrics", response_model=None)
    def metrics_endpoint() -> JSONResponse:
        return JSONResponse(asdict(metrics.get_snapshot()))

    return router


def setup_default_health_checks(
    registry: HealthCheckRegistry,
    store: InMemoryLedgerStore,
    tracker: StartupTracker,
) -> None:
    """Register startup and ledger checks."""
    registry.register(StartupCheck(tracker))
    registry.register(LedgerCheck(store))
