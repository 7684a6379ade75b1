import logging
import time
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from src.adapters.memory_ledger import InMemoryLedgerStore
from src.api.deps import get_settings
from src.api.routes import envelopes
from src.app_shell.config import ledger_config_from_rules, validate_ops_rules
from src.components.envelopes import create_envelope_ledger
from src.rules.loader import load_rules
from src.rules.models import Rules
from src.shell.http.health import (
    HealthCheckRegistry,
    MetricsCollector,
    StartupTracker,
    create_health_router,
    setup_default_health_checks,
)

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    validate_ops_rules(app.state.rules)
    app.state.startup.mark_started()
    logger.info(
        "Envelope ledger ready (atomic_distribute=%s)",
        app.state.ledger.config.atomic_distribute,
    )
    yield
    logger.info("Shutting down; in-memory ledger discarded")


def create_app(
    rules: Rules | None = None,
    store: InMemoryLedgerStore | None = None,
) -> FastAPI:
    """
    Build the API with its own ledger.

    Args:
        rules: Parsed rules; loaded from the rules file when omitted
        store: Ledger storage; a fresh in-memory store when omitted
    """
    if rules is None:
        rules = load_rules(get_settings().rules_path)
    store = store if store is not None else InMemoryLedgerStore()

    app = FastAPI(
        title=rules.api.title,
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.rules = rules
    app.state.ledger_store = store
    app.state.ledger = create_envelope_ledger(store, ledger_config_from_rules(rules))

    tracker = StartupTracker()
    registry = HealthCheckRegistry()
    setup_default_health_checks(registry, store, tracker)
    metrics = MetricsCollector(tracker)
    app.state.startup = tracker
    app.state.metrics = metrics

    # --- Routers ---
    app.include_router(envelopes.router, tags=["Envelopes"])
    app.include_router(create_health_router(registry, metrics, tracker, version=VERSION))

    @app.middleware("http")
    async def record_metrics(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        metrics.record_request(elapsed_ms, status_code=response.status_code)
        logger.debug(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    # CORS (Allow browser frontends)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=rules.api.cors_origins,
        allow_methods=rules.api.cors_methods,
        allow_headers=["Content-Type"],
    )

    return app
