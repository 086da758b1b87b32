"""Application entry point for the BargainBot HTTP service.

Configures:
- **structlog** with JSON rendering (production) or colored console (development)
- **Sentry** error reporting when ``SENTRY_DSN`` is set
- **Services**: one oracle client built at startup and injected into the
  negotiation orchestrator and every oracle-backed route
- **Tracking teardown**: every delivery tracker timer is cancelled on shutdown
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from bargainbot.api import register_error_handlers
from bargainbot.api import router as api_router
from bargainbot.config import Settings, get_settings, validate_credentials
from bargainbot.health import register_health_routes
from bargainbot.llm.client import TextOracle
from bargainbot.negotiation.history import NegotiationHistory
from bargainbot.negotiation.orchestrator import NegotiationOrchestrator
from bargainbot.observability.metrics import setup_metrics
from bargainbot.observability.middleware import RequestIdMiddleware
from bargainbot.observability.sentry import get_sentry_processor, init_sentry
from bargainbot.tracking.sessions import TrackingSessions

logger = structlog.get_logger()


def configure_logging(production: bool = False, sentry_enabled: bool = False) -> None:
    """Configure structlog for production (JSON) or development (console).

    Production mode (*production=True*): JSON rendering at INFO level.
    Development mode: colored console rendering at DEBUG level.

    Args:
        production: Enable production mode if ``True``.
        sentry_enabled: Insert the Sentry processor so ERROR events are reported.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
    ]
    if sentry_enabled:
        shared_processors.append(get_sentry_processor())
    shared_processors += [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if production:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        log_level = logging.INFO
    else:
        renderer = structlog.dev.ConsoleRenderer()
        log_level = logging.DEBUG

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service="bargainbot")


def initialize_services(
    settings: Settings | None = None,
    *,
    oracle: TextOracle | None = None,
) -> dict[str, Any]:
    """Build every shared object the routes depend on.

    Args:
        settings: Application settings.  If ``None``, ``get_settings()`` is used.
        oracle: Pre-built oracle (tests pass one wrapping a mock client).
            Built from *settings* when omitted.

    Returns:
        A dict of initialized service instances keyed by name.
    """
    if settings is None:
        settings = get_settings()

    if oracle is None:
        oracle = TextOracle.from_settings(settings)
        logger.info("Oracle client initialized", model=oracle.model)

    return {
        "settings": settings,
        "oracle": oracle,
        "orchestrator": NegotiationOrchestrator(oracle),
        "history": NegotiationHistory(),
        "tracking_sessions": TrackingSessions(
            interval=settings.tracking_interval_seconds,
            retention=settings.tracking_retention_seconds,
        ),
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Lifespan context manager for FastAPI startup and shutdown.

    On shutdown: cancels every delivery tracker timer.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application.
    """
    logger.info("FastAPI application starting")
    yield
    stopped = app.state.services["tracking_sessions"].stop_all()
    logger.info("FastAPI application stopped", trackers_stopped=stopped)


def create_app(services: dict[str, Any]) -> FastAPI:
    """Create the FastAPI app with lifespan, routes, health probes, and metrics.

    Args:
        services: The initialized services dict from ``initialize_services``.

    Returns:
        The configured FastAPI application.
    """
    fastapi_app = FastAPI(title="BargainBot", lifespan=lifespan)
    fastapi_app.state.services = services
    fastapi_app.add_middleware(RequestIdMiddleware)
    register_error_handlers(fastapi_app)
    fastapi_app.include_router(api_router)
    register_health_routes(fastapi_app)
    setup_metrics(fastapi_app)
    return fastapi_app


def main() -> None:
    """Main entry point: configure logging, build services, and serve HTTP."""
    settings = get_settings()
    sentry_enabled = init_sentry(settings.sentry_dsn, production=settings.production)
    configure_logging(production=settings.production, sentry_enabled=sentry_enabled)
    logger.info("Application starting")

    validate_credentials(settings)

    services = initialize_services(settings)
    fastapi_app = create_app(services)

    uvicorn.run(
        fastapi_app,
        host=settings.host,
        port=settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
