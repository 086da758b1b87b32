"""Prometheus metrics instrumentation for the shopping assistant.

Provides:
- ``setup_metrics(app)``: Attach prometheus-fastapi-instrumentator to a FastAPI app,
  exposing ``/metrics`` with HTTP request duration/count plus the business metrics below.
- ``NEGOTIATIONS_TOTAL``: Counter of settled negotiations labelled by ``outcome``.
- ``ACTIVE_TRACKERS``: Gauge of delivery trackers whose driver is still running.

Business metrics are updated where the events happen (record settlement,
tracker start/stop), never by polling.
"""

from __future__ import annotations

from fastapi import FastAPI
from prometheus_client import Counter, Gauge
from prometheus_fastapi_instrumentator import Instrumentator

NEGOTIATIONS_TOTAL: Counter = Counter(
    "bargainbot_negotiations_total",
    "Number of negotiations settled, by outcome (success or error)",
    ["outcome"],
)

ACTIVE_TRACKERS: Gauge = Gauge(
    "bargainbot_active_trackers",
    "Number of delivery trackers with a running timer",
)


def setup_metrics(app: FastAPI) -> None:
    """Instrument *app* with Prometheus HTTP metrics and expose ``/metrics``.

    Health, readiness, metrics, and the long-lived tracking event stream are
    excluded from instrumentation.

    Args:
        app: The FastAPI application to instrument.
    """
    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        excluded_handlers=["/health", "/ready", "/metrics", "/tracking/.*/events"],
    ).instrument(app).expose(app, include_in_schema=False, should_gzip=True)
