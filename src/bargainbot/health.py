"""Health and readiness endpoints for container orchestration.

Provides two top-level routes:

- ``GET /health`` -- Liveness probe.  Returns 200 if the process is alive.
- ``GET /ready``  -- Readiness probe.  Returns 200 only when the oracle has an
  API key configured **and** the tracking session registry exists.  Returns
  503 with per-check details otherwise.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


def register_health_routes(app: FastAPI) -> None:
    """Register ``/health`` and ``/ready`` endpoints on *app*.

    Args:
        app: The FastAPI application instance.
    """

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness probe -- always returns 200 if the process is running."""
        return {"status": "healthy"}

    @app.get("/ready")
    async def ready(request: Request) -> JSONResponse:
        """Readiness probe -- checks oracle credentials and tracking registry."""
        services: dict[str, Any] = request.app.state.services
        checks: dict[str, str] = {}

        settings = services.get("settings")
        has_key = settings is not None and bool(settings.anthropic_api_key.get_secret_value())
        checks["oracle"] = "ok" if services.get("oracle") is not None and has_key else "fail"

        checks["tracking"] = "ok" if services.get("tracking_sessions") is not None else "fail"

        all_ok = all(v == "ok" for v in checks.values())
        status = "ready" if all_ok else "not_ready"
        code = 200 if all_ok else 503

        return JSONResponse(content={"status": status, "checks": checks}, status_code=code)
