"""Tests for application entry point: structlog config, service initialization, and app creation."""

from __future__ import annotations

import inspect
from unittest.mock import MagicMock

import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient
from structlog_sentry import SentryProcessor

from bargainbot.app import configure_logging, create_app, initialize_services
from bargainbot.config import Settings
from bargainbot.llm.client import TextOracle
from bargainbot.negotiation.history import NegotiationHistory
from bargainbot.negotiation.orchestrator import NegotiationOrchestrator
from bargainbot.tracking.sessions import TrackingSessions


def _reset_structlog() -> None:
    """Reset structlog so cached loggers don't leak between tests."""
    structlog.reset_defaults()


def _base_settings(**overrides) -> Settings:
    """Build a Settings instance that ignores any local ``.env`` file."""
    defaults = {"anthropic_api_key": "sk-test"}
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)  # type: ignore[call-arg]


class TestConfigureLogging:
    """Tests for structlog configuration in dev and production modes."""

    def test_development_mode_uses_console_renderer(self) -> None:
        _reset_structlog()
        configure_logging(production=False)
        processors = structlog.get_config()["processors"]
        assert any(isinstance(p, structlog.dev.ConsoleRenderer) for p in processors)

    def test_production_mode_uses_json_renderer(self) -> None:
        _reset_structlog()
        configure_logging(production=True)
        processors = structlog.get_config()["processors"]
        assert any(isinstance(p, structlog.processors.JSONRenderer) for p in processors)

    def test_default_is_development_mode(self) -> None:
        _reset_structlog()
        configure_logging()
        processors = structlog.get_config()["processors"]
        assert any(isinstance(p, structlog.dev.ConsoleRenderer) for p in processors)

    def test_sentry_processor_only_when_enabled(self) -> None:
        _reset_structlog()
        configure_logging(sentry_enabled=False)
        assert not any(
            isinstance(p, SentryProcessor) for p in structlog.get_config()["processors"]
        )

        _reset_structlog()
        configure_logging(sentry_enabled=True)
        assert any(isinstance(p, SentryProcessor) for p in structlog.get_config()["processors"])


class TestInitializeServices:
    """Tests for service initialization."""

    def test_builds_every_service(self) -> None:
        _reset_structlog()
        configure_logging(production=False)
        settings = _base_settings()

        services = initialize_services(settings)

        assert services["settings"] is settings
        assert isinstance(services["oracle"], TextOracle)
        assert services["oracle"].model == settings.oracle_model
        assert isinstance(services["orchestrator"], NegotiationOrchestrator)
        assert isinstance(services["history"], NegotiationHistory)
        assert isinstance(services["tracking_sessions"], TrackingSessions)

    def test_injected_oracle_is_used(self, oracle: TextOracle) -> None:
        services = initialize_services(_base_settings(), oracle=oracle)

        assert services["oracle"] is oracle

    def test_oracle_built_without_api_key(self) -> None:
        """A missing key does not prevent startup; oracle calls fail later."""
        services = initialize_services(_base_settings(anthropic_api_key=""))

        assert isinstance(services["oracle"], TextOracle)


class TestCreateApp:
    """Tests for FastAPI app creation."""

    def test_returns_fastapi_instance(self, oracle: TextOracle) -> None:
        app = create_app(initialize_services(_base_settings(), oracle=oracle))

        assert isinstance(app, FastAPI)

    def test_create_app_uses_lifespan(self, oracle: TextOracle) -> None:
        app = create_app(initialize_services(_base_settings(), oracle=oracle))

        assert app.router.lifespan_context is not None

    def test_no_deprecated_on_event(self) -> None:
        """Verify deprecated on_event pattern is not used in create_app."""
        source = inspect.getsource(create_app)
        assert "on_event" not in source

    def test_routes_registered(self, oracle: TextOracle) -> None:
        app = create_app(initialize_services(_base_settings(), oracle=oracle))

        route_paths = {route.path for route in app.routes}
        for path in (
            "/negotiations",
            "/preferences",
            "/research",
            "/shopping-list",
            "/orders",
            "/tracking/{order_id}",
            "/tracking/{order_id}/events",
            "/health",
            "/ready",
            "/metrics",
        ):
            assert path in route_paths

    def test_services_stored_on_app_state(self, oracle: TextOracle) -> None:
        services = initialize_services(_base_settings(), oracle=oracle)
        app = create_app(services)

        assert app.state.services is services

    def test_shutdown_stops_all_trackers(self, oracle: TextOracle) -> None:
        services = initialize_services(
            _base_settings(tracking_interval_seconds=60), oracle=oracle
        )
        app = create_app(services)

        with TestClient(app) as client:
            assert client.post("/tracking/order-1").status_code == 201
            assert client.post("/tracking/order-2").status_code == 201
            assert len(services["tracking_sessions"]) == 2

        assert len(services["tracking_sessions"]) == 0

    def test_request_id_header_on_api_routes(
        self, oracle: TextOracle, mock_anthropic_client: MagicMock
    ) -> None:
        app = create_app(initialize_services(_base_settings(), oracle=oracle))

        response = TestClient(app).get("/negotiations")

        assert response.status_code == 200
        assert response.headers["X-Request-ID"]
        mock_anthropic_client.messages.parse.assert_not_called()


class TestMainImport:
    """Test that main() can be imported without side effects."""

    def test_main_importable(self) -> None:
        from bargainbot.app import main

        assert callable(main)
