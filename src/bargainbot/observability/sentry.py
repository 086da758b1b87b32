"""Optional Sentry reporting for BargainBot.

Sentry stays off unless ``SENTRY_DSN`` is configured.  When it is on, ERROR
log events reach Sentry through structlog rather than through the stdlib
logging integration, so each error is reported once.
"""

from __future__ import annotations

import logging

import sentry_sdk
import structlog
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog_sentry import SentryProcessor

TRACES_SAMPLE_RATE = 0.1


def init_sentry(dsn: str, *, production: bool = False) -> bool:
    """Turn on Sentry for *dsn*, tagging events with the deployment environment.

    Returns:
        Whether Sentry was turned on; ``False`` for an empty *dsn*.
    """
    if not dsn:
        return False

    environment = "production" if production else "development"
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=TRACES_SAMPLE_RATE,
        send_default_pii=False,
        integrations=[LoggingIntegration(event_level=None, level=None)],
    )
    return True


def get_sentry_processor() -> structlog.types.Processor:
    """Processor for ``configure_logging``; needs the log level already on the event."""
    return SentryProcessor(event_level=logging.ERROR)
