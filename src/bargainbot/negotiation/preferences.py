"""Negotiation preference updates.

Preferences are validated locally, then forwarded to the oracle for
acknowledgement.  Nothing is persisted.  Callers always get a
``PreferencesUpdateResult`` back, never an exception.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import ValidationError as PydanticValidationError

from bargainbot.domain.errors import OracleError, ValidationError
from bargainbot.domain.models import NegotiationPreferences
from bargainbot.llm.client import TextOracle
from bargainbot.llm.flows import acknowledge_preferences
from bargainbot.negotiation.models import PreferencesUpdateResult

logger = structlog.get_logger()

INVALID_PREFERENCES_MESSAGE = "Invalid preference values."
UPDATE_FAILED_MESSAGE = "Failed to update preferences."


def parse_preferences(values: Mapping[str, Any] | NegotiationPreferences) -> NegotiationPreferences:
    """Coerce raw form *values* into ``NegotiationPreferences``.

    Raises:
        ValidationError: If a field is missing, has the wrong type, or the
            acceptable price ceiling is not positive.
    """
    if isinstance(values, NegotiationPreferences):
        return values
    try:
        return NegotiationPreferences.model_validate(dict(values))
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "preferences"
        raise ValidationError(field, first["msg"]) from exc


async def update_preferences(
    values: Mapping[str, Any] | NegotiationPreferences,
    oracle: TextOracle,
) -> PreferencesUpdateResult:
    """Validate *values* and ask the oracle to acknowledge them.

    Invalid input is rejected without calling the oracle.

    Args:
        values: Raw settings form values or an already-built preferences model.
        oracle: The text-generation oracle.

    Returns:
        ``success=False`` with a message for invalid input or oracle failure,
        otherwise the oracle's acknowledgement.
    """
    try:
        preferences = parse_preferences(values)
    except ValidationError as exc:
        logger.info("preferences_rejected", field=exc.field, error=str(exc))
        return PreferencesUpdateResult(success=False, message=INVALID_PREFERENCES_MESSAGE)

    try:
        ack = await acknowledge_preferences(oracle, preferences)
    except OracleError as exc:
        logger.warning("preferences_update_failed", error=str(exc))
        return PreferencesUpdateResult(success=False, message=UPDATE_FAILED_MESSAGE)

    logger.info(
        "preferences_updated",
        aggressiveness=preferences.aggressiveness,
        success=ack.success,
    )
    return PreferencesUpdateResult(success=ack.success, message=ack.message)
