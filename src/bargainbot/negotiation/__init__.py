"""Price negotiation: orchestrator, history records, and preferences."""

from bargainbot.negotiation.history import NegotiationHistory
from bargainbot.negotiation.models import (
    NegotiationRecord,
    NegotiationResult,
    PreferencesUpdateResult,
)
from bargainbot.negotiation.orchestrator import NegotiationOrchestrator, describe_product
from bargainbot.negotiation.preferences import parse_preferences, update_preferences

__all__ = [
    "NegotiationHistory",
    "NegotiationOrchestrator",
    "NegotiationRecord",
    "NegotiationResult",
    "PreferencesUpdateResult",
    "describe_product",
    "parse_preferences",
    "update_preferences",
]
