"""Domain types, models, and errors for the shopping assistant."""

from bargainbot.domain.errors import (
    BargainBotError,
    OracleError,
    OrchestrationError,
    RecordAlreadySettledError,
    UnknownOrderError,
    ValidationError,
)
from bargainbot.domain.models import (
    DeliveryDetails,
    NegotiationPreferences,
    NegotiationRequest,
    validate_product_reference,
)
from bargainbot.domain.types import (
    Aggressiveness,
    NegotiationCall,
    PaymentMethod,
    RecordStatus,
)

__all__ = [
    "Aggressiveness",
    "BargainBotError",
    "DeliveryDetails",
    "NegotiationCall",
    "NegotiationPreferences",
    "NegotiationRequest",
    "OracleError",
    "OrchestrationError",
    "PaymentMethod",
    "RecordAlreadySettledError",
    "RecordStatus",
    "UnknownOrderError",
    "ValidationError",
    "validate_product_reference",
]
