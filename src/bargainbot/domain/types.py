"""Domain enumerations for the shopping assistant."""

from enum import StrEnum


class RecordStatus(StrEnum):
    """Lifecycle states of a negotiation history record."""

    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class Aggressiveness(StrEnum):
    """How hard the negotiator pushes on price."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PaymentMethod(StrEnum):
    """Payment options offered at checkout (payment itself is not processed)."""

    MOBILE_MONEY = "mobile_money"
    CARD = "card"


class NegotiationCall(StrEnum):
    """The two concurrent oracle calls behind a single negotiation."""

    NEGOTIATION = "negotiation"
    UPSELLS = "upsells"
