"""Domain-specific exception classes for the shopping assistant."""

from bargainbot.domain.types import NegotiationCall, RecordStatus


class BargainBotError(Exception):
    """Base class for all domain errors in the shopping assistant."""


class ValidationError(BargainBotError):
    """Raised when caller-supplied input is malformed.

    Attributes:
        field: Name of the offending input field.
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


class OracleError(BargainBotError):
    """Raised when the text-generation oracle is unreachable, times out, or
    returns output that does not match the declared schema.

    Attributes:
        operation: The oracle operation that failed (e.g. ``"negotiate_price"``).
    """

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"Oracle call '{operation}' failed: {message}")


class OrchestrationError(BargainBotError):
    """Raised when either concurrent oracle call of a negotiation fails.

    The underlying ``OracleError`` is chained as ``__cause__``.

    Attributes:
        failed_call: Which of the two calls failed first.
    """

    def __init__(self, failed_call: NegotiationCall, message: str = "") -> None:
        self.failed_call = failed_call
        detail = f": {message}" if message else ""
        super().__init__(f"Failed to complete negotiation ({failed_call} call failed){detail}")


class RecordAlreadySettledError(BargainBotError):
    """Raised when a negotiation record that already settled is settled again.

    Attributes:
        record_id: The record identifier.
        status: The status the record already holds.
    """

    def __init__(self, record_id: str, status: RecordStatus) -> None:
        self.record_id = record_id
        self.status = status
        super().__init__(f"Negotiation record '{record_id}' already settled as '{status}'")


class UnknownOrderError(BargainBotError):
    """Raised when no tracking session exists for an order id."""

    def __init__(self, order_id: str) -> None:
        self.order_id = order_id
        super().__init__(f"No tracking session for order '{order_id}'")
