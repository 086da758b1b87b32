"""Pydantic v2 models for caller-supplied domain data."""

from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from bargainbot.domain.errors import ValidationError
from bargainbot.domain.types import Aggressiveness, PaymentMethod

_HTTP_URL: TypeAdapter[AnyHttpUrl] = TypeAdapter(AnyHttpUrl)


def validate_product_reference(product_reference: str) -> str:
    """Return *product_reference* stripped, or raise if it is not an absolute URL.

    Only ``http`` and ``https`` URLs with a host are accepted.

    Raises:
        ValidationError: If the reference is empty or not URL-shaped.
    """
    candidate = product_reference.strip()
    if not candidate:
        raise ValidationError("product_reference", "must not be empty")
    try:
        _HTTP_URL.validate_python(candidate)
    except PydanticValidationError as exc:
        raise ValidationError(
            "product_reference", "Please enter a valid product URL."
        ) from exc
    return candidate


class NegotiationRequest(BaseModel):
    """A single user submission asking the assistant to bargain for a product.

    The reference is deliberately stored unvalidated so the orchestrator can
    re-check it; use ``validate_product_reference`` before constructing one
    from untrusted input.
    """

    model_config = ConfigDict(frozen=True)

    product_reference: str
    user_preferences: str | None = None


class NegotiationPreferences(BaseModel):
    """Negotiation strategy chosen by the user on the settings screen."""

    model_config = ConfigDict(frozen=True)

    aggressiveness: Aggressiveness
    acceptable_price_ceiling: float = Field(gt=0)
    additional_instructions: str | None = None

    @property
    def ceiling_text(self) -> str:
        """The price ceiling without a trailing ``.0`` or exponent notation."""
        ceiling = self.acceptable_price_ceiling
        return str(int(ceiling)) if ceiling.is_integer() else str(ceiling)


class DeliveryDetails(BaseModel):
    """Recipient and payment details captured at checkout."""

    model_config = ConfigDict(frozen=True)

    full_name: str = Field(min_length=3)
    phone: str = Field(min_length=10)
    address: str = Field(min_length=10)
    payment_method: PaymentMethod = PaymentMethod.MOBILE_MONEY
