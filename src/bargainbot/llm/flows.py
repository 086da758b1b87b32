"""One coroutine per oracle prompt.

Each flow formats its prompt template, asks the injected ``TextOracle`` for a
structured reply, and returns the parsed model unchanged.  Failures propagate
as ``OracleError``.
"""

from __future__ import annotations

from bargainbot.domain.models import NegotiationPreferences
from bargainbot.llm.client import TextOracle
from bargainbot.llm.models import (
    NegotiationOutcome,
    PreferencesAcknowledgement,
    ProductResearch,
    ShoppingListSuggestion,
    UpsellSuggestions,
)
from bargainbot.llm.prompts import (
    NEGOTIATION_SYSTEM_PROMPT,
    NEGOTIATION_USER_PROMPT,
    PREFERENCES_SYSTEM_PROMPT,
    PREFERENCES_USER_PROMPT,
    RESEARCH_SYSTEM_PROMPT,
    RESEARCH_USER_PROMPT,
    SHOPPING_LIST_SYSTEM_PROMPT,
    SHOPPING_LIST_USER_PROMPT,
    UPSELL_SYSTEM_PROMPT,
    UPSELL_USER_PROMPT,
)


async def negotiate_price(
    oracle: TextOracle,
    product_reference: str,
    user_preferences: str | None = None,
) -> NegotiationOutcome:
    """Simulate a price negotiation for the product at *product_reference*.

    Args:
        oracle: The text-generation oracle.
        product_reference: Absolute URL of the product.
        user_preferences: Optional strategy text forwarded to the negotiator.

    Returns:
        The negotiation status, optional negotiated price, and summary.
    """
    return await oracle.generate(
        "negotiate_price",
        system=NEGOTIATION_SYSTEM_PROMPT,
        prompt=NEGOTIATION_USER_PROMPT.format(
            product_reference=product_reference,
            user_preferences=user_preferences or "none",
        ),
        output_format=NegotiationOutcome,
    )


async def generate_upsell_suggestions(
    oracle: TextOracle,
    product_description: str,
) -> UpsellSuggestions:
    """Suggest complementary products for *product_description*."""
    return await oracle.generate(
        "generate_upsell_suggestions",
        system=UPSELL_SYSTEM_PROMPT,
        prompt=UPSELL_USER_PROMPT.format(product_description=product_description),
        output_format=UpsellSuggestions,
    )


async def acknowledge_preferences(
    oracle: TextOracle,
    preferences: NegotiationPreferences,
) -> PreferencesAcknowledgement:
    """Ask the oracle to confirm a (pre-validated) negotiation strategy."""
    return await oracle.generate(
        "acknowledge_preferences",
        system=PREFERENCES_SYSTEM_PROMPT,
        prompt=PREFERENCES_USER_PROMPT.format(
            aggressiveness=preferences.aggressiveness,
            acceptable_price_ceiling=preferences.ceiling_text,
            additional_instructions=preferences.additional_instructions or "none",
        ),
        output_format=PreferencesAcknowledgement,
    )


async def research_product_prices(
    oracle: TextOracle,
    product_description: str,
) -> ProductResearch:
    """Find a few concrete purchase options and prices for a described product."""
    return await oracle.generate(
        "research_product_prices",
        system=RESEARCH_SYSTEM_PROMPT,
        prompt=RESEARCH_USER_PROMPT.format(product_description=product_description),
        output_format=ProductResearch,
    )


async def suggest_shopping_list(
    oracle: TextOracle,
    prompt: str,
) -> ShoppingListSuggestion:
    """Turn a loose description of shopping needs into an itemized list."""
    return await oracle.generate(
        "suggest_shopping_list",
        system=SHOPPING_LIST_SYSTEM_PROMPT,
        prompt=SHOPPING_LIST_USER_PROMPT.format(prompt=prompt),
        output_format=ShoppingListSuggestion,
    )
