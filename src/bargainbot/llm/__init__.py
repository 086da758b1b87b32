"""Oracle integration package for the shopping assistant.

Provides the Anthropic client factory, the ``TextOracle`` structured-output
wrapper, Pydantic models for oracle output, prompt templates, and one flow
coroutine per prompt.
"""

from bargainbot.llm.client import (
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    TextOracle,
    get_anthropic_client,
)
from bargainbot.llm.flows import (
    acknowledge_preferences,
    generate_upsell_suggestions,
    negotiate_price,
    research_product_prices,
    suggest_shopping_list,
)
from bargainbot.llm.models import (
    NegotiationOutcome,
    PreferencesAcknowledgement,
    ProductFinding,
    ProductResearch,
    ShoppingItem,
    ShoppingListSuggestion,
    UpsellSuggestions,
)

__all__ = [
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MODEL",
    "NegotiationOutcome",
    "PreferencesAcknowledgement",
    "ProductFinding",
    "ProductResearch",
    "ShoppingItem",
    "ShoppingListSuggestion",
    "TextOracle",
    "UpsellSuggestions",
    "acknowledge_preferences",
    "generate_upsell_suggestions",
    "get_anthropic_client",
    "negotiate_price",
    "research_product_prices",
    "suggest_shopping_list",
]
