"""Pydantic models defining structured output contracts for oracle calls.

Each model is passed as ``output_format`` to Anthropic structured outputs
(``client.messages.parse()``), so the field descriptions double as
instructions to the model.
"""

from pydantic import BaseModel, ConfigDict, Field


class NegotiationOutcome(BaseModel):
    """Result of a simulated price negotiation for one product."""

    model_config = ConfigDict(frozen=True)

    status: str = Field(description="The current status of the negotiation (e.g. 'accepted')")
    negotiated_price: str | None = Field(
        default=None,
        description="The final negotiated price, if successful (e.g. 'UGX 450,000')",
    )
    summary: str = Field(description="A summary of the negotiation process")


class UpsellSuggestions(BaseModel):
    """Complementary products worth offering alongside the negotiated one."""

    model_config = ConfigDict(frozen=True)

    suggestions: list[str] = Field(
        default_factory=list,
        description="Product names that would be good upsell suggestions, best first",
    )


class PreferencesAcknowledgement(BaseModel):
    """The oracle's confirmation that a negotiation strategy was taken on board."""

    success: bool = Field(description="Whether the preferences were successfully updated")
    message: str = Field(description="A message describing the result of the update")


class ProductFinding(BaseModel):
    """One concrete purchase option found during price research."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="The specific name of the product found")
    description: str = Field(description="A brief, one-sentence description of the product")
    price: str = Field(
        description="The price in Ugandan Shillings, formatted like 'UGX 1,200,000'"
    )
    store: str = Field(
        description="The physical store in Kampala or online store selling the item"
    )


class ProductResearch(BaseModel):
    """Container for price research results."""

    products: list[ProductFinding] = Field(
        default_factory=list,
        description="Products that match the user's description",
    )


class ShoppingItem(BaseModel):
    """A single line of a suggested shopping list."""

    model_config = ConfigDict(frozen=True)

    item_name: str = Field(description="The name of the suggested shopping item")
    category: str = Field(
        description="The category of the item (e.g. 'Kitchen Ware', 'Food Stuffs')"
    )
    estimated_price: str = Field(
        description="The estimated price of the item in Ugandan Shillings (UGX)"
    )
    suggested_market: str = Field(
        description="The cheapest market or area in Kampala to buy this item"
    )


class ShoppingListSuggestion(BaseModel):
    """Container for a suggested shopping list."""

    shopping_list: list[ShoppingItem] = Field(
        default_factory=list,
        description="A list of suggested shopping items",
    )
