"""Checkout: turn a shopping list plus delivery details into a tracked order.

Payment is not processed; the chosen method is only recorded.
"""

from __future__ import annotations

import re
import uuid
from datetime import UTC, datetime

import structlog
from pydantic import BaseModel, ConfigDict, Field

from bargainbot.domain.errors import ValidationError
from bargainbot.domain.models import DeliveryDetails
from bargainbot.llm.models import ShoppingItem
from bargainbot.tracking.sessions import TrackingSessions

logger = structlog.get_logger()

_NON_DIGITS = re.compile(r"[^0-9]")


def parse_price_ugx(price: str) -> int:
    """Read a display price such as ``"UGX 1,200,000"`` as an integer.

    All non-digit characters are dropped; a price with no digits counts as 0.
    """
    digits = _NON_DIGITS.sub("", price)
    return int(digits) if digits else 0


def order_total(items: list[ShoppingItem]) -> int:
    """Sum the estimated prices of *items* in UGX."""
    return sum(parse_price_ugx(item.estimated_price) for item in items)


class Order(BaseModel):
    """A placed order awaiting (simulated) delivery."""

    model_config = ConfigDict(frozen=True)

    order_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    details: DeliveryDetails
    items: list[ShoppingItem]
    total_cost: int
    placed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


def place_order(
    details: DeliveryDetails,
    items: list[ShoppingItem],
    sessions: TrackingSessions,
) -> Order:
    """Record an order for *items* and start tracking its delivery.

    Must be called inside a running event loop (the tracker timer starts here).

    Raises:
        ValidationError: If *items* is empty.
    """
    if not items:
        raise ValidationError("items", "Please create a shopping list first.")
    order = Order(details=details, items=list(items), total_cost=order_total(items))
    sessions.start(order.order_id)
    logger.info(
        "order_placed",
        order_id=order.order_id,
        items=len(order.items),
        total_cost=order.total_cost,
        payment_method=details.payment_method,
    )
    return order
