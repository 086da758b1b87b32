"""Price research, shopping lists, and checkout."""

from bargainbot.shopping.orders import Order, order_total, parse_price_ugx, place_order
from bargainbot.shopping.research import research_product, suggest_shopping_list

__all__ = [
    "Order",
    "order_total",
    "parse_price_ugx",
    "place_order",
    "research_product",
    "suggest_shopping_list",
]
