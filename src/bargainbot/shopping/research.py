"""Market price research and shopping-list suggestion entry points.

Both are single oracle calls wrapped in the caller-side retry policy.  Blank
input is rejected before the oracle is contacted.
"""

from __future__ import annotations

import structlog
from tenacity.wait import wait_base

from bargainbot.domain.errors import ValidationError
from bargainbot.llm import flows
from bargainbot.llm.client import TextOracle
from bargainbot.llm.models import ProductFinding, ShoppingItem
from bargainbot.resilience.retry import DEFAULT_WAIT, retry_oracle_call

logger = structlog.get_logger()


def _require_text(field: str, value: str) -> str:
    text = value.strip()
    if not text:
        raise ValidationError(field, "must not be empty")
    return text


async def research_product(
    description: str,
    oracle: TextOracle,
    *,
    attempts: int = 3,
    wait: wait_base = DEFAULT_WAIT,
) -> list[ProductFinding]:
    """Find purchase options and prices for a described product.

    Args:
        description: Free-text product description (e.g. "a 24 inch Samsung TV").
        oracle: The text-generation oracle.
        attempts: Oracle attempts before giving up.
        wait: Backoff between attempts.

    Returns:
        The findings in the order the oracle ranked them.

    Raises:
        ValidationError: If *description* is blank.
        OracleError: If every attempt failed.
    """
    text = _require_text("description", description)
    research = await retry_oracle_call(
        lambda: flows.research_product_prices(oracle, text),
        attempts=attempts,
        wait=wait,
    )
    logger.info("product_research_completed", findings=len(research.products))
    return list(research.products)


async def suggest_shopping_list(
    prompt: str,
    oracle: TextOracle,
    *,
    attempts: int = 3,
    wait: wait_base = DEFAULT_WAIT,
) -> list[ShoppingItem]:
    """Build an itemized shopping list from a description of needs.

    Raises:
        ValidationError: If *prompt* is blank.
        OracleError: If every attempt failed.
    """
    text = _require_text("prompt", prompt)
    suggestion = await retry_oracle_call(
        lambda: flows.suggest_shopping_list(oracle, text),
        attempts=attempts,
        wait=wait,
    )
    logger.info("shopping_list_suggested", items=len(suggestion.shopping_list))
    return list(suggestion.shopping_list)
