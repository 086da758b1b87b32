"""Negotiation orchestrator joining two concurrent oracle calls.

A negotiation asks the oracle for two independent things at once: a
negotiated price for the product and a list of upsell suggestions.  Both must
succeed for a ``NegotiationResult`` to exist.  The first failure cancels the
sibling call and surfaces as a single ``OrchestrationError``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

import structlog

from bargainbot.domain.errors import OracleError, OrchestrationError
from bargainbot.domain.models import NegotiationRequest, validate_product_reference
from bargainbot.domain.types import NegotiationCall
from bargainbot.llm.client import TextOracle
from bargainbot.llm.flows import generate_upsell_suggestions, negotiate_price
from bargainbot.negotiation.models import NegotiationResult

logger = structlog.get_logger()

T = TypeVar("T")


def describe_product(product_reference: str) -> str:
    """Return the upsell prompt's product description for a product URL."""
    return f"Product at {product_reference}"


async def _tagged(call: NegotiationCall, awaitable: Awaitable[T]) -> T:
    """Await *awaitable*, re-raising any failure as an ``OrchestrationError`` for *call*."""
    try:
        return await awaitable
    except OracleError as exc:
        raise OrchestrationError(call, str(exc)) from exc
    except Exception as exc:
        logger.exception("negotiation_call_crashed", failed_call=call)
        raise OrchestrationError(call, f"unexpected {type(exc).__name__}: {exc}") from exc


class NegotiationOrchestrator:
    """Stateless coordinator for price negotiation plus upsell generation.

    Safe to share across concurrent requests: the only state held is the
    injected oracle.

    Usage::

        orchestrator = NegotiationOrchestrator(oracle)
        result = await orchestrator.start_negotiation(
            NegotiationRequest(product_reference="https://example.com/product/42")
        )
    """

    def __init__(self, oracle: TextOracle) -> None:
        self._oracle = oracle

    async def start_negotiation(self, request: NegotiationRequest) -> NegotiationResult:
        """Negotiate a price and collect upsells for *request*.

        Args:
            request: The user's submission.  Its product reference is
                re-validated here even if the caller already checked it.

        Returns:
            A ``NegotiationResult`` holding both oracle outputs unmodified.

        Raises:
            ValidationError: If the product reference is not an absolute
                http(s) URL.  No oracle call is made.
            OrchestrationError: If either call fails, whether with an
                ``OracleError`` or an unexpected exception.  The other call is
                cancelled and no partial result is returned.
        """
        product_reference = validate_product_reference(request.product_reference)
        log = logger.bind(product_reference=product_reference)
        log.info("negotiation_started")

        try:
            async with asyncio.TaskGroup() as group:
                negotiation_task = group.create_task(
                    _tagged(
                        NegotiationCall.NEGOTIATION,
                        negotiate_price(
                            self._oracle, product_reference, request.user_preferences
                        ),
                    )
                )
                upsells_task = group.create_task(
                    _tagged(
                        NegotiationCall.UPSELLS,
                        generate_upsell_suggestions(
                            self._oracle, describe_product(product_reference)
                        ),
                    )
                )
        except ExceptionGroup as failures:
            for failure in failures.exceptions:
                if isinstance(failure, OrchestrationError):
                    log.warning(
                        "negotiation_failed", failed_call=failure.failed_call, error=str(failure)
                    )
                    raise failure from failure.__cause__
            raise

        result = NegotiationResult(
            negotiation=negotiation_task.result(),
            upsells=upsells_task.result(),
        )
        log.info(
            "negotiation_completed",
            status=result.negotiation.status,
            upsell_count=len(result.upsells.suggestions),
        )
        return result
