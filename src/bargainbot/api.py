"""HTTP routes exposing the shopping assistant to the web front end.

All shared objects live in ``request.app.state.services`` (built by
``bargainbot.app.initialize_services``): the oracle, the negotiation
orchestrator, the caller-owned negotiation history, and the tracking
session registry.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import Any

import structlog
from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sse_starlette.sse import EventSourceResponse

from bargainbot.domain.errors import OracleError, UnknownOrderError, ValidationError
from bargainbot.domain.models import (
    DeliveryDetails,
    NegotiationRequest,
    validate_product_reference,
)
from bargainbot.llm.models import ShoppingItem
from bargainbot.negotiation.preferences import update_preferences
from bargainbot.shopping.orders import place_order
from bargainbot.shopping.research import research_product, suggest_shopping_list

logger = structlog.get_logger()

router = APIRouter()


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


class NegotiationSubmission(BaseModel):
    """Body of ``POST /negotiations``."""

    product_reference: str
    user_preferences: str | None = None


class ResearchQuery(BaseModel):
    """Body of ``POST /research``."""

    description: str


class ShoppingListQuery(BaseModel):
    """Body of ``POST /shopping-list``."""

    prompt: str


class OrderSubmission(BaseModel):
    """Body of ``POST /orders``."""

    details: DeliveryDetails
    items: list[ShoppingItem] = Field(default_factory=list)


def _services(request: Request) -> dict[str, Any]:
    services: dict[str, Any] = request.app.state.services
    return services


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI) -> None:
    """Map domain errors onto HTTP status codes.

    ``ValidationError`` -> 422, ``UnknownOrderError`` -> 404,
    ``OracleError`` -> 502.
    """

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc), "field": exc.field})

    @app.exception_handler(UnknownOrderError)
    async def unknown_order_handler(request: Request, exc: UnknownOrderError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(OracleError)
    async def oracle_error_handler(request: Request, exc: OracleError) -> JSONResponse:
        logger.error("oracle_unavailable", operation=exc.operation, path=request.url.path)
        return JSONResponse(status_code=502, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Negotiations
# ---------------------------------------------------------------------------


@router.post("/negotiations", status_code=201)
async def start_negotiation(body: NegotiationSubmission, request: Request) -> dict[str, Any]:
    """Bargain for a product and record the outcome in the session history.

    The product reference is validated before a record is created; an invalid
    URL is a 422 with nothing recorded.  Oracle failures still produce a
    record, in ``error`` status.
    """
    services = _services(request)
    product_reference = validate_product_reference(body.product_reference)
    negotiation_request = NegotiationRequest(
        product_reference=product_reference,
        user_preferences=body.user_preferences,
    )
    record = await services["history"].run(services["orchestrator"], negotiation_request)
    return record.model_dump(mode="json")


@router.get("/negotiations")
async def list_negotiations(request: Request) -> dict[str, Any]:
    """Return the session's negotiation history, newest first."""
    history = _services(request)["history"]
    return {"negotiations": [r.model_dump(mode="json") for r in history.newest_first()]}


@router.get("/negotiations/{record_id}")
async def get_negotiation(record_id: str, request: Request) -> JSONResponse:
    """Return one negotiation record."""
    record = _services(request)["history"].get(record_id)
    if record is None:
        return JSONResponse(status_code=404, content={"detail": f"Unknown record '{record_id}'"})
    return JSONResponse(content=record.model_dump(mode="json"))


@router.delete("/negotiations", status_code=204)
async def clear_negotiations(request: Request) -> Response:
    """Discard the negotiation history."""
    _services(request)["history"].clear()
    return Response(status_code=204)


@router.put("/preferences")
async def put_preferences(values: dict[str, Any], request: Request) -> dict[str, Any]:
    """Forward negotiation preferences to the oracle.  Always answers 200."""
    result = await update_preferences(values, _services(request)["oracle"])
    return result.model_dump()


# ---------------------------------------------------------------------------
# Research and shopping lists
# ---------------------------------------------------------------------------


@router.post("/research")
async def research(body: ResearchQuery, request: Request) -> dict[str, Any]:
    """Find purchase options and prices for a described product."""
    services = _services(request)
    products = await research_product(
        body.description,
        services["oracle"],
        attempts=services["settings"].oracle_retry_attempts,
    )
    return {"products": [p.model_dump() for p in products]}


@router.post("/shopping-list")
async def shopping_list(body: ShoppingListQuery, request: Request) -> dict[str, Any]:
    """Suggest an itemized shopping list."""
    services = _services(request)
    items = await suggest_shopping_list(
        body.prompt,
        services["oracle"],
        attempts=services["settings"].oracle_retry_attempts,
    )
    return {"shopping_list": [item.model_dump() for item in items]}


# ---------------------------------------------------------------------------
# Orders and tracking
# ---------------------------------------------------------------------------


@router.post("/orders", status_code=201)
async def create_order(body: OrderSubmission, request: Request) -> dict[str, Any]:
    """Place an order and start tracking its delivery."""
    order = place_order(body.details, body.items, _services(request)["tracking_sessions"])
    return order.model_dump(mode="json")


@router.post("/tracking/{order_id}", status_code=201)
async def start_tracking(order_id: str, request: Request) -> dict[str, Any]:
    """Start (or rejoin) the delivery tracker for *order_id*."""
    tracker = _services(request)["tracking_sessions"].start(order_id)
    return tracker.snapshot().model_dump(mode="json")


@router.get("/tracking/{order_id}")
async def get_tracking(order_id: str, request: Request) -> dict[str, Any]:
    """Return the current delivery milestone for *order_id*."""
    tracker = _services(request)["tracking_sessions"].get(order_id)
    return tracker.snapshot().model_dump(mode="json")


@router.get("/tracking/{order_id}/events")
async def stream_tracking(order_id: str, request: Request) -> EventSourceResponse:
    """SSE stream of tracker snapshots, ending at delivery or teardown."""
    tracker = _services(request)["tracking_sessions"].get(order_id)

    async def event_generator() -> AsyncIterator[dict[str, str]]:
        async for snapshot in tracker.subscribe():
            yield {
                "event": "milestone",
                "data": json.dumps(snapshot.model_dump(mode="json")),
            }

    return EventSourceResponse(event_generator())


@router.delete("/tracking/{order_id}", status_code=204)
async def stop_tracking(order_id: str, request: Request) -> Response:
    """Tear down the tracker for *order_id*."""
    _services(request)["tracking_sessions"].stop(order_id)
    return Response(status_code=204)
