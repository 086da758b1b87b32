"""Shared pytest fixtures for the BargainBot test suite.

The Anthropic client is always a ``MagicMock`` whose ``messages.parse`` is an
``AsyncMock`` -- no real API calls are made.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from anthropic import APIConnectionError
from pydantic import BaseModel

from bargainbot.llm.client import TextOracle
from bargainbot.llm.models import NegotiationOutcome, UpsellSuggestions


def make_parse_response(parsed: BaseModel | None) -> MagicMock:
    """Wrap a parsed model in a mock ParsedMessage-like object."""
    response = MagicMock()
    response.parsed_output = parsed
    return response


def connection_error() -> APIConnectionError:
    """Build the error the SDK raises when the API is unreachable."""
    return APIConnectionError(
        request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    )


def route_by_output_format(
    outputs: Mapping[type[BaseModel], BaseModel | BaseException],
) -> Callable[..., Any]:
    """Return an async ``messages.parse`` side effect keyed on ``output_format``.

    Exceptions in *outputs* are raised instead of returned.
    """

    async def _parse(**kwargs: Any) -> MagicMock:
        result = outputs[kwargs["output_format"]]
        if isinstance(result, BaseException):
            raise result
        return make_parse_response(result)

    return _parse


@pytest.fixture()
def mock_anthropic_client() -> MagicMock:
    """Return a MagicMock standing in for anthropic.AsyncAnthropic."""
    client = MagicMock()
    client.messages.parse = AsyncMock()
    return client


@pytest.fixture()
def oracle(mock_anthropic_client: MagicMock) -> TextOracle:
    """A TextOracle wired to the mock client."""
    return TextOracle(mock_anthropic_client, model="test-model", max_tokens=256)


@pytest.fixture()
def sample_outcome() -> NegotiationOutcome:
    """A successful negotiation as the oracle would report it."""
    return NegotiationOutcome(
        status="accepted",
        negotiated_price="UGX 450,000",
        summary="The seller agreed to drop the price after two rounds.",
    )


@pytest.fixture()
def sample_upsells() -> UpsellSuggestions:
    """Upsells for a phone."""
    return UpsellSuggestions(suggestions=["Phone Case", "Screen Protector"])


@pytest.fixture()
def parse_router() -> Callable[..., Callable[..., Any]]:
    """Expose ``route_by_output_format`` to tests."""
    return route_by_output_format


@pytest.fixture()
def api_connection_error() -> APIConnectionError:
    """An SDK connection error, as raised when the API is unreachable."""
    return connection_error()


@pytest.fixture()
def parse_response() -> Callable[[BaseModel | None], MagicMock]:
    """Expose ``make_parse_response`` to tests."""
    return make_parse_response


class ManualClock:
    """Stand-in for ``asyncio.sleep`` that only wakes when ``tick`` is called."""

    def __init__(self) -> None:
        self._ticks = asyncio.Semaphore(0)
        self.requested: list[float] = []

    async def sleep(self, delay: float) -> None:
        self.requested.append(delay)
        await self._ticks.acquire()

    async def tick(self, count: int = 1) -> None:
        """Fire the timer *count* times, letting the loop settle after each."""
        for _ in range(count):
            self._ticks.release()
            await self.settle()

    @staticmethod
    async def settle() -> None:
        """Give every ready task a chance to run."""
        for _ in range(10):
            await asyncio.sleep(0)


@pytest.fixture()
def clock() -> ManualClock:
    """A fresh manual clock per test, for driving delivery trackers."""
    return ManualClock()
