"""Tests for the NegotiationOrchestrator using a mocked Anthropic client."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import MagicMock

import pytest
from anthropic import APIConnectionError

from bargainbot.domain.errors import OracleError, OrchestrationError, ValidationError
from bargainbot.domain.models import NegotiationRequest
from bargainbot.domain.types import NegotiationCall
from bargainbot.llm.client import TextOracle
from bargainbot.llm.models import NegotiationOutcome, UpsellSuggestions
from bargainbot.negotiation.models import NegotiationResult
from bargainbot.negotiation.orchestrator import NegotiationOrchestrator, describe_product

PRODUCT_URL = "https://example.com/product/42"


def _run(orchestrator: NegotiationOrchestrator, reference: str) -> NegotiationResult:
    return asyncio.run(
        orchestrator.start_negotiation(NegotiationRequest(product_reference=reference))
    )


class TestSuccessfulNegotiation:
    """Both oracle calls succeed."""

    def test_result_carries_both_outputs_verbatim(
        self,
        oracle: TextOracle,
        mock_anthropic_client: MagicMock,
        parse_router: Any,
        sample_outcome: NegotiationOutcome,
        sample_upsells: UpsellSuggestions,
    ) -> None:
        mock_anthropic_client.messages.parse.side_effect = parse_router(
            {NegotiationOutcome: sample_outcome, UpsellSuggestions: sample_upsells}
        )

        result = _run(NegotiationOrchestrator(oracle), PRODUCT_URL)

        assert result.negotiation == sample_outcome
        assert result.negotiation.negotiated_price == "UGX 450,000"
        assert result.upsells.suggestions == ["Phone Case", "Screen Protector"]

    def test_issues_exactly_two_calls(
        self,
        oracle: TextOracle,
        mock_anthropic_client: MagicMock,
        parse_router: Any,
        sample_outcome: NegotiationOutcome,
        sample_upsells: UpsellSuggestions,
    ) -> None:
        mock_anthropic_client.messages.parse.side_effect = parse_router(
            {NegotiationOutcome: sample_outcome, UpsellSuggestions: sample_upsells}
        )

        _run(NegotiationOrchestrator(oracle), PRODUCT_URL)

        calls = mock_anthropic_client.messages.parse.call_args_list
        assert len(calls) == 2
        formats = {c.kwargs["output_format"] for c in calls}
        assert formats == {NegotiationOutcome, UpsellSuggestions}

    def test_upsell_prompt_describes_product_reference(
        self,
        oracle: TextOracle,
        mock_anthropic_client: MagicMock,
        parse_router: Any,
        sample_outcome: NegotiationOutcome,
        sample_upsells: UpsellSuggestions,
    ) -> None:
        mock_anthropic_client.messages.parse.side_effect = parse_router(
            {NegotiationOutcome: sample_outcome, UpsellSuggestions: sample_upsells}
        )

        _run(NegotiationOrchestrator(oracle), PRODUCT_URL)

        upsell_call = next(
            c
            for c in mock_anthropic_client.messages.parse.call_args_list
            if c.kwargs["output_format"] is UpsellSuggestions
        )
        content = upsell_call.kwargs["messages"][0]["content"]
        assert describe_product(PRODUCT_URL) in content
        assert describe_product(PRODUCT_URL) == f"Product at {PRODUCT_URL}"

    def test_calls_run_concurrently(
        self,
        oracle: TextOracle,
        mock_anthropic_client: MagicMock,
        sample_outcome: NegotiationOutcome,
        sample_upsells: UpsellSuggestions,
    ) -> None:
        """Each call waits for the other to start; a sequential join would deadlock."""

        async def scenario() -> NegotiationResult:
            started: dict[type, asyncio.Event] = {
                NegotiationOutcome: asyncio.Event(),
                UpsellSuggestions: asyncio.Event(),
            }
            outputs = {NegotiationOutcome: sample_outcome, UpsellSuggestions: sample_upsells}

            async def parse(**kwargs: Any) -> MagicMock:
                fmt = kwargs["output_format"]
                started[fmt].set()
                other = UpsellSuggestions if fmt is NegotiationOutcome else NegotiationOutcome
                await started[other].wait()
                response = MagicMock()
                response.parsed_output = outputs[fmt]
                return response

            mock_anthropic_client.messages.parse.side_effect = parse
            return await asyncio.wait_for(
                NegotiationOrchestrator(oracle).start_negotiation(
                    NegotiationRequest(product_reference=PRODUCT_URL)
                ),
                timeout=1,
            )

        result = asyncio.run(scenario())
        assert result.upsells == sample_upsells


class TestValidation:
    """The orchestrator re-validates the product reference."""

    @pytest.mark.parametrize("reference", ["not-a-url", "", "   ", "ftp://example.com/x"])
    def test_invalid_reference_raises_before_any_oracle_call(
        self, oracle: TextOracle, mock_anthropic_client: MagicMock, reference: str
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _run(NegotiationOrchestrator(oracle), reference)

        assert exc_info.value.field == "product_reference"
        mock_anthropic_client.messages.parse.assert_not_called()


class TestAtomicFailure:
    """Either call failing fails the whole negotiation."""

    def test_negotiation_call_failure(
        self,
        oracle: TextOracle,
        mock_anthropic_client: MagicMock,
        parse_router: Any,
        api_connection_error: APIConnectionError,
        sample_upsells: UpsellSuggestions,
    ) -> None:
        mock_anthropic_client.messages.parse.side_effect = parse_router(
            {NegotiationOutcome: api_connection_error, UpsellSuggestions: sample_upsells}
        )

        with pytest.raises(OrchestrationError) as exc_info:
            _run(NegotiationOrchestrator(oracle), PRODUCT_URL)

        assert exc_info.value.failed_call == NegotiationCall.NEGOTIATION
        assert isinstance(exc_info.value.__cause__, OracleError)

    def test_upsell_call_failure(
        self,
        oracle: TextOracle,
        mock_anthropic_client: MagicMock,
        parse_router: Any,
        api_connection_error: APIConnectionError,
        sample_outcome: NegotiationOutcome,
    ) -> None:
        mock_anthropic_client.messages.parse.side_effect = parse_router(
            {NegotiationOutcome: sample_outcome, UpsellSuggestions: api_connection_error}
        )

        with pytest.raises(OrchestrationError) as exc_info:
            _run(NegotiationOrchestrator(oracle), PRODUCT_URL)

        assert exc_info.value.failed_call == NegotiationCall.UPSELLS

    def test_missing_structured_output_is_a_failure(
        self,
        oracle: TextOracle,
        mock_anthropic_client: MagicMock,
        sample_outcome: NegotiationOutcome,
    ) -> None:
        async def parse(**kwargs: Any) -> MagicMock:
            response = MagicMock()
            is_negotiation = kwargs["output_format"] is NegotiationOutcome
            response.parsed_output = sample_outcome if is_negotiation else None
            return response

        mock_anthropic_client.messages.parse.side_effect = parse

        with pytest.raises(OrchestrationError):
            _run(NegotiationOrchestrator(oracle), PRODUCT_URL)

    def test_failure_cancels_pending_sibling(
        self,
        oracle: TextOracle,
        mock_anthropic_client: MagicMock,
        api_connection_error: APIConnectionError,
    ) -> None:
        cancelled: list[bool] = []

        async def parse(**kwargs: Any) -> MagicMock:
            if kwargs["output_format"] is NegotiationOutcome:
                await asyncio.sleep(0)
                raise api_connection_error
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                cancelled.append(True)
                raise
            raise AssertionError("upsell call should never complete")

        mock_anthropic_client.messages.parse.side_effect = parse

        with pytest.raises(OrchestrationError):
            asyncio.run(
                asyncio.wait_for(
                    NegotiationOrchestrator(oracle).start_negotiation(
                        NegotiationRequest(product_reference=PRODUCT_URL)
                    ),
                    timeout=1,
                )
            )

        assert cancelled == [True]

    def test_unexpected_exception_is_a_failure(
        self,
        oracle: TextOracle,
        mock_anthropic_client: MagicMock,
        parse_router: Any,
        sample_outcome: NegotiationOutcome,
    ) -> None:
        crash = TypeError("unexpected keyword argument 'output_format'")
        mock_anthropic_client.messages.parse.side_effect = parse_router(
            {NegotiationOutcome: sample_outcome, UpsellSuggestions: crash}
        )

        with pytest.raises(OrchestrationError) as exc_info:
            _run(NegotiationOrchestrator(oracle), PRODUCT_URL)

        assert exc_info.value.failed_call == NegotiationCall.UPSELLS
        assert exc_info.value.__cause__ is crash
        assert "TypeError" in str(exc_info.value)


def test_orchestrator_is_reentrant(
    oracle: TextOracle,
    mock_anthropic_client: MagicMock,
    parse_router: Any,
    sample_outcome: NegotiationOutcome,
    sample_upsells: UpsellSuggestions,
) -> None:
    """Concurrent negotiations on one orchestrator do not interfere."""
    mock_anthropic_client.messages.parse.side_effect = parse_router(
        {NegotiationOutcome: sample_outcome, UpsellSuggestions: sample_upsells}
    )
    orchestrator = NegotiationOrchestrator(oracle)

    async def scenario() -> list[NegotiationResult]:
        return await asyncio.gather(
            *(
                orchestrator.start_negotiation(
                    NegotiationRequest(product_reference=f"https://example.com/product/{n}")
                )
                for n in range(3)
            )
        )

    results = asyncio.run(scenario())

    assert len(results) == 3
    assert all(r.negotiation == sample_outcome for r in results)
    assert mock_anthropic_client.messages.parse.await_count == 6
