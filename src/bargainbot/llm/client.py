"""Anthropic client factory and the structured-output oracle wrapper."""

from __future__ import annotations

from typing import TypeVar

import anthropic
import structlog
from anthropic import AsyncAnthropic
from pydantic import BaseModel

from bargainbot.config import Settings
from bargainbot.domain.errors import OracleError

logger = structlog.get_logger()

DEFAULT_MODEL = "claude-sonnet-4-5-20250929"
DEFAULT_MAX_TOKENS = 1024

OutputT = TypeVar("OutputT", bound=BaseModel)


def get_anthropic_client(settings: Settings) -> AsyncAnthropic:
    """Create an async Anthropic client from application settings.

    SDK-level retries are disabled: retry policy belongs to the caller.

    Args:
        settings: Application settings carrying the API key and timeout.

    Returns:
        Configured ``AsyncAnthropic`` instance.
    """
    return AsyncAnthropic(
        api_key=settings.anthropic_api_key.get_secret_value() or None,
        timeout=settings.oracle_timeout_seconds,
        max_retries=0,
    )


class TextOracle:
    """Opaque text-generation oracle returning schema-validated output.

    Every failure mode (API unreachable, timeout, HTTP error, missing or
    malformed structured output) surfaces as ``OracleError``.

    Usage::

        oracle = TextOracle(get_anthropic_client(settings))
        outcome = await oracle.generate(
            "negotiate_price",
            system=NEGOTIATION_SYSTEM_PROMPT,
            prompt="...",
            output_format=NegotiationOutcome,
        )
    """

    def __init__(
        self,
        client: AsyncAnthropic,
        *,
        model: str = DEFAULT_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self._client = client
        self._model = model
        self._max_tokens = max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> TextOracle:
        """Build an oracle with a fresh client configured from *settings*."""
        return cls(
            get_anthropic_client(settings),
            model=settings.oracle_model,
            max_tokens=settings.oracle_max_tokens,
        )

    @property
    def model(self) -> str:
        """Return the model ID used for every call."""
        return self._model

    async def generate(
        self,
        operation: str,
        *,
        system: str,
        prompt: str,
        output_format: type[OutputT],
    ) -> OutputT:
        """Send *prompt* to the model and parse the reply into *output_format*.

        Args:
            operation: Short name of the calling flow, used in logs and errors.
            system: The system prompt.
            prompt: The user prompt.
            output_format: Pydantic model class describing the expected output.

        Returns:
            A validated instance of *output_format*.

        Raises:
            OracleError: On any transport, API, or schema failure.
        """
        try:
            response = await self._client.messages.parse(
                model=self._model,
                max_tokens=self._max_tokens,
                system=system,
                messages=[{"role": "user", "content": prompt}],
                output_format=output_format,
            )
        except anthropic.APIError as exc:
            logger.warning("oracle_call_failed", operation=operation, error=str(exc))
            raise OracleError(operation, str(exc)) from exc
        except ValueError as exc:
            # pydantic ValidationError and JSON decode errors both land here
            logger.warning("oracle_output_invalid", operation=operation, error=str(exc))
            raise OracleError(operation, f"output failed schema validation: {exc}") from exc

        parsed = response.parsed_output
        if parsed is None:
            raise OracleError(operation, "no structured output returned")
        if not isinstance(parsed, output_format):
            raise OracleError(
                operation, f"expected {output_format.__name__}, got {type(parsed).__name__}"
            )
        logger.debug("oracle_call_completed", operation=operation, model=self._model)
        return parsed
