"""Negotiation result aggregate and the caller-owned history record."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from bargainbot.domain.errors import RecordAlreadySettledError
from bargainbot.domain.models import NegotiationRequest
from bargainbot.domain.types import RecordStatus
from bargainbot.llm.models import NegotiationOutcome, UpsellSuggestions


class NegotiationResult(BaseModel):
    """Both halves of a negotiation; one cannot exist without the other."""

    model_config = ConfigDict(frozen=True)

    negotiation: NegotiationOutcome
    upsells: UpsellSuggestions


class PreferencesUpdateResult(BaseModel):
    """Outcome of a preference update as shown to the user."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str


class NegotiationRecord(BaseModel):
    """One entry of a user's negotiation history.

    Created ``PENDING`` at submission time and settled exactly once, either
    to ``SUCCESS`` carrying ``result`` or to ``ERROR`` carrying ``error``.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    request: NegotiationRequest
    status: RecordStatus = RecordStatus.PENDING
    result: NegotiationResult | None = None
    error: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_settled(self) -> bool:
        """Return True once the record has left ``PENDING``."""
        return self.status != RecordStatus.PENDING

    def mark_success(self, result: NegotiationResult) -> None:
        """Settle the record as successful.

        Raises:
            RecordAlreadySettledError: If the record already settled.
        """
        if self.is_settled:
            raise RecordAlreadySettledError(self.id, self.status)
        self.result = result
        self.status = RecordStatus.SUCCESS

    def mark_error(self, message: str) -> None:
        """Settle the record as failed with a human-readable *message*.

        Raises:
            RecordAlreadySettledError: If the record already settled.
        """
        if self.is_settled:
            raise RecordAlreadySettledError(self.id, self.status)
        self.error = message
        self.status = RecordStatus.ERROR
