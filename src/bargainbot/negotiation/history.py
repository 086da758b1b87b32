"""Caller-owned negotiation history.

The history is the only writer of its records: it creates each record in
``PENDING`` before the orchestrator is awaited and settles it once the
orchestrator returns or fails.  Records keep submission order regardless of
the order in which negotiations settle.
"""

from __future__ import annotations

import structlog

from bargainbot.domain.errors import BargainBotError
from bargainbot.domain.models import NegotiationRequest
from bargainbot.negotiation.models import NegotiationRecord
from bargainbot.negotiation.orchestrator import NegotiationOrchestrator
from bargainbot.observability.metrics import NEGOTIATIONS_TOTAL

logger = structlog.get_logger()


class NegotiationHistory:
    """In-memory list of negotiation records for a single user session."""

    def __init__(self) -> None:
        self._records: list[NegotiationRecord] = []

    @property
    def records(self) -> list[NegotiationRecord]:
        """Return a copy of the records in submission order."""
        return list(self._records)

    def newest_first(self) -> list[NegotiationRecord]:
        """Return the records most-recent submission first, as the dashboard lists them."""
        return list(reversed(self._records))

    def get(self, record_id: str) -> NegotiationRecord | None:
        """Return the record with *record_id*, or ``None``."""
        for record in self._records:
            if record.id == record_id:
                return record
        return None

    def submit(self, request: NegotiationRequest) -> NegotiationRecord:
        """Append a new ``PENDING`` record for *request* and return it."""
        record = NegotiationRecord(request=request)
        self._records.append(record)
        logger.info(
            "negotiation_submitted",
            record_id=record.id,
            product_reference=request.product_reference,
        )
        return record

    async def run(
        self,
        orchestrator: NegotiationOrchestrator,
        request: NegotiationRequest,
    ) -> NegotiationRecord:
        """Submit *request*, await the orchestrator, and settle the record.

        Domain failures never escape: the record is marked ``ERROR`` with the
        failure message instead.

        Returns:
            The settled record.
        """
        record = self.submit(request)
        try:
            result = await orchestrator.start_negotiation(request)
        except BargainBotError as exc:
            record.mark_error(str(exc))
            NEGOTIATIONS_TOTAL.labels(outcome="error").inc()
            logger.warning("negotiation_record_failed", record_id=record.id, error=str(exc))
        else:
            record.mark_success(result)
            NEGOTIATIONS_TOTAL.labels(outcome="success").inc()
            logger.info("negotiation_record_succeeded", record_id=record.id)
        return record

    def clear(self) -> None:
        """Discard every record."""
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)
