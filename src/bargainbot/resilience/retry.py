"""Caller-side retry for oracle-backed entry points.

Oracle flows never retry on their own.  Entry points that want a second
chance wrap the call with ``retry_oracle_call``: exponential backoff with
jitter, retrying only ``OracleError``, re-raising the last error when the
attempts run out.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.wait import wait_base

from bargainbot.domain.errors import OracleError

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_WAIT: wait_base = wait_exponential_jitter(initial=1, max=10, jitter=2)


def _before_sleep_log(retry_state: RetryCallState) -> None:
    """Log a warning before each retry attempt.

    Args:
        retry_state: Tenacity retry state with attempt info.
    """
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "oracle_call_retrying",
        operation=getattr(exception, "operation", "unknown"),
        attempt=retry_state.attempt_number,
        wait=retry_state.next_action.sleep if retry_state.next_action else 0,
    )


async def retry_oracle_call(
    call: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    wait: wait_base = DEFAULT_WAIT,
) -> T:
    """Await a fresh ``call()`` per attempt, retrying on ``OracleError``.

    Args:
        call: Zero-argument factory returning a new awaitable each time.
        attempts: Maximum number of attempts, including the first.
        wait: Tenacity wait strategy between attempts.

    Returns:
        Whatever *call* resolves to on its first successful attempt.

    Raises:
        OracleError: The last failure once *attempts* are exhausted.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait,
        retry=retry_if_exception_type(OracleError),
        before_sleep=_before_sleep_log,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await call()
    raise AssertionError("unreachable: tenacity re-raises after the final attempt")
