"""Timer-driven delivery tracker.

A ``DeliveryTracker`` owns one integer cursor into ``DELIVERY_MILESTONES``.
Once started, a background task wakes every ``interval`` seconds and moves
the cursor forward by exactly one milestone.  The first wake-up after
``DELIVERED`` has been reached stops the task.  Nothing outside the task can
move the cursor.

Usage::

    tracker = DeliveryTracker("abc123")
    tracker.start()
    async for snapshot in tracker.subscribe():
        render(snapshot)
    tracker.stop()
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable

import structlog

from bargainbot.observability.metrics import ACTIVE_TRACKERS
from bargainbot.tracking.milestones import FINAL_INDEX, TrackerSnapshot

logger = structlog.get_logger()

DEFAULT_INTERVAL_SECONDS = 5.0

Sleep = Callable[[float], Awaitable[object]]


class DeliveryTracker:
    """Simulated delivery progress for a single order."""

    def __init__(
        self,
        order_id: str,
        *,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._order_id = order_id
        self._interval = interval
        self._sleep = sleep
        self._index = 0
        self._task: asyncio.Task[None] | None = None
        self._subscribers: list[asyncio.Queue[TrackerSnapshot | None]] = []
        self._finished_callbacks: list[Callable[[DeliveryTracker], None]] = []

    @property
    def order_id(self) -> str:
        """Return the tracked order's identifier."""
        return self._order_id

    @property
    def current_index(self) -> int:
        """Return the index of the current milestone (0-4)."""
        return self._index

    @property
    def is_running(self) -> bool:
        """Return True while the timer task is alive."""
        return self._task is not None and not self._task.done()

    def snapshot(self) -> TrackerSnapshot:
        """Return the current milestone view."""
        return TrackerSnapshot.at(self._order_id, self._index)

    def start(self) -> None:
        """Begin advancing on the timer.  Must be called inside a running loop.

        Calling ``start`` on a tracker that was already started is a no-op.
        """
        if self._task is not None:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._drive(), name=f"delivery-tracker-{self._order_id}"
        )
        self._task.add_done_callback(self._on_driver_done)
        ACTIVE_TRACKERS.inc()
        logger.info("tracker_started", order_id=self._order_id, interval=self._interval)

    def stop(self) -> None:
        """Cancel the timer task.  Safe to call repeatedly."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            logger.info("tracker_stopped", order_id=self._order_id, index=self._index)

    def add_finished_callback(self, callback: Callable[[DeliveryTracker], None]) -> None:
        """Call *callback* with this tracker once the driver ends on its own.

        Fires after delivery (or a driver crash), never after ``stop()``.
        """
        self._finished_callbacks.append(callback)

    async def wait_stopped(self) -> None:
        """Wait until the timer task has finished, whether delivered or cancelled."""
        if self._task is None:
            return
        try:
            await asyncio.shield(self._task)
        except asyncio.CancelledError:
            if not self._task.cancelled():
                raise

    async def subscribe(self) -> AsyncIterator[TrackerSnapshot]:
        """Yield the current snapshot, then one snapshot per advance.

        The queue is registered before the first yield, so a consumer that is
        slow to come back still sees every milestone.  The iterator ends after
        the ``DELIVERED`` snapshot or when the tracker is stopped.
        """
        queue: asyncio.Queue[TrackerSnapshot | None] = asyncio.Queue()
        current = self.snapshot()
        finished = current.is_delivered or (self._task is not None and self._task.done())
        if not finished:
            self._subscribers.append(queue)
        try:
            yield current
            if finished:
                return
            while True:
                snapshot = await queue.get()
                if snapshot is None:
                    break
                yield snapshot
                if snapshot.is_delivered:
                    break
        finally:
            if queue in self._subscribers:
                self._subscribers.remove(queue)

    async def _drive(self) -> None:
        while True:
            await self._sleep(self._interval)
            if self._index >= FINAL_INDEX:
                break
            self._advance()

    def _advance(self) -> None:
        self._index += 1
        snapshot = self.snapshot()
        logger.info(
            "tracker_advanced",
            order_id=self._order_id,
            index=self._index,
            milestone=snapshot.milestone,
        )
        for queue in self._subscribers:
            queue.put_nowait(snapshot)

    def _on_driver_done(self, task: asyncio.Task[None]) -> None:
        ACTIVE_TRACKERS.dec()
        for queue in self._subscribers:
            queue.put_nowait(None)
        if task.cancelled():
            return
        if task.exception() is not None:
            logger.error(
                "tracker_driver_crashed",
                order_id=self._order_id,
                error=str(task.exception()),
            )
        for callback in self._finished_callbacks:
            callback(self)
