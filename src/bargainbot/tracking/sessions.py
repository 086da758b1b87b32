"""Registry of live delivery trackers keyed by order id."""

from __future__ import annotations

import asyncio

import structlog

from bargainbot.domain.errors import UnknownOrderError
from bargainbot.tracking.tracker import DEFAULT_INTERVAL_SECONDS, DeliveryTracker, Sleep

logger = structlog.get_logger()

DEFAULT_RETENTION_SECONDS = 60.0


class TrackingSessions:
    """Starts, looks up, and tears down ``DeliveryTracker`` instances.

    Only one tracker exists per order id.  A tracker whose driver finishes on
    its own stays readable for ``retention`` seconds, then is evicted.
    ``stop_all`` must run on shutdown so no timer outlives the application.
    """

    def __init__(
        self,
        *,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        retention: float = DEFAULT_RETENTION_SECONDS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._interval = interval
        self._retention = retention
        self._sleep = sleep
        self._trackers: dict[str, DeliveryTracker] = {}
        self._evictions: set[asyncio.Task[None]] = set()

    def start(self, order_id: str) -> DeliveryTracker:
        """Return the tracker for *order_id*, creating and starting it if needed."""
        tracker = self._trackers.get(order_id)
        if tracker is not None:
            return tracker
        tracker = DeliveryTracker(order_id, interval=self._interval, sleep=self._sleep)
        self._trackers[order_id] = tracker
        tracker.add_finished_callback(self._schedule_eviction)
        tracker.start()
        return tracker

    def get(self, order_id: str) -> DeliveryTracker:
        """Return the tracker for *order_id*.

        Raises:
            UnknownOrderError: If no tracker exists for *order_id*.
        """
        tracker = self._trackers.get(order_id)
        if tracker is None:
            raise UnknownOrderError(order_id)
        return tracker

    def stop(self, order_id: str) -> None:
        """Stop and forget the tracker for *order_id*.

        Raises:
            UnknownOrderError: If no tracker exists for *order_id*.
        """
        tracker = self._trackers.pop(order_id, None)
        if tracker is None:
            raise UnknownOrderError(order_id)
        tracker.stop()

    def stop_all(self) -> int:
        """Stop and forget every tracker.  Returns how many were registered."""
        count = len(self._trackers)
        for tracker in self._trackers.values():
            tracker.stop()
        self._trackers.clear()
        for eviction in self._evictions:
            eviction.cancel()
        self._evictions.clear()
        if count:
            logger.info("tracking_sessions_stopped", count=count)
        return count

    def _schedule_eviction(self, tracker: DeliveryTracker) -> None:
        if self._trackers.get(tracker.order_id) is not tracker:
            return
        eviction = asyncio.get_running_loop().create_task(
            self._evict_later(tracker), name=f"tracker-eviction-{tracker.order_id}"
        )
        self._evictions.add(eviction)
        eviction.add_done_callback(self._evictions.discard)

    async def _evict_later(self, tracker: DeliveryTracker) -> None:
        await self._sleep(self._retention)
        # the order may have been stopped and restarted in the meantime
        if self._trackers.get(tracker.order_id) is tracker:
            del self._trackers[tracker.order_id]
            logger.info("tracker_evicted", order_id=tracker.order_id)

    def __contains__(self, order_id: object) -> bool:
        return order_id in self._trackers

    def __len__(self) -> int:
        return len(self._trackers)
