"""Simulated delivery tracking driven by a timer."""

from bargainbot.tracking.milestones import (
    DELIVERY_MILESTONES,
    FINAL_INDEX,
    MILESTONE_DETAILS,
    DeliveryMilestone,
    TrackerSnapshot,
)
from bargainbot.tracking.sessions import DEFAULT_RETENTION_SECONDS, TrackingSessions
from bargainbot.tracking.tracker import DEFAULT_INTERVAL_SECONDS, DeliveryTracker

__all__ = [
    "DEFAULT_INTERVAL_SECONDS",
    "DEFAULT_RETENTION_SECONDS",
    "DELIVERY_MILESTONES",
    "FINAL_INDEX",
    "MILESTONE_DETAILS",
    "DeliveryMilestone",
    "DeliveryTracker",
    "TrackerSnapshot",
    "TrackingSessions",
]
