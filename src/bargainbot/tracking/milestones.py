"""The fixed delivery milestone sequence and tracker snapshots."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class DeliveryMilestone(StrEnum):
    """Stages an order passes through, in order."""

    ORDER_PLACED = "order_placed"
    RIDER_ASSIGNED = "rider_assigned"
    ITEMS_PURCHASED = "items_purchased"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"


# Display name and description for each milestone.
MILESTONE_DETAILS: dict[DeliveryMilestone, tuple[str, str]] = {
    DeliveryMilestone.ORDER_PLACED: ("Order Placed", "We have received your order."),
    DeliveryMilestone.RIDER_ASSIGNED: (
        "Rider Assigned",
        "A rider is on their way to the market.",
    ),
    DeliveryMilestone.ITEMS_PURCHASED: (
        "Items Purchased",
        "The rider has purchased all your items.",
    ),
    DeliveryMilestone.OUT_FOR_DELIVERY: ("Out for Delivery", "Your items are on the way to you."),
    DeliveryMilestone.DELIVERED: ("Delivered", "Your order has been delivered."),
}

DELIVERY_MILESTONES: tuple[DeliveryMilestone, ...] = tuple(DeliveryMilestone)

FINAL_INDEX: int = len(DELIVERY_MILESTONES) - 1


class TrackerSnapshot(BaseModel):
    """Point-in-time view of a tracker for display."""

    model_config = ConfigDict(frozen=True)

    order_id: str
    current_index: int
    milestone: DeliveryMilestone
    name: str
    description: str
    completed: list[bool]
    is_delivered: bool

    @classmethod
    def at(cls, order_id: str, index: int) -> "TrackerSnapshot":
        """Build the snapshot for *order_id* positioned at milestone *index*."""
        milestone = DELIVERY_MILESTONES[index]
        name, description = MILESTONE_DETAILS[milestone]
        return cls(
            order_id=order_id,
            current_index=index,
            milestone=milestone,
            name=name,
            description=description,
            completed=[i < index for i in range(len(DELIVERY_MILESTONES))],
            is_delivered=index == FINAL_INDEX,
        )
