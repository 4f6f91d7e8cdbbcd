"""Order status transition graph."""
from typing import Dict, FrozenSet

from quickorder.core.exceptions import InvalidTransitionError
from quickorder.services.orders.models import OrderStatus

# Legal edges of the order lifecycle
ALLOWED_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.APPROVED, OrderStatus.CANCELLED}),
    OrderStatus.APPROVED: frozenset({OrderStatus.OUT_FOR_DELIVERY, OrderStatus.CANCELLED}),
    OrderStatus.OUT_FOR_DELIVERY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


def is_terminal(status: OrderStatus) -> bool:
    """Check if no further transitions are accepted from a status."""
    return status in TERMINAL_STATUSES


def can_transition(old_status: OrderStatus, new_status: OrderStatus) -> bool:
    """Check if an edge exists in the transition graph."""
    return new_status in ALLOWED_TRANSITIONS.get(old_status, frozenset())


def validate_transition(order_id: int, old_status: OrderStatus, new_status: OrderStatus) -> None:
    """Raise InvalidTransitionError unless old_status -> new_status is a legal edge."""
    if can_transition(old_status, new_status):
        return
    if is_terminal(old_status):
        raise InvalidTransitionError(
            f"Order #{order_id} is already {old_status.value.lower()}; no further changes are allowed",
            order_id=order_id,
        )
    raise InvalidTransitionError(
        f"Order #{order_id} cannot move from {old_status.value} to {new_status.value}",
        order_id=order_id,
    )
