"""In-memory order repository."""
import itertools
from typing import Dict, List, Optional

from quickorder.core.exceptions import InvalidTransitionError, NotFoundError
from quickorder.services.orders.base import OrderRepository
from quickorder.services.orders.models import NewOrder, Order


class InMemoryOrderRepository(OrderRepository):
    """Order repository keeping orders in process memory for the session lifetime."""

    def __init__(self):
        self._orders: Dict[int, Order] = {}
        self._ids = itertools.count(1)

    async def add_order(self, new_order: NewOrder) -> Order:
        """Store a new order under the next counter value."""
        order = Order(id=next(self._ids), **new_order.model_dump())
        self._orders[order.id] = order
        return order.model_copy(deep=True)

    async def get_order(self, order_id: int) -> Optional[Order]:
        """Get an order by id."""
        order = self._orders.get(order_id)
        return order.model_copy(deep=True) if order else None

    async def list_orders(self) -> List[Order]:
        """Get all orders, oldest first."""
        return [order.model_copy(deep=True) for order in self._orders.values()]

    async def save_order(self, order: Order, expected_version: int) -> Order:
        """Replace the stored order if its version is unchanged."""
        current = self._orders.get(order.id)
        if current is None:
            raise NotFoundError("Order", order.id)
        if current.version != expected_version:
            raise InvalidTransitionError(
                f"Order #{order.id} was changed by someone else; refresh and try again",
                order_id=order.id,
            )
        self._orders[order.id] = order.model_copy(deep=True)
        return order.model_copy(deep=True)
