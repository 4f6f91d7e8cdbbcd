"""Order repository interface."""
from abc import ABC, abstractmethod
from typing import List, Optional

from quickorder.services.orders.models import NewOrder, Order


class OrderRepository(ABC):
    """Abstract base class for order storage backends."""

    @abstractmethod
    async def add_order(self, new_order: NewOrder) -> Order:
        """Store a new order and assign its id."""
        pass

    @abstractmethod
    async def get_order(self, order_id: int) -> Optional[Order]:
        """Get an order by id."""
        pass

    @abstractmethod
    async def list_orders(self) -> List[Order]:
        """Get all orders in insertion order."""
        pass

    @abstractmethod
    async def save_order(self, order: Order, expected_version: int) -> Order:
        """Persist a changed order.

        Raises InvalidTransitionError if the stored version no longer matches
        expected_version (another writer got there first).
        """
        pass
