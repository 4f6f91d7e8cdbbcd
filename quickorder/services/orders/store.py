"""Order store: the single source of truth for orders and their lifecycle."""
import asyncio
import logging
from typing import Callable, List, Optional, Set

from quickorder.core.exceptions import InvalidTransitionError, NotFoundError, OrderValidationError
from quickorder.services.agents.roster import AgentRoster
from quickorder.services.orders.base import OrderRepository
from quickorder.services.orders.lifecycle import validate_transition
from quickorder.services.orders.models import (
    AssignedAgent,
    DeliveryAgent,
    NewOrder,
    Order,
    OrderCreatedEvent,
    OrderDraft,
    OrderStatus,
    TransitionEvent,
)

logger = logging.getLogger(__name__)

TransitionListener = Callable[[TransitionEvent], None]
CreatedListener = Callable[[OrderCreatedEvent], None]


class OrderStore:
    """Owns the order collection and enforces legal status transitions.

    Writes go through a single lock, so a transition (validation, agent
    check, write and event publication) is never observed half-applied and
    two admins cannot hand the same agent two deliveries at once.
    """

    def __init__(
        self,
        repository: OrderRepository,
        roster: AgentRoster,
        strict_agent_assignment: bool = True,
    ):
        self.repository = repository
        self.roster = roster
        self.strict_agent_assignment = strict_agent_assignment
        self._lock = asyncio.Lock()
        self._transition_listeners: List[TransitionListener] = []
        self._created_listeners: List[CreatedListener] = []

    def subscribe(self, listener: TransitionListener) -> Callable[[], None]:
        """Register a listener for transition events. Returns an unsubscribe callable."""
        self._transition_listeners.append(listener)
        return lambda: self._remove(self._transition_listeners, listener)

    def subscribe_created(self, listener: CreatedListener) -> Callable[[], None]:
        """Register a listener for order creation. Returns an unsubscribe callable."""
        self._created_listeners.append(listener)
        return lambda: self._remove(self._created_listeners, listener)

    @staticmethod
    def _remove(listeners: list, listener) -> None:
        if listener in listeners:
            listeners.remove(listener)

    def _publish(self, listeners: list, event) -> None:
        for listener in list(listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    f"[ORDER STORE] Listener {getattr(listener, '__qualname__', listener)} failed: "
                    f"{type(e).__name__}: {str(e)}",
                    exc_info=True,
                )

    async def create_order(
        self,
        draft: OrderDraft,
        session_id: Optional[str] = None,
        price: Optional[float] = None,
    ) -> Order:
        """Create a Pending order from a complete draft."""
        if not draft.is_complete():
            missing = [
                field
                for field in ("name", "item", "address", "payment_method")
                if not getattr(draft, field)
            ]
            raise OrderValidationError([f"{field} is required" for field in missing])

        async with self._lock:
            order = await self.repository.add_order(
                NewOrder(
                    customer_name=draft.name,
                    item=draft.item,
                    address=draft.address,
                    payment_method=draft.payment_method,
                    price=price,
                    session_id=session_id,
                )
            )
            logger.info(
                f"[ORDER STORE] Created order #{order.id} for '{order.customer_name}' "
                f"(item: '{order.item}', payment: {order.payment_method}, session: {session_id or 'NONE'})"
            )
            self._publish(self._created_listeners, OrderCreatedEvent(order=order))
        return order

    async def get_order(self, order_id: int) -> Order:
        """Get an order by id."""
        order = await self.repository.get_order(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order

    async def list_orders(self) -> List[Order]:
        """Get all orders, oldest first."""
        return await self.repository.list_orders()

    async def list_by_status(self, *statuses: OrderStatus) -> List[Order]:
        """Get orders in any of the given statuses, oldest first."""
        wanted = set(statuses)
        return [order for order in await self.repository.list_orders() if order.status in wanted]

    async def busy_agent_ids(self) -> Set[str]:
        """Ids of agents currently carrying an order out for delivery."""
        return {
            order.delivery_agent.id
            for order in await self.list_by_status(OrderStatus.OUT_FOR_DELIVERY)
            if order.delivery_agent
        }

    async def _claim_agent(self, order_id: int, agent_id: str) -> DeliveryAgent:
        """Resolve and check the agent for an assignment. Caller holds the lock."""
        agent = self.roster.get_agent(agent_id)
        if not self.strict_agent_assignment:
            return agent
        if not agent.is_available:
            raise InvalidTransitionError(
                f"{agent.name} is not available for deliveries", order_id=order_id
            )
        if agent.id in await self.busy_agent_ids():
            raise InvalidTransitionError(
                f"{agent.name} is already out on another delivery", order_id=order_id
            )
        return agent

    async def transition(
        self,
        order_id: int,
        new_status: OrderStatus,
        agent_id: Optional[str] = None,
    ) -> Order:
        """Move an order along one edge of the lifecycle.

        Raises:
            NotFoundError: the order or the agent does not exist
            InvalidTransitionError: the edge is not legal, the agent is missing
                or unavailable, or another writer changed the order first
        """
        async with self._lock:
            order = await self.get_order(order_id)
            old_status = order.status
            validate_transition(order.id, old_status, new_status)

            agent = order.delivery_agent
            if new_status == OrderStatus.OUT_FOR_DELIVERY:
                if not agent_id:
                    raise InvalidTransitionError(
                        f"Order #{order_id} needs a delivery agent to go out for delivery",
                        order_id=order_id,
                    )
                claimed = await self._claim_agent(order_id, agent_id)
                agent = AssignedAgent(id=claimed.id, name=claimed.name)
            elif new_status == OrderStatus.CANCELLED:
                agent = None

            updated = order.model_copy(
                update={
                    "status": new_status,
                    "delivery_agent": agent,
                    "version": order.version + 1,
                }
            )
            saved = await self.repository.save_order(updated, expected_version=order.version)

            logger.info(
                f"[ORDER STORE] Order #{order_id}: {old_status.value} -> {new_status.value}"
                + (f" (agent: {agent.name})" if agent and new_status == OrderStatus.OUT_FOR_DELIVERY else "")
            )
            self._publish(
                self._transition_listeners,
                TransitionEvent(
                    order_id=saved.id,
                    old_status=old_status,
                    new_status=new_status,
                    agent=saved.delivery_agent,
                    session_id=saved.session_id,
                ),
            )
        return saved
