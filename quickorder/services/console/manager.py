"""Order management console: admin views and actions over the order store."""
import logging
from datetime import date, datetime, timezone
from typing import List, Optional, Sequence
from pydantic import BaseModel

from quickorder.core.exceptions import OrderValidationError
from quickorder.services.agents.roster import AgentRoster
from quickorder.services.orders.models import DeliveryAgent, Order, OrderDraft, OrderStatus
from quickorder.services.orders.store import OrderStore

logger = logging.getLogger(__name__)


class OrderDashboard(BaseModel):
    """Orders grouped the way the admin dashboard shows them."""

    pending: List[Order] = []
    approved: List[Order] = []
    out_for_delivery: List[Order] = []
    completed: List[Order] = []  # delivered or cancelled


class SalesSummary(BaseModel):
    """Revenue from delivered orders."""

    delivered_orders: int = 0
    total_revenue: float = 0.0
    todays_delivered_orders: int = 0
    todays_revenue: float = 0.0


class OrderConsole:
    """Admin-facing operations on orders."""

    def __init__(self, store: OrderStore, roster: AgentRoster, payment_methods: Sequence[str]):
        self.store = store
        self.roster = roster
        self.payment_methods = list(payment_methods)

    async def dashboard(self) -> OrderDashboard:
        """Orders split into pending, approved, in-delivery and completed, oldest first."""
        orders = await self.store.list_orders()
        return OrderDashboard(
            pending=[o for o in orders if o.status == OrderStatus.PENDING],
            approved=[o for o in orders if o.status == OrderStatus.APPROVED],
            out_for_delivery=[o for o in orders if o.status == OrderStatus.OUT_FOR_DELIVERY],
            completed=[
                o for o in orders
                if o.status in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)
            ],
        )

    async def history(self) -> List[Order]:
        """All orders, newest first."""
        return list(reversed(await self.store.list_orders()))

    async def approve(self, order_id: int) -> Order:
        return await self.store.transition(order_id, OrderStatus.APPROVED)

    async def assign_agent(self, order_id: int, agent_id: str) -> Order:
        """Hand an approved order to a delivery agent."""
        return await self.store.transition(order_id, OrderStatus.OUT_FOR_DELIVERY, agent_id=agent_id)

    async def mark_delivered(self, order_id: int) -> Order:
        return await self.store.transition(order_id, OrderStatus.DELIVERED)

    async def cancel(self, order_id: int) -> Order:
        return await self.store.transition(order_id, OrderStatus.CANCELLED)

    async def assignable_agents(self) -> List[DeliveryAgent]:
        """Agents that can be offered in the assignment picker."""
        agents = self.roster.available_agents()
        if not self.store.strict_agent_assignment:
            return agents
        busy = await self.store.busy_agent_ids()
        return [agent for agent in agents if agent.id not in busy]

    def _resolve_payment_method(self, payment_method: str) -> Optional[str]:
        wanted = payment_method.strip().lower()
        for label in self.payment_methods:
            if label.lower() == wanted:
                return label
        return None

    async def add_order(
        self,
        customer_name: str,
        item: str,
        address: str,
        payment_method: str,
        price: Optional[float] = None,
    ) -> Order:
        """Create an order from the admin form.

        Raises:
            OrderValidationError: listing every missing or invalid field
        """
        errors = []
        fields = {"customer_name": customer_name, "item": item, "address": address}
        for field, value in fields.items():
            if not value or not value.strip():
                errors.append(f"{field} is required")

        label = None
        if not payment_method or not payment_method.strip():
            errors.append("payment_method is required")
        else:
            label = self._resolve_payment_method(payment_method)
            if label is None:
                errors.append(
                    f"payment_method must be one of: {', '.join(self.payment_methods)}"
                )

        if price is not None and price < 0:
            errors.append("price must not be negative")

        if errors:
            logger.warning(f"[CONSOLE] Add order rejected: {errors}")
            raise OrderValidationError(errors)

        draft = OrderDraft(
            name=customer_name.strip(),
            item=item.strip(),
            address=address.strip(),
            payment_method=label,
        )
        return await self.store.create_order(draft, price=price)

    async def sales_summary(self, today: Optional[date] = None) -> SalesSummary:
        """Count and revenue of delivered orders, overall and for today (UTC)."""
        if today is None:
            today = datetime.now(timezone.utc).date()
        delivered = await self.store.list_by_status(OrderStatus.DELIVERED)
        todays = [o for o in delivered if o.timestamp.astimezone(timezone.utc).date() == today]
        return SalesSummary(
            delivered_orders=len(delivered),
            total_revenue=round(sum(o.price or 0.0 for o in delivered), 2),
            todays_delivered_orders=len(todays),
            todays_revenue=round(sum(o.price or 0.0 for o in todays), 2),
        )
