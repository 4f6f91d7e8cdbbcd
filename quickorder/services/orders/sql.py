"""SQL order repository."""
from datetime import timezone
from typing import List, Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from quickorder.core.exceptions import InvalidTransitionError
from quickorder.db.models import OrderRecord
from quickorder.services.orders.base import OrderRepository
from quickorder.services.orders.models import AssignedAgent, NewOrder, Order, OrderStatus


def _to_order(record: OrderRecord) -> Order:
    """Convert a database row to a domain order."""
    agent = None
    if record.delivery_agent_id:
        agent = AssignedAgent(
            id=record.delivery_agent_id,
            name=record.delivery_agent_name or "",
        )
    created_at = record.created_at
    # SQLite drops tzinfo
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return Order(
        id=record.id,
        customer_name=record.customer_name,
        item=record.item,
        address=record.address,
        payment_method=record.payment_method,
        timestamp=created_at,
        status=OrderStatus(record.status),
        delivery_agent=agent,
        price=record.price,
        session_id=record.session_id,
        version=record.version,
    )


class SqlOrderRepository(OrderRepository):
    """Order repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def add_order(self, new_order: NewOrder) -> Order:
        """Insert a new order row."""
        async with self.session_factory() as session:
            record = OrderRecord(
                session_id=new_order.session_id,
                customer_name=new_order.customer_name,
                item=new_order.item,
                address=new_order.address,
                payment_method=new_order.payment_method,
                status=OrderStatus.PENDING.value,
                price=new_order.price,
                created_at=new_order.timestamp,
                version=1,
            )
            session.add(record)
            await session.commit()
            await session.refresh(record)
            return _to_order(record)

    async def get_order(self, order_id: int) -> Optional[Order]:
        """Get order by ID."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(OrderRecord).where(OrderRecord.id == order_id)
            )
            record = result.scalar_one_or_none()
            return _to_order(record) if record else None

    async def list_orders(self) -> List[Order]:
        """Get all orders ordered by id (insertion order)."""
        async with self.session_factory() as session:
            result = await session.execute(select(OrderRecord).order_by(OrderRecord.id))
            return [_to_order(record) for record in result.scalars().all()]

    async def save_order(self, order: Order, expected_version: int) -> Order:
        """Update status and agent with an optimistic version check."""
        agent = order.delivery_agent
        async with self.session_factory() as session:
            result = await session.execute(
                update(OrderRecord)
                .where(
                    OrderRecord.id == order.id,
                    OrderRecord.version == expected_version,
                )
                .values(
                    status=order.status.value,
                    delivery_agent_id=agent.id if agent else None,
                    delivery_agent_name=agent.name if agent else None,
                    version=order.version,
                )
            )
            await session.commit()
        if result.rowcount == 0:
            raise InvalidTransitionError(
                f"Order #{order.id} was changed by someone else; refresh and try again",
                order_id=order.id,
            )
        return order
