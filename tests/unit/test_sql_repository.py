"""Unit tests for the SQL order repository."""
import pytest

from quickorder.core.exceptions import InvalidTransitionError
from quickorder.db.database import to_async_url
from quickorder.services.orders.models import AssignedAgent, NewOrder, OrderStatus
from quickorder.services.orders.sql import SqlOrderRepository
from quickorder.services.orders.store import OrderStore


def new_order(**overrides):
    fields = dict(
        customer_name="Alice",
        item="Margherita Pizza",
        address="12 Baker Street",
        payment_method="Cash on Delivery",
        price=12.99,
        session_id="s1",
    )
    fields.update(overrides)
    return NewOrder(**fields)


class TestSqlOrderRepository:
    """Test order persistence."""

    @pytest.mark.asyncio
    async def test_add_and_get(self, test_session_factory):
        """Test an inserted order is read back with its fields."""
        repository = SqlOrderRepository(test_session_factory)

        created = await repository.add_order(new_order())
        fetched = await repository.get_order(created.id)

        assert created.id == 1
        assert fetched.customer_name == "Alice"
        assert fetched.status == OrderStatus.PENDING
        assert fetched.price == 12.99
        assert fetched.session_id == "s1"
        assert fetched.version == 1
        assert fetched.timestamp.tzinfo is not None

    @pytest.mark.asyncio
    async def test_get_missing(self, test_session_factory):
        """Test a missing id returns None."""
        repository = SqlOrderRepository(test_session_factory)
        assert await repository.get_order(5) is None

    @pytest.mark.asyncio
    async def test_list_in_insertion_order(self, test_session_factory):
        """Test orders are listed oldest first."""
        repository = SqlOrderRepository(test_session_factory)
        for name in ("A", "B", "C"):
            await repository.add_order(new_order(customer_name=name))

        orders = await repository.list_orders()

        assert [o.customer_name for o in orders] == ["A", "B", "C"]
        assert [o.id for o in orders] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_save_with_agent(self, test_session_factory):
        """Test status and agent are persisted."""
        repository = SqlOrderRepository(test_session_factory)
        order = await repository.add_order(new_order())

        updated = order.model_copy(
            update={
                "status": OrderStatus.OUT_FOR_DELIVERY,
                "delivery_agent": AssignedAgent(id="da1", name="John Doe"),
                "version": 2,
            }
        )
        await repository.save_order(updated, expected_version=1)

        fetched = await repository.get_order(order.id)
        assert fetched.status == OrderStatus.OUT_FOR_DELIVERY
        assert fetched.delivery_agent.name == "John Doe"
        assert fetched.version == 2

    @pytest.mark.asyncio
    async def test_stale_version_rejected(self, test_session_factory):
        """Test a save against an outdated version raises and writes nothing."""
        repository = SqlOrderRepository(test_session_factory)
        order = await repository.add_order(new_order())
        await repository.save_order(
            order.model_copy(update={"status": OrderStatus.APPROVED, "version": 2}),
            expected_version=1,
        )

        with pytest.raises(InvalidTransitionError):
            await repository.save_order(
                order.model_copy(update={"status": OrderStatus.CANCELLED, "version": 2}),
                expected_version=1,
            )

        assert (await repository.get_order(order.id)).status == OrderStatus.APPROVED

    @pytest.mark.asyncio
    async def test_store_over_sql(self, test_session_factory, roster, complete_draft):
        """Test the full lifecycle through the store with SQL persistence."""
        store = OrderStore(SqlOrderRepository(test_session_factory), roster)
        await store.create_order(complete_draft)
        await store.transition(1, OrderStatus.APPROVED)
        await store.transition(1, OrderStatus.OUT_FOR_DELIVERY, agent_id="da1")
        delivered = await store.transition(1, OrderStatus.DELIVERED)

        assert delivered.status == OrderStatus.DELIVERED
        assert (await store.get_order(1)).delivery_agent.id == "da1"

        with pytest.raises(InvalidTransitionError):
            await store.transition(1, OrderStatus.CANCELLED)

    @pytest.mark.asyncio
    async def test_agent_snapshot_has_no_availability(self, test_session_factory, roster, complete_draft):
        """Test an order read back from SQL carries only the agent's id and name."""
        store = OrderStore(SqlOrderRepository(test_session_factory), roster)
        await store.create_order(complete_draft)
        await store.transition(1, OrderStatus.APPROVED)
        await store.transition(1, OrderStatus.OUT_FOR_DELIVERY, agent_id="da1")
        roster.set_availability("da1", False)

        order = await store.get_order(1)

        assert order.model_dump()["delivery_agent"] == {"id": "da1", "name": "John Doe"}



class TestDatabaseUrl:
    """Test database URL rewriting."""

    def test_async_drivers(self):
        """Test plain URLs get async drivers."""
        assert to_async_url("postgresql://u:p@db/quick") == "postgresql+asyncpg://u:p@db/quick"
        assert to_async_url("sqlite:///./quick.db") == "sqlite+aiosqlite:///./quick.db"

    def test_async_url_untouched(self):
        """Test URLs that already name a driver are kept."""
        url = "sqlite+aiosqlite:///:memory:"
        assert to_async_url(url) == url
