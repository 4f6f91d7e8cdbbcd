"""Unit tests for the order management console."""
import pytest
from datetime import date, datetime, timedelta, timezone

from quickorder.core.exceptions import OrderValidationError
from quickorder.services.console.manager import OrderConsole
from quickorder.services.orders.models import OrderStatus

PAYMENT_METHODS = ["Cash on Delivery", "Online Payment"]


@pytest.fixture
def console(order_store, roster):
    return OrderConsole(order_store, roster, PAYMENT_METHODS)


class TestAddOrder:
    """Test admin-created orders."""

    @pytest.mark.asyncio
    async def test_add_order(self, console):
        """Test a valid form creates a Pending order."""
        order = await console.add_order("Bob", "Cola", "5 Elm Road", "online payment", price=1.99)

        assert order.id == 1
        assert order.status == OrderStatus.PENDING
        assert order.payment_method == "Online Payment"
        assert order.session_id is None

    @pytest.mark.asyncio
    async def test_empty_field_rejected(self, console, order_store):
        """Test an empty field raises OrderValidationError and creates nothing."""
        with pytest.raises(OrderValidationError) as exc_info:
            await console.add_order("Bob", "   ", "5 Elm Road", "Cash on Delivery")

        assert exc_info.value.errors == ["item is required"]
        assert await order_store.list_orders() == []

    @pytest.mark.asyncio
    async def test_unknown_payment_rejected(self, console):
        """Test the payment method must be one of the configured labels."""
        with pytest.raises(OrderValidationError) as exc_info:
            await console.add_order("Bob", "Cola", "5 Elm Road", "cash")

        assert "payment_method must be one of" in exc_info.value.errors[0]

    @pytest.mark.asyncio
    async def test_all_errors_reported(self, console):
        """Test every problem is listed at once."""
        with pytest.raises(OrderValidationError) as exc_info:
            await console.add_order("", "", "", "", price=-1)

        assert len(exc_info.value.errors) == 5


class TestDashboard:
    """Test the dashboard views."""

    @pytest.mark.asyncio
    async def test_dashboard_groups(self, console):
        """Test orders are grouped by column."""
        for _ in range(5):
            await console.add_order("Bob", "Cola", "5 Elm Road", "Cash on Delivery")
        await console.approve(2)
        await console.approve(3)
        await console.assign_agent(3, "da1")
        await console.approve(4)
        await console.assign_agent(4, "da2")
        await console.mark_delivered(4)
        await console.cancel(5)

        dashboard = await console.dashboard()

        assert [o.id for o in dashboard.pending] == [1]
        assert [o.id for o in dashboard.approved] == [2]
        assert [o.id for o in dashboard.out_for_delivery] == [3]
        assert [o.id for o in dashboard.completed] == [4, 5]

    @pytest.mark.asyncio
    async def test_history_newest_first(self, console):
        """Test history lists the latest order first."""
        for _ in range(3):
            await console.add_order("Bob", "Cola", "5 Elm Road", "Cash on Delivery")

        assert [o.id for o in await console.history()] == [3, 2, 1]

    @pytest.mark.asyncio
    async def test_assignable_agents_excludes_busy_and_unavailable(self, console, roster):
        """Test the picker only offers free, available agents."""
        await console.add_order("Bob", "Cola", "5 Elm Road", "Cash on Delivery")
        await console.approve(1)
        await console.assign_agent(1, "da1")
        roster.set_availability("da2", False)

        agents = await console.assignable_agents()

        assert [a.id for a in agents] == ["da3", "da4"]


class TestSalesSummary:
    """Test revenue reporting."""

    @pytest.mark.asyncio
    async def test_only_delivered_orders_count(self, console):
        """Test revenue sums delivered orders only."""
        await console.add_order("Bob", "Cola", "5 Elm Road", "Cash on Delivery", price=2.0)
        await console.add_order("Ann", "Pizza", "6 Elm Road", "Cash on Delivery", price=12.5)
        await console.add_order("Cat", "Fries", "7 Elm Road", "Cash on Delivery", price=3.5)
        for order_id, agent_id in ((1, "da1"), (2, "da2")):
            await console.approve(order_id)
            await console.assign_agent(order_id, agent_id)
            await console.mark_delivered(order_id)
        await console.cancel(3)

        summary = await console.sales_summary()

        assert summary.delivered_orders == 2
        assert summary.total_revenue == 14.5
        assert summary.todays_delivered_orders == 2
        assert summary.todays_revenue == 14.5

    @pytest.mark.asyncio
    async def test_today_filter(self, console):
        """Test orders from another day are excluded from today's figures."""
        await console.add_order("Bob", "Cola", "5 Elm Road", "Cash on Delivery", price=2.0)
        await console.approve(1)
        await console.assign_agent(1, "da1")
        await console.mark_delivered(1)

        tomorrow = datetime.now(timezone.utc).date() + timedelta(days=1)
        summary = await console.sales_summary(today=tomorrow)

        assert summary.delivered_orders == 1
        assert summary.todays_delivered_orders == 0
        assert summary.todays_revenue == 0.0

    @pytest.mark.asyncio
    async def test_empty(self, console):
        """Test an empty store reports zeros."""
        summary = await console.sales_summary(today=date(2026, 1, 1))

        assert summary.delivered_orders == 0
        assert summary.total_revenue == 0.0
