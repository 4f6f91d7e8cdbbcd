"""Order management API endpoints (admin console)."""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from quickorder.api.auth import require_auth
from quickorder.api.errors import to_http_exception
from quickorder.core.dependencies import get_order_console
from quickorder.services.console.manager import OrderConsole, OrderDashboard, SalesSummary
from quickorder.services.orders.models import Order, OrderStatus


router = APIRouter(dependencies=[Depends(require_auth)])
logger = logging.getLogger(__name__)


class OrderCreate(BaseModel):
    """Admin add-order request model."""
    customer_name: str = ""
    item: str = ""
    address: str = ""
    payment_method: str = ""
    price: Optional[float] = None


class AssignAgentRequest(BaseModel):
    """Agent assignment request model."""
    agent_id: str


# Static paths are declared before /api/orders/{order_id}


@router.get("/api/orders", response_model=List[Order])
async def list_orders(
    request: Request,
    status: Optional[List[OrderStatus]] = Query(None),
    console: OrderConsole = Depends(get_order_console),
):
    """List orders, optionally filtered by one or more statuses."""
    logger.info(
        f"[ORDERS] List requested - statuses: {[s.value for s in status] if status else 'ALL'}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )
    try:
        if status:
            return await console.store.list_by_status(*status)
        return await console.store.list_orders()
    except Exception as e:
        raise to_http_exception(e, "ORDERS")


@router.get("/api/orders/dashboard", response_model=OrderDashboard)
async def get_dashboard(console: OrderConsole = Depends(get_order_console)):
    """Orders grouped by dashboard column."""
    try:
        dashboard = await console.dashboard()
        logger.debug(
            f"[ORDERS] Dashboard - pending: {len(dashboard.pending)}, approved: {len(dashboard.approved)}, "
            f"out for delivery: {len(dashboard.out_for_delivery)}, completed: {len(dashboard.completed)}"
        )
        return dashboard
    except Exception as e:
        raise to_http_exception(e, "ORDERS")


@router.get("/api/orders/history", response_model=List[Order])
async def get_order_history(
    limit: int = Query(100, ge=1),
    console: OrderConsole = Depends(get_order_console),
):
    """All orders, newest first."""
    try:
        orders = await console.history()
        logger.info(f"[ORDERS HISTORY] Returning {min(limit, len(orders))} of {len(orders)} orders")
        return orders[:limit]
    except Exception as e:
        raise to_http_exception(e, "ORDERS HISTORY")


@router.get("/api/orders/sales", response_model=SalesSummary)
async def get_sales_summary(console: OrderConsole = Depends(get_order_console)):
    """Revenue from delivered orders."""
    try:
        return await console.sales_summary()
    except Exception as e:
        raise to_http_exception(e, "ORDERS")


@router.post("/api/orders", response_model=Order, status_code=201)
async def add_order(
    order_req: OrderCreate,
    console: OrderConsole = Depends(get_order_console),
):
    """Create an order from the admin form."""
    logger.info(f"[ORDERS] Add order requested - Customer: '{order_req.customer_name}'")
    try:
        return await console.add_order(
            customer_name=order_req.customer_name,
            item=order_req.item,
            address=order_req.address,
            payment_method=order_req.payment_method,
            price=order_req.price,
        )
    except Exception as e:
        raise to_http_exception(e, "ORDERS")


@router.get("/api/orders/{order_id}", response_model=Order)
async def get_order(order_id: int, console: OrderConsole = Depends(get_order_console)):
    """Get a single order."""
    try:
        return await console.store.get_order(order_id)
    except Exception as e:
        raise to_http_exception(e, "ORDERS")


@router.post("/api/orders/{order_id}/approve", response_model=Order)
async def approve_order(order_id: int, console: OrderConsole = Depends(get_order_console)):
    """Approve a pending order."""
    logger.info(f"[ORDERS] Approve requested - Order: #{order_id}")
    try:
        return await console.approve(order_id)
    except Exception as e:
        raise to_http_exception(e, "ORDERS")


@router.post("/api/orders/{order_id}/assign", response_model=Order)
async def assign_agent(
    order_id: int,
    assign_req: AssignAgentRequest,
    console: OrderConsole = Depends(get_order_console),
):
    """Send an approved order out for delivery with an agent."""
    logger.info(f"[ORDERS] Assign requested - Order: #{order_id}, Agent: {assign_req.agent_id}")
    try:
        return await console.assign_agent(order_id, assign_req.agent_id)
    except Exception as e:
        raise to_http_exception(e, "ORDERS")


@router.post("/api/orders/{order_id}/deliver", response_model=Order)
async def mark_delivered(order_id: int, console: OrderConsole = Depends(get_order_console)):
    """Mark an order as delivered."""
    logger.info(f"[ORDERS] Deliver requested - Order: #{order_id}")
    try:
        return await console.mark_delivered(order_id)
    except Exception as e:
        raise to_http_exception(e, "ORDERS")


@router.post("/api/orders/{order_id}/cancel", response_model=Order)
async def cancel_order(order_id: int, console: OrderConsole = Depends(get_order_console)):
    """Cancel an order that has not been delivered."""
    logger.info(f"[ORDERS] Cancel requested - Order: #{order_id}")
    try:
        return await console.cancel(order_id)
    except Exception as e:
        raise to_http_exception(e, "ORDERS")
