"""Order domain models."""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    """Order lifecycle statuses."""

    PENDING = "Pending"
    APPROVED = "Approved"
    OUT_FOR_DELIVERY = "Out for Delivery"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"

    def __str__(self) -> str:
        """Return the string value of the status."""
        return self.value


class AssignedAgent(BaseModel):
    """Agent snapshot carried on an order. Availability lives on the roster only."""

    id: str
    name: str


class DeliveryAgent(AssignedAgent):
    """Delivery agent on the admin roster."""

    is_available: bool = True


class OrderDraft(BaseModel):
    """Order fields collected during the chat, not yet an order."""

    name: Optional[str] = None
    item: Optional[str] = None
    address: Optional[str] = None
    payment_method: Optional[str] = None

    def is_empty(self) -> bool:
        """True when no field has been collected yet."""
        return not self.model_dump(exclude_none=True)

    def is_complete(self) -> bool:
        """True when every field needed for an order is present."""
        return all([self.name, self.item, self.address, self.payment_method])

    def get_summary(self) -> str:
        """Get a text summary of the draft for prompts."""
        return "\n".join(
            [
                f"- Name: {self.name or ''}",
                f"- Item: {self.item or ''}",
                f"- Address: {self.address or ''}",
                f"- Payment: {self.payment_method or ''}",
            ]
        )


class Order(BaseModel):
    """An order tracked through the status lifecycle."""

    id: int
    customer_name: str
    item: str
    address: str
    payment_method: str
    timestamp: datetime = Field(default_factory=utcnow)
    status: OrderStatus = OrderStatus.PENDING
    delivery_agent: Optional[AssignedAgent] = None
    price: Optional[float] = None
    session_id: Optional[str] = None
    version: int = 1


class NewOrder(BaseModel):
    """Fields of an order before the repository assigns its id."""

    customer_name: str
    item: str
    address: str
    payment_method: str
    timestamp: datetime = Field(default_factory=utcnow)
    price: Optional[float] = None
    session_id: Optional[str] = None


class TransitionEvent(BaseModel):
    """Published after every successful status transition."""

    order_id: int
    old_status: OrderStatus
    new_status: OrderStatus
    agent: Optional[AssignedAgent] = None
    session_id: Optional[str] = None


class OrderCreatedEvent(BaseModel):
    """Published after an order is created."""

    order: Order
