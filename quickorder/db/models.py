"""Database models."""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Float, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderRecord(Base):
    """Order model."""

    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    session_id = Column(String, index=True, nullable=True)
    customer_name = Column(String, nullable=False)
    item = Column(Text, nullable=False)
    address = Column(Text, nullable=False)
    payment_method = Column(String, nullable=False)
    status = Column(String, default="Pending", nullable=False)  # Pending, Approved, Out for Delivery, Delivered, Cancelled
    delivery_agent_id = Column(String, nullable=True)
    delivery_agent_name = Column(String, nullable=True)
    price = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    version = Column(Integer, default=1, nullable=False)
