"""Intake flow stage enumeration."""
from enum import Enum


class IntakeStage(str, Enum):
    """Stages of the chat ordering script."""

    GREETING = "greeting"  # Session start, or after the customer rejected the summary
    ASK_NAME = "ask_name"
    ASK_ITEM = "ask_item"
    ASK_ADDRESS = "ask_address"
    ASK_PAYMENT = "ask_payment"
    CONFIRMATION = "confirmation"  # Summary shown, waiting for "yes"
    ORDER_PLACED = "order_placed"  # Terminal for the session

    def __str__(self) -> str:
        """Return the string value of the stage."""
        return self.value
