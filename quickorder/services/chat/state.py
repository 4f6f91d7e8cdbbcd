"""Intake conversation state."""
from typing import Optional
from pydantic import BaseModel, Field

from quickorder.services.chat.stages import IntakeStage
from quickorder.services.orders.models import OrderDraft


class IntakeState(BaseModel):
    """Working memory of one customer's ordering conversation."""

    session_id: str
    stage: IntakeStage = IntakeStage.GREETING
    draft: OrderDraft = Field(default_factory=OrderDraft)
    awaiting_final_confirmation: bool = False  # "yes" typed, confirm step open
    is_bot_typing: bool = False  # a generation request is in flight
    order_id: Optional[int] = None

    def reset_draft(self) -> None:
        """Discard everything collected so far."""
        self.draft = OrderDraft()
        self.awaiting_final_confirmation = False
