"""Relays order events to the customer chat and the admin console."""
import logging
from enum import Enum
from typing import Callable, List, Optional, Tuple

from quickorder.services.chat.transcript import ChatMessage, NotificationType, TranscriptRegistry
from quickorder.services.notifications.toasts import ToastNotifier
from quickorder.services.orders.models import OrderCreatedEvent, OrderStatus, TransitionEvent
from quickorder.services.orders.store import OrderStore

logger = logging.getLogger(__name__)


class ViewSurface(str, Enum):
    """Which surface the admin is looking at."""

    CUSTOMER = "customer"
    ADMIN = "admin"


def format_notification(event: TransitionEvent) -> Optional[Tuple[str, NotificationType]]:
    """Customer-facing text and severity for a transition, or None if it is not announced."""
    order_id = event.order_id
    if event.new_status == OrderStatus.APPROVED:
        return (
            f"Great news! Your order #{order_id} has been approved by the admin.",
            NotificationType.SUCCESS,
        )
    if event.new_status == OrderStatus.OUT_FOR_DELIVERY:
        agent_name = event.agent.name if event.agent else "our delivery partner"
        return (
            f"Your order #{order_id} is out for delivery with {agent_name}.",
            NotificationType.INFO,
        )
    if event.new_status == OrderStatus.DELIVERED:
        return (
            f"Your order #{order_id} has been delivered. Enjoy!",
            NotificationType.SUCCESS,
        )
    if event.new_status == OrderStatus.CANCELLED:
        return (
            f"Unfortunately, your order #{order_id} has been cancelled. "
            f"Please contact support for more details.",
            NotificationType.ERROR,
        )
    return None


class NotificationRelay:
    """Turns store events into chat notifications, an unread counter and toasts."""

    def __init__(self, transcripts: TranscriptRegistry, toasts: ToastNotifier):
        self.transcripts = transcripts
        self.toasts = toasts
        self.active_surface = ViewSurface.CUSTOMER
        self.unread_count = 0
        self._unsubscribers: List[Callable[[], None]] = []

    def attach(self, store: OrderStore) -> None:
        """Start listening to a store."""
        self._unsubscribers.append(store.subscribe(self.on_transition))
        self._unsubscribers.append(store.subscribe_created(self.on_order_created))

    def detach(self) -> None:
        """Stop listening."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def on_transition(self, event: TransitionEvent) -> Optional[ChatMessage]:
        """Append the customer notification for a transition."""
        notification = format_notification(event)
        if notification is None:
            return None
        text, notification_type = notification
        if event.session_id is None:
            transcript = self.transcripts.get_or_create(None)
        else:
            transcript = self.transcripts.get(event.session_id)
            if transcript is None:
                logger.debug(
                    f"[RELAY] Order #{event.order_id} {event.new_status.value} - "
                    f"session {event.session_id} has ended, notification dropped"
                )
                return None
        message = transcript.add_notification(text, notification_type)

        if self.active_surface != ViewSurface.CUSTOMER:
            self.unread_count += 1
        logger.info(
            f"[RELAY] Order #{event.order_id} {event.new_status.value} -> "
            f"transcript {transcript.session_id} ({notification_type.value}), unread: {self.unread_count}"
        )
        return message

    def on_order_created(self, event: OrderCreatedEvent) -> None:
        """Raise an admin toast for a new order."""
        self.toasts.push(event.order)

    def switch_surface(self, surface: ViewSurface) -> None:
        """Record the admin's active surface. Viewing the customer surface clears unread."""
        self.active_surface = surface
        if surface == ViewSurface.CUSTOMER:
            self.unread_count = 0
        logger.debug(f"[RELAY] Active surface: {surface.value}, unread: {self.unread_count}")
