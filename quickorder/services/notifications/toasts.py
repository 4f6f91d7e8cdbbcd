"""Auto-dismissing new-order toasts for the admin console."""
import itertools
import logging
import time
from typing import Callable, Dict, List
from pydantic import BaseModel

from quickorder.core.exceptions import NotFoundError
from quickorder.services.orders.models import Order

logger = logging.getLogger(__name__)


class Toast(BaseModel):
    """A transient new-order alert."""

    id: int
    order_id: int
    message: str
    created_at: float
    expires_at: float


class ToastNotifier:
    """Holds toasts until they time out or are dismissed.

    Each toast expires on its own timer; expired toasts are dropped whenever
    a toast is raised or the active list is read.
    """

    def __init__(self, timeout_seconds: float = 6.0, clock: Callable[[], float] = time.monotonic):
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self._toasts: Dict[int, Toast] = {}
        self._ids = itertools.count(1)

    def push(self, order: Order) -> Toast:
        """Raise a toast for a newly arrived order."""
        self._prune()
        now = self.clock()
        toast = Toast(
            id=next(self._ids),
            order_id=order.id,
            message=f"New order #{order.id} from {order.customer_name}: {order.item}",
            created_at=now,
            expires_at=now + self.timeout_seconds,
        )
        self._toasts[toast.id] = toast
        logger.info(f"[TOASTS] Toast {toast.id} raised for order #{order.id}")
        return toast

    def _prune(self) -> None:
        now = self.clock()
        for toast_id in [t.id for t in self._toasts.values() if t.expires_at <= now]:
            del self._toasts[toast_id]

    def active(self) -> List[Toast]:
        """Toasts that have not expired or been dismissed, oldest first."""
        self._prune()
        return list(self._toasts.values())

    def dismiss(self, toast_id: int) -> None:
        """Dismiss a toast before it times out."""
        self._prune()
        if toast_id not in self._toasts:
            raise NotFoundError("Toast", toast_id)
        del self._toasts[toast_id]
