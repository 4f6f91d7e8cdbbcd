"""Admin notification endpoints: unread counter, active surface and toasts."""
import logging
from typing import List
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from quickorder.api.auth import require_auth
from quickorder.api.errors import to_http_exception
from quickorder.core.dependencies import get_notification_relay, get_toast_notifier
from quickorder.services.notifications.relay import NotificationRelay, ViewSurface
from quickorder.services.notifications.toasts import Toast, ToastNotifier

router = APIRouter(dependencies=[Depends(require_auth)])
logger = logging.getLogger(__name__)


class NotificationStatus(BaseModel):
    """Unread counter response model."""
    active_surface: ViewSurface
    unread_count: int


class SurfaceUpdate(BaseModel):
    """Surface switch request model."""
    surface: ViewSurface


def _status(relay: NotificationRelay) -> NotificationStatus:
    return NotificationStatus(active_surface=relay.active_surface, unread_count=relay.unread_count)


@router.get("/api/notifications", response_model=NotificationStatus)
async def get_notification_status(relay: NotificationRelay = Depends(get_notification_relay)):
    """Unread customer notifications since the customer surface was last shown."""
    return _status(relay)


@router.post("/api/notifications/surface", response_model=NotificationStatus)
async def switch_surface(
    update: SurfaceUpdate,
    relay: NotificationRelay = Depends(get_notification_relay),
):
    """Record which surface is in front."""
    relay.switch_surface(update.surface)
    return _status(relay)


@router.get("/api/notifications/toasts", response_model=List[Toast])
async def list_toasts(toasts: ToastNotifier = Depends(get_toast_notifier)):
    """New-order toasts that have not expired."""
    return toasts.active()


@router.delete("/api/notifications/toasts/{toast_id}", status_code=204)
async def dismiss_toast(toast_id: int, toasts: ToastNotifier = Depends(get_toast_notifier)):
    """Dismiss a toast early."""
    try:
        toasts.dismiss(toast_id)
    except Exception as e:
        raise to_http_exception(e, "TOASTS")
