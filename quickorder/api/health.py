"""Health check endpoint."""
import logging
from fastapi import APIRouter, Depends, Request

from quickorder.core.dependencies import Services, get_services

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(request: Request, services: Services = Depends(get_services)):
    """Health check endpoint."""
    logger.debug(
        f"[HEALTH] Health check requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    return {
        "status": "healthy",
        "order_backend": services.settings.order_backend,
        "text_generator": services.settings.text_generator,
        "open_sessions": len(services.session_manager.list_session_ids()),
    }
