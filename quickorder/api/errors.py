"""Translation of service errors into HTTP errors."""
import logging
from fastapi import HTTPException

from quickorder.core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    OrderValidationError,
    SessionBusyError,
)

logger = logging.getLogger(__name__)


def to_http_exception(error: Exception, tag: str) -> HTTPException:
    """Map a service error to an HTTPException and log it under the route's tag."""
    if isinstance(error, HTTPException):
        return error
    if isinstance(error, NotFoundError):
        logger.info(f"[{tag}] Not found - {str(error)}")
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, (InvalidTransitionError, SessionBusyError)):
        logger.warning(f"[{tag}] Conflict - {type(error).__name__}: {str(error)}")
        return HTTPException(status_code=409, detail=str(error))
    if isinstance(error, OrderValidationError):
        logger.warning(f"[{tag}] Validation failed - {error.errors}")
        return HTTPException(status_code=422, detail=error.errors)

    logger.error(
        f"[{tag}] Unexpected error - {type(error).__name__}: {str(error)}",
        exc_info=error,
    )
    return HTTPException(status_code=500, detail=f"Internal error: {str(error)}")
