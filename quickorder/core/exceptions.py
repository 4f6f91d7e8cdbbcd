"""Domain errors raised by the ordering services."""
from typing import List, Optional


class QuickOrderError(Exception):
    """Base class for all service-level errors."""


class GenerationError(QuickOrderError):
    """The external text generator failed (network, quota, bad key, timeout)."""


class NotFoundError(QuickOrderError):
    """An operation referenced an order, agent or session that does not exist."""

    def __init__(self, kind: str, identifier):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} {identifier} not found")


class InvalidTransitionError(QuickOrderError):
    """An illegal status change was requested (usually a stale view)."""

    def __init__(self, message: str, order_id: Optional[int] = None):
        self.order_id = order_id
        super().__init__(message)


class OrderValidationError(QuickOrderError):
    """Required fields of an admin-created order are missing or invalid."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class SessionBusyError(QuickOrderError):
    """A chat session received input while a bot reply was still pending."""
