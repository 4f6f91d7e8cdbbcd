"""Delivery agent API endpoints (admin console)."""
import logging
from typing import List
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from quickorder.api.auth import require_auth
from quickorder.api.errors import to_http_exception
from quickorder.core.dependencies import get_agent_roster, get_order_console
from quickorder.services.agents.roster import AgentRoster
from quickorder.services.console.manager import OrderConsole
from quickorder.services.orders.models import DeliveryAgent

router = APIRouter(dependencies=[Depends(require_auth)])
logger = logging.getLogger(__name__)


class AvailabilityUpdate(BaseModel):
    """Availability toggle request model."""
    is_available: bool


@router.get("/api/agents", response_model=List[DeliveryAgent])
async def list_agents(roster: AgentRoster = Depends(get_agent_roster)):
    """Every agent on the roster."""
    try:
        return roster.list_agents()
    except Exception as e:
        raise to_http_exception(e, "AGENTS")


@router.get("/api/agents/assignable", response_model=List[DeliveryAgent])
async def list_assignable_agents(console: OrderConsole = Depends(get_order_console)):
    """Agents that can take a delivery right now."""
    try:
        return await console.assignable_agents()
    except Exception as e:
        raise to_http_exception(e, "AGENTS")


@router.patch("/api/agents/{agent_id}/availability", response_model=DeliveryAgent)
async def set_availability(
    agent_id: str,
    update: AvailabilityUpdate,
    roster: AgentRoster = Depends(get_agent_roster),
):
    """Mark an agent available or unavailable."""
    logger.info(f"[AGENTS] Availability update - Agent: {agent_id}, available: {update.is_available}")
    try:
        return roster.set_availability(agent_id, update.is_available)
    except Exception as e:
        raise to_http_exception(e, "AGENTS")
