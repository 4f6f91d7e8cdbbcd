"""Delivery agent roster."""
import logging
import yaml
from pathlib import Path
from typing import List, Optional

from quickorder.core.exceptions import NotFoundError
from quickorder.services.orders.models import DeliveryAgent

logger = logging.getLogger(__name__)

DEFAULT_AGENTS = [
    DeliveryAgent(id="da1", name="John Doe"),
    DeliveryAgent(id="da2", name="Jane Smith"),
    DeliveryAgent(id="da3", name="Mike Ross"),
    DeliveryAgent(id="da4", name="Rachel Zane"),
]


class AgentRoster:
    """Process-wide list of delivery agents, loaded from YAML configuration.

    The only mutation is the admin availability toggle.
    """

    def __init__(self, agents_file: Optional[str] = None):
        """Initialize with optional roster file path."""
        if agents_file is None:
            agents_file = Path(__file__).parent / "data" / "agents.yaml"
        self.agents_file = Path(agents_file)
        self._agents: Optional[List[DeliveryAgent]] = None

    def _load_agents(self) -> List[DeliveryAgent]:
        """Load agents from YAML file."""
        if self._agents is None:
            if not self.agents_file.exists():
                logger.warning(
                    f"[AGENT ROSTER] Roster file {self.agents_file} not found, using built-in agents"
                )
                self._agents = [agent.model_copy() for agent in DEFAULT_AGENTS]
            else:
                with open(self.agents_file, "r") as f:
                    data = yaml.safe_load(f) or {}
                self._agents = [DeliveryAgent(**agent) for agent in data.get("agents", [])]
                logger.info(f"[AGENT ROSTER] Loaded {len(self._agents)} agents from {self.agents_file}")
        return self._agents

    def list_agents(self) -> List[DeliveryAgent]:
        """Get every agent on the roster."""
        return [agent.model_copy() for agent in self._load_agents()]

    def get_agent(self, agent_id: str) -> DeliveryAgent:
        """Get an agent by id."""
        for agent in self._load_agents():
            if agent.id == agent_id:
                return agent.model_copy()
        raise NotFoundError("Delivery agent", agent_id)

    def available_agents(self) -> List[DeliveryAgent]:
        """Get agents the admin has marked available."""
        return [agent.model_copy() for agent in self._load_agents() if agent.is_available]

    def set_availability(self, agent_id: str, is_available: bool) -> DeliveryAgent:
        """Toggle an agent's availability."""
        for agent in self._load_agents():
            if agent.id == agent_id:
                agent.is_available = is_available
                logger.info(
                    f"[AGENT ROSTER] {agent.name} ({agent.id}) is now "
                    f"{'available' if is_available else 'unavailable'}"
                )
                return agent.model_copy()
        raise NotFoundError("Delivery agent", agent_id)
