"""FastAPI dependencies."""
import logging
from functools import lru_cache
from typing import Optional
from fastapi import Depends

from quickorder.core.config import Settings, settings
from quickorder.services.agents.roster import AgentRoster
from quickorder.services.chat.generator import CannedTextGenerator, OpenAITextGenerator, TextGenerator
from quickorder.services.chat.manager import ChatSessionManager
from quickorder.services.chat.transcript import TranscriptRegistry
from quickorder.services.console.manager import OrderConsole
from quickorder.services.menu.in_memory_menu import InMemoryMenuProvider
from quickorder.services.menu.repository import MenuRepository
from quickorder.services.notifications.relay import NotificationRelay
from quickorder.services.notifications.toasts import ToastNotifier
from quickorder.services.orders.base import OrderRepository
from quickorder.services.orders.in_memory import InMemoryOrderRepository
from quickorder.services.orders.store import OrderStore

logger = logging.getLogger(__name__)


def build_order_repository(config: Settings) -> OrderRepository:
    """Create the order repository selected by ORDER_BACKEND."""
    if config.order_backend == "sql":
        from quickorder.db.database import AsyncSessionLocal
        from quickorder.services.orders.sql import SqlOrderRepository

        return SqlOrderRepository(AsyncSessionLocal)
    if config.order_backend != "memory":
        raise ValueError(f"Unknown order backend '{config.order_backend}'")
    return InMemoryOrderRepository()


def build_text_generator(config: Settings) -> TextGenerator:
    """Create the text generator selected by TEXT_GENERATOR."""
    if config.text_generator == "canned":
        return CannedTextGenerator(bot_name=config.bot_name)
    if config.text_generator != "openai":
        raise ValueError(f"Unknown text generator '{config.text_generator}'")
    if not config.openai_api_key:
        raise ValueError("OPENAI_API_KEY is required when TEXT_GENERATOR is openai")
    return OpenAITextGenerator(
        api_key=config.openai_api_key,
        model=config.openai_model,
        bot_name=config.bot_name,
    )


class Services:
    """Process-wide service graph shared by all requests."""

    def __init__(
        self,
        config: Settings,
        repository: Optional[OrderRepository] = None,
        generator: Optional[TextGenerator] = None,
        roster: Optional[AgentRoster] = None,
        menu_repository: Optional[MenuRepository] = None,
    ):
        self.settings = config
        self.roster = roster or AgentRoster(config.agents_file)
        self.menu_repository = menu_repository or MenuRepository(
            provider=InMemoryMenuProvider(config.menu_file)
        )
        self.store = OrderStore(
            repository or build_order_repository(config),
            self.roster,
            strict_agent_assignment=config.strict_agent_assignment,
        )
        self.transcripts = TranscriptRegistry()
        self.toasts = ToastNotifier(timeout_seconds=config.toast_timeout_seconds)
        self.relay = NotificationRelay(self.transcripts, self.toasts)
        self.relay.attach(self.store)
        self.generator = generator or build_text_generator(config)
        self.session_manager = ChatSessionManager(
            store=self.store,
            generator=self.generator,
            transcripts=self.transcripts,
            payment_methods=config.payment_methods,
            bot_name=config.bot_name,
            menu_repository=self.menu_repository,
            generation_timeout=config.generation_timeout_seconds,
        )
        self.console = OrderConsole(self.store, self.roster, config.payment_methods)


@lru_cache
def get_services() -> Services:
    """Get the shared service graph."""
    logger.info(
        f"[SERVICES] Building services - backend: {settings.order_backend}, "
        f"generator: {settings.text_generator}"
    )
    return Services(settings)


def get_order_store(services: Services = Depends(get_services)) -> OrderStore:
    return services.store


def get_order_console(services: Services = Depends(get_services)) -> OrderConsole:
    return services.console


def get_agent_roster(services: Services = Depends(get_services)) -> AgentRoster:
    return services.roster


def get_chat_session_manager(services: Services = Depends(get_services)) -> ChatSessionManager:
    return services.session_manager


def get_notification_relay(services: Services = Depends(get_services)) -> NotificationRelay:
    return services.relay


def get_toast_notifier(services: Services = Depends(get_services)) -> ToastNotifier:
    return services.toasts


def get_menu_repository(services: Services = Depends(get_services)) -> MenuRepository:
    """Get menu repository instance."""
    return services.menu_repository
