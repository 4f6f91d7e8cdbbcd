"""Unit tests for service wiring and chat session management."""
import pytest

from quickorder.core.dependencies import Services, build_order_repository, build_text_generator
from quickorder.core.exceptions import NotFoundError
from quickorder.services.chat.generator import CannedTextGenerator, OpenAITextGenerator
from quickorder.services.chat.stages import IntakeStage
from quickorder.services.orders.in_memory import InMemoryOrderRepository
from quickorder.services.orders.models import OrderStatus
from quickorder.services.orders.sql import SqlOrderRepository


class TestBuilders:
    """Test backend selection from settings."""

    def test_text_generator_selection(self, test_settings):
        """Test TEXT_GENERATOR picks the generator class."""
        assert isinstance(build_text_generator(test_settings), CannedTextGenerator)
        openai_settings = test_settings.model_copy(update={"text_generator": "openai"})
        assert isinstance(build_text_generator(openai_settings), OpenAITextGenerator)

    def test_order_backend_selection(self, test_settings):
        """Test ORDER_BACKEND picks the repository class."""
        assert isinstance(build_order_repository(test_settings), InMemoryOrderRepository)
        sql_settings = test_settings.model_copy(update={"order_backend": "sql"})
        assert isinstance(build_order_repository(sql_settings), SqlOrderRepository)

    def test_unknown_backend(self, test_settings):
        """Test an unknown backend name is rejected."""
        with pytest.raises(ValueError):
            build_order_repository(test_settings.model_copy(update={"order_backend": "redis"}))
        with pytest.raises(ValueError):
            build_text_generator(test_settings.model_copy(update={"text_generator": "magic"}))

    def test_openai_generator_needs_key(self, test_settings):
        """Test the OpenAI generator is refused without an API key, canned is not."""
        keyless = test_settings.model_copy(update={"openai_api_key": None})
        assert isinstance(build_text_generator(keyless), CannedTextGenerator)
        with pytest.raises(ValueError):
            build_text_generator(keyless.model_copy(update={"text_generator": "openai"}))



class TestChatSessionManager:
    """Test chat session lifecycle through the service graph."""

    @pytest.mark.asyncio
    async def test_sessions_are_independent(self, test_services):
        """Test two customers keep separate stages and transcripts."""
        manager = test_services.session_manager
        first = await manager.create_session()
        second = await manager.create_session()

        await first.handle_user_input("Alice")

        assert first.session_id != second.session_id
        assert first.state.stage == IntakeStage.ASK_ITEM
        assert second.state.stage == IntakeStage.ASK_NAME
        assert len(second.transcript.messages) == 1
        assert set(manager.list_session_ids()) == {first.session_id, second.session_id}

    @pytest.mark.asyncio
    async def test_end_session(self, test_services):
        """Test an ended session and its transcript are forgotten."""
        manager = test_services.session_manager
        flow = await manager.create_session()

        manager.end_session(flow.session_id)

        with pytest.raises(NotFoundError):
            manager.get_session(flow.session_id)
        assert test_services.transcripts.get(flow.session_id) is None

    @pytest.mark.asyncio
    async def test_ended_session_gets_no_notifications(self, test_services):
        """Test approving the order of an ended session does not bring its transcript back."""
        manager = test_services.session_manager
        flow = await manager.create_session()
        for text in ("Alice", "Cola", "5 Elm Road", "online", "yes"):
            await flow.handle_user_input(text)
        order = await flow.confirm_order()
        manager.end_session(flow.session_id)

        approved = await test_services.console.approve(order.id)

        assert approved.status == OrderStatus.APPROVED
        assert test_services.transcripts.get(flow.session_id) is None


    @pytest.mark.asyncio
    async def test_relay_wired_to_store(self, test_services):
        """Test the service graph relays admin actions into the customer's chat."""
        flow = await test_services.session_manager.create_session()
        for text in ("Alice", "Cola", "5 Elm Road", "online", "yes"):
            await flow.handle_user_input(text)
        order = await flow.confirm_order()

        await test_services.console.cancel(order.id)

        notifications = flow.transcript.get_notifications()
        assert len(notifications) == 1
        assert f"#{order.id}" in notifications[0].text
        assert (await test_services.store.get_order(order.id)).status == OrderStatus.CANCELLED
        assert len(test_services.toasts.active()) == 1
