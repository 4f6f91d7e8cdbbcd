"""Chat session manager."""
import logging
import uuid
from typing import Dict, List, Optional, Sequence

from quickorder.core.exceptions import NotFoundError
from quickorder.services.chat.flow import IntakeFlow
from quickorder.services.chat.generator import TextGenerator
from quickorder.services.chat.state import IntakeState
from quickorder.services.chat.transcript import TranscriptRegistry
from quickorder.services.menu.repository import MenuRepository
from quickorder.services.orders.store import OrderStore

logger = logging.getLogger(__name__)


class ChatSessionManager:
    """Creates, looks up and ends customer chat sessions."""

    def __init__(
        self,
        store: OrderStore,
        generator: TextGenerator,
        transcripts: TranscriptRegistry,
        payment_methods: Sequence[str],
        bot_name: str = "Quick Eats Bot",
        menu_repository: Optional[MenuRepository] = None,
        generation_timeout: Optional[float] = 20.0,
    ):
        self.store = store
        self.generator = generator
        self.transcripts = transcripts
        self.payment_methods = list(payment_methods)
        self.bot_name = bot_name
        self.menu_repository = menu_repository
        self.generation_timeout = generation_timeout
        self._sessions: Dict[str, IntakeFlow] = {}

    async def create_session(self) -> IntakeFlow:
        """Open a new session and send the greeting."""
        session_id = uuid.uuid4().hex
        flow = IntakeFlow(
            state=IntakeState(session_id=session_id),
            transcript=self.transcripts.get_or_create(session_id),
            store=self.store,
            generator=self.generator,
            payment_methods=self.payment_methods,
            bot_name=self.bot_name,
            menu_repository=self.menu_repository,
            generation_timeout=self.generation_timeout,
        )
        self._sessions[session_id] = flow
        logger.info(f"[SESSION MANAGER] Session created - Session: {session_id}")

        await flow.start()
        return flow

    def get_session(self, session_id: str) -> IntakeFlow:
        """Get an existing session."""
        flow = self._sessions.get(session_id)
        if flow is None:
            raise NotFoundError("Chat session", session_id)
        return flow

    def list_session_ids(self) -> List[str]:
        """Ids of open sessions."""
        return list(self._sessions)

    def end_session(self, session_id: str) -> None:
        """End a session and forget its transcript."""
        flow = self.get_session(session_id)
        del self._sessions[session_id]
        self.transcripts.remove(session_id)
        logger.info(
            f"[SESSION MANAGER] Session ended - Session: {session_id}, "
            f"Final stage: {flow.state.stage.value}, Order: {flow.state.order_id or 'NONE'}"
        )
