"""Chat intake flow: the scripted conversation that turns a chat into an order."""
import asyncio
import logging
from typing import List, Optional, Sequence

from quickorder.core.exceptions import GenerationError, InvalidTransitionError, SessionBusyError
from quickorder.services.chat import prompt
from quickorder.services.chat.payment import match_payment_method
from quickorder.services.chat.stages import IntakeStage
from quickorder.services.chat.state import IntakeState
from quickorder.services.chat.transcript import ChatMessage, ChatTranscript, Sender
from quickorder.services.chat.generator import TextGenerator
from quickorder.services.menu.repository import MenuRepository
from quickorder.services.orders.models import Order, OrderDraft
from quickorder.services.orders.store import OrderStore

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Sorry, I'm having some trouble right now. Please try again later."
ORDER_IN_PROGRESS_MESSAGE = (
    "Your order is already being processed. You'll be notified here of any updates. "
    "Please start a new chat if you'd like to place another order."
)
CONFIRM_KEYWORD = "yes"


class IntakeFlow:
    """Drives one customer through name, item, address and payment, then places the order.

    A stage (and the draft) only moves forward once the bot reply for that
    step has been generated. If generation fails or times out, a fallback
    message is shown and the customer can simply send the same input again.
    """

    def __init__(
        self,
        state: IntakeState,
        transcript: ChatTranscript,
        store: OrderStore,
        generator: TextGenerator,
        payment_methods: Sequence[str],
        bot_name: str = "Quick Eats Bot",
        menu_repository: Optional[MenuRepository] = None,
        generation_timeout: Optional[float] = 20.0,
    ):
        self.state = state
        self.transcript = transcript
        self.store = store
        self.generator = generator
        self.payment_methods = list(payment_methods)
        self.bot_name = bot_name
        self.menu_repository = menu_repository
        self.generation_timeout = generation_timeout

    @property
    def session_id(self) -> str:
        return self.state.session_id

    def _begin_turn(self) -> None:
        if self.state.is_bot_typing:
            raise SessionBusyError(f"Session {self.session_id} is still waiting for a bot reply")
        self.state.is_bot_typing = True

    def _end_turn(self) -> None:
        self.state.is_bot_typing = False

    async def _generate(self, prompt_text: str) -> Optional[str]:
        """Get bot text for a prompt. On failure, show the fallback and return None."""
        try:
            return await asyncio.wait_for(
                self.generator.generate(prompt_text), timeout=self.generation_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"[INTAKE FLOW] Generation timed out after {self.generation_timeout}s - "
                f"Session: {self.session_id}, Stage: {self.state.stage.value}"
            )
        except GenerationError as e:
            logger.warning(
                f"[INTAKE FLOW] Generation failed - Session: {self.session_id}, "
                f"Stage: {self.state.stage.value}, Error: {str(e)}"
            )
        self.transcript.add_message(FALLBACK_MESSAGE, Sender.BOT)
        return None

    async def _advance(
        self,
        next_stage: IntakeStage,
        prompt_text: str,
        draft: Optional[OrderDraft] = None,
    ) -> bool:
        """Reply, then commit the new stage and draft. Nothing changes if the reply failed."""
        reply = await self._generate(prompt_text)
        if reply is None:
            return False
        self.transcript.add_message(reply, Sender.BOT)
        old_stage = self.state.stage
        self.state.stage = next_stage
        if draft is not None:
            self.state.draft = draft
        if old_stage != next_stage:
            logger.info(
                f"[INTAKE FLOW] Stage changed: {old_stage.value} -> {next_stage.value} "
                f"- Session: {self.session_id}"
            )
        return True

    async def start(self) -> List[ChatMessage]:
        """Send the greeting and ask for the customer's name."""
        if self.state.stage != IntakeStage.GREETING:
            return []
        start_index = len(self.transcript.messages)
        self._begin_turn()
        try:
            await self._advance(IntakeStage.ASK_NAME, prompt.get_greeting_prompt(self.bot_name))
        finally:
            self._end_turn()
        return self.transcript.messages[start_index:]

    async def handle_user_input(self, user_input: str) -> List[ChatMessage]:
        """Process one customer message. Returns the messages added during this turn."""
        text = user_input.strip()
        if not text:
            return []

        start_index = len(self.transcript.messages)
        self._begin_turn()
        try:
            self.transcript.add_message(text, Sender.USER)
            logger.info(
                f"[INTAKE FLOW] Input received - Session: {self.session_id}, "
                f"Stage: {self.state.stage.value}, Text: '{text[:100]}'"
            )
            await self._dispatch(text)
        finally:
            self._end_turn()
        return self.transcript.messages[start_index:]

    async def _dispatch(self, text: str) -> None:
        stage = self.state.stage
        draft = self.state.draft

        if stage == IntakeStage.GREETING:
            # Restart; this input is not the name
            await self._advance(IntakeStage.ASK_NAME, prompt.get_greeting_prompt(self.bot_name))

        elif stage == IntakeStage.ASK_NAME:
            menu_text = ""
            if self.menu_repository:
                menu_text = await self.menu_repository.get_menu_text()
            await self._advance(
                IntakeStage.ASK_ITEM,
                prompt.get_ask_item_prompt(text, menu_text),
                draft.model_copy(update={"name": text}),
            )

        elif stage == IntakeStage.ASK_ITEM:
            await self._advance(
                IntakeStage.ASK_ADDRESS,
                prompt.get_ask_address_prompt(text),
                draft.model_copy(update={"item": text}),
            )

        elif stage == IntakeStage.ASK_ADDRESS:
            await self._advance(
                IntakeStage.ASK_PAYMENT,
                prompt.get_ask_payment_prompt(text, self.payment_methods),
                draft.model_copy(update={"address": text}),
            )

        elif stage == IntakeStage.ASK_PAYMENT:
            label = match_payment_method(text, self.payment_methods)
            if label is None:
                logger.info(
                    f"[INTAKE FLOW] No payment method matches '{text}' - Session: {self.session_id}"
                )
                await self._advance(
                    IntakeStage.ASK_PAYMENT,
                    prompt.get_payment_retry_prompt(text, self.payment_methods),
                )
            else:
                updated = draft.model_copy(update={"payment_method": label})
                await self._advance(
                    IntakeStage.CONFIRMATION,
                    prompt.get_confirmation_prompt(updated),
                    updated,
                )

        elif stage == IntakeStage.CONFIRMATION:
            if text.lower() == CONFIRM_KEYWORD:
                if await self._advance(
                    IntakeStage.CONFIRMATION, prompt.get_final_confirmation_prompt(draft)
                ):
                    self.state.awaiting_final_confirmation = True
            elif await self._advance(IntakeStage.GREETING, prompt.get_order_rejected_prompt()):
                self.state.reset_draft()
                logger.info(f"[INTAKE FLOW] Draft discarded - Session: {self.session_id}")

        elif stage == IntakeStage.ORDER_PLACED:
            self.transcript.add_message(ORDER_IN_PROGRESS_MESSAGE, Sender.BOT)

    async def confirm_order(self) -> Optional[Order]:
        """Final confirmation step: place the order.

        Returns the new order, or None if the thank-you reply could not be
        generated (nothing is created and the confirmation stays open).
        """
        if self.state.stage != IntakeStage.CONFIRMATION or not self.state.awaiting_final_confirmation:
            raise InvalidTransitionError(
                f"Session {self.session_id} has no order waiting for confirmation"
            )

        self._begin_turn()
        try:
            reply = await self._generate(prompt.get_order_placed_prompt())
            if reply is None:
                return None

            draft = self.state.draft
            price = None
            if self.menu_repository:
                price = await self.menu_repository.get_item_price(draft.item)
            order = await self.store.create_order(draft, session_id=self.session_id, price=price)

            self.transcript.add_message(reply, Sender.BOT)
            self.state.order_id = order.id
            self.state.awaiting_final_confirmation = False
            self.state.stage = IntakeStage.ORDER_PLACED
            logger.info(
                f"[INTAKE FLOW] Stage changed: {IntakeStage.CONFIRMATION.value} -> "
                f"{IntakeStage.ORDER_PLACED.value} - Session: {self.session_id}, Order: #{order.id}"
            )
            return order
        finally:
            self._end_turn()

    def dismiss_confirmation(self) -> None:
        """Close the final confirmation step without ordering. The draft is kept."""
        if not self.state.awaiting_final_confirmation:
            raise InvalidTransitionError(
                f"Session {self.session_id} has no order waiting for confirmation"
            )
        self.state.awaiting_final_confirmation = False
        logger.info(f"[INTAKE FLOW] Final confirmation dismissed - Session: {self.session_id}")
