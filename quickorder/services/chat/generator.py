"""Text generation collaborators for bot replies."""
import logging
import re
from abc import ABC, abstractmethod
from typing import Dict, Optional
from openai import AsyncOpenAI

from quickorder.core.exceptions import GenerationError

logger = logging.getLogger(__name__)


def get_system_instruction(bot_name: str) -> str:
    """System instruction shared by every bot reply."""
    return (
        f"You are a helpful and very concise customer service chatbot for an ordering "
        f"service named {bot_name}. Your responses should be short, friendly, and sound "
        f"like they are from a WhatsApp message. Do not use markdown or formatting."
    )


class TextGenerator(ABC):
    """Turns a natural-language instruction into a bot reply."""

    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Generate reply text.

        Raises:
            GenerationError: on any provider-side failure
        """
        pass


class OpenAITextGenerator(TextGenerator):
    """Text generator backed by OpenAI chat completions."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", bot_name: str = "Quick Eats Bot"):
        self.client = AsyncOpenAI(api_key=api_key)
        self.model = model
        self.bot_name = bot_name

    async def generate(self, prompt: str) -> str:
        """Generate a bot reply for the prompt."""
        logger.debug(f"[GENERATOR] Prompt ({len(prompt)} chars):\n{prompt}")
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": get_system_instruction(self.bot_name)},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.7,
            )
            content = response.choices[0].message.content
        except Exception as e:
            logger.error(
                f"[GENERATOR] Error generating content - Error: {type(e).__name__}: {str(e)}"
            )
            raise GenerationError("Failed to get response from AI") from e

        if not content or not content.strip():
            raise GenerationError("AI returned an empty response")
        return content.strip()


# Replies used when no language model is configured, keyed by conversation step
CANNED_REPLIES: Dict[str, str] = {
    "GREETING": "Hi there! Welcome to {bot_name}. What's your name so we can start your order?",
    "ASK_ITEM": "Nice to meet you! What would you like to order today?",
    "ASK_ADDRESS": "Great choice! What's the delivery address?",
    "ASK_PAYMENT": "Got it. How would you like to pay?",
    "ASK_PAYMENT_RETRY": "Sorry, I didn't catch that. Which payment method would you like to use?",
    "CONFIRMATION": "Here's your order summary. Type 'yes' to confirm or 'no' to cancel.",
    "FINAL_CONFIRMATION": "Almost done! Please confirm your order one last time.",
    "ORDER_PLACED": "Thank you! Your order has been placed. We'll notify you here once it's approved.",
    "ORDER_REJECTED": "No problem, your order was cancelled. Would you like to start over?",
}

STEP_PATTERN = re.compile(r"^CONVERSATION STEP: (\w+)", re.MULTILINE)


class CannedTextGenerator(TextGenerator):
    """Deterministic offline generator.

    Picks a fixed reply from the CONVERSATION STEP line of the prompt.
    """

    def __init__(self, bot_name: str = "Quick Eats Bot", replies: Optional[Dict[str, str]] = None):
        self.bot_name = bot_name
        self.replies = dict(CANNED_REPLIES)
        if replies:
            self.replies.update(replies)

    async def generate(self, prompt: str) -> str:
        """Return the canned reply for the prompt's step."""
        match = STEP_PATTERN.search(prompt)
        step = match.group(1) if match else ""
        reply = self.replies.get(step)
        if reply is None:
            raise GenerationError(f"No canned reply for step '{step or 'UNKNOWN'}'")
        return reply.format(bot_name=self.bot_name)
