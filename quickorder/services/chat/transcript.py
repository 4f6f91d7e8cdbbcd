"""Chat transcripts."""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional
from pydantic import BaseModel, Field

from quickorder.services.orders.models import utcnow

# Transcript used for orders that did not come from a chat session
DEFAULT_TRANSCRIPT_ID = "default"


class Sender(str, Enum):
    """Who wrote a chat message."""

    USER = "user"
    BOT = "bot"


class NotificationType(str, Enum):
    """Severity of a notification message."""

    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


class ChatMessage(BaseModel):
    """A single chat message."""

    id: int
    text: str
    sender: Sender
    is_notification: bool = False
    notification_type: Optional[NotificationType] = None
    created_at: datetime = Field(default_factory=utcnow)


class ChatTranscript(BaseModel):
    """Append-only message log for one customer session."""

    session_id: str
    messages: List[ChatMessage] = []
    next_message_id: int = 1

    def add_message(
        self,
        text: str,
        sender: Sender,
        notification_type: Optional[NotificationType] = None,
    ) -> ChatMessage:
        """Append a message and return it."""
        message = ChatMessage(
            id=self.next_message_id,
            text=text,
            sender=sender,
            is_notification=notification_type is not None,
            notification_type=notification_type,
        )
        self.next_message_id += 1
        self.messages.append(message)
        return message

    def add_notification(self, text: str, notification_type: NotificationType) -> ChatMessage:
        """Append a bot notification."""
        return self.add_message(text, Sender.BOT, notification_type=notification_type)

    def get_notifications(self) -> List[ChatMessage]:
        """Get notification messages only."""
        return [message for message in self.messages if message.is_notification]

    def get_messages_after(self, message_id: int) -> List[ChatMessage]:
        """Get messages with an id greater than message_id."""
        return [message for message in self.messages if message.id > message_id]


class TranscriptRegistry:
    """Looks up customer transcripts by session id."""

    def __init__(self):
        self._transcripts: Dict[str, ChatTranscript] = {}

    def get_or_create(self, session_id: Optional[str]) -> ChatTranscript:
        """Get the transcript for a session, creating it if needed.

        A missing session id maps to the shared default transcript.
        """
        key = session_id or DEFAULT_TRANSCRIPT_ID
        transcript = self._transcripts.get(key)
        if transcript is None:
            transcript = ChatTranscript(session_id=key)
            self._transcripts[key] = transcript
        return transcript

    def get(self, session_id: str) -> Optional[ChatTranscript]:
        """Get an existing transcript."""
        return self._transcripts.get(session_id)

    def remove(self, session_id: str) -> None:
        """Forget a transcript."""
        self._transcripts.pop(session_id, None)
