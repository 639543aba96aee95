# src/verona_voice/conversation/history.py
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Tuple

from .types import ChatMessage, Sender

logger = logging.getLogger(__name__)

MessageListener = Callable[[ChatMessage], None]


class ConversationHistory:
    """
    Append-only, ordered chat transcript.

    Timestamps are strictly increasing: when the clock has not advanced since
    the previous message, the new timestamp is bumped by one microsecond.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._messages: List[ChatMessage] = []
        self._listeners: List[MessageListener] = []

    def __len__(self) -> int:
        return len(self._messages)

    @property
    def messages(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def subscribe(self, listener: MessageListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def append(self, sender: Sender, text: str) -> ChatMessage:
        timestamp = self._clock()
        if self._messages and timestamp <= self._messages[-1].timestamp:
            timestamp = self._messages[-1].timestamp + timedelta(microseconds=1)
        message = ChatMessage(id=uuid.uuid4().hex, sender=sender, text=text, timestamp=timestamp)
        self._messages.append(message)
        for listener in list(self._listeners):
            try:
                listener(message)
            except Exception as e:
                logger.error(f"ConversationHistory: Message listener raised: {e}", exc_info=True)
        return message

    def clear(self) -> None:
        """Empties the transcript. Only the orchestrator calls this, and only while closed."""
        count = len(self._messages)
        self._messages.clear()
        logger.debug(f"ConversationHistory: Cleared {count} messages.")
