# src/verona_voice/conversation/types.py
import enum
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Literal, Tuple

from verona_voice.core.types import ErrorKind

logger = logging.getLogger(__name__)

Sender = Literal["user", "agent"]


@dataclass(frozen=True)
class ChatMessage:
    id: str
    sender: Sender
    text: str
    timestamp: datetime


class SessionState(enum.Enum):
    CLOSED = "closed"
    AWAITING_WELCOME = "awaiting_welcome"
    LISTENING = "listening"
    THINKING = "thinking"
    SPEAKING = "speaking"


@dataclass(frozen=True)
class ConversationContext:
    """Product ids from the most recent recommendation turn, in the order the model returned them."""
    last_recommended_product_ids: Tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.last_recommended_product_ids


@dataclass(frozen=True)
class SessionStatus:
    """
    Status line shown by the host.

    Persistent statuses (missing capability, denied permission, missing
    device) stay until the session closes; transient ones are replaced by
    the next turn.
    """
    kind: ErrorKind
    message: str
    persistent: bool = False
