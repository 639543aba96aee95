"""The conversational turn engine."""
from .history import ConversationHistory
from .orchestrator import ConversationOrchestrator
from .types import ChatMessage, ConversationContext, SessionState, SessionStatus

__all__ = [
    "ChatMessage",
    "ConversationContext",
    "ConversationHistory",
    "ConversationOrchestrator",
    "SessionState",
    "SessionStatus",
]
